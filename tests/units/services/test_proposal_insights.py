"""Unit tests for the ProposalInsightsService."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from sibal.exceptions.analysis import AiInvocationError, NotFoundError
from sibal.models.enums import AnalysisSource, FactorImpact, Priority
from sibal.models.insights import (
    CompanyProfile,
    Competitor,
    ProposalInsightsDraft,
    ProposalRecommendation,
    WinProbability,
)
from sibal.models.notices import Notice
from sibal.providers.ai import AiProvider
from sibal.providers.config import Config
from sibal.services import heuristics
from sibal.services.proposal_insights import ProposalInsightsService
from sqlalchemy.exc import OperationalError


@pytest.fixture
def service(
    notices_repo: MagicMock, analyses_repo: MagicMock, ai_provider: MagicMock, config: Config
) -> ProposalInsightsService:
    return ProposalInsightsService(notices_repo, analyses_repo, ai_provider, config)


def test_generate_raises_when_notice_is_missing(service: ProposalInsightsService, notices_repo: MagicMock) -> None:
    notices_repo.get_notice.return_value = None

    with pytest.raises(NotFoundError):
        service.generate("missing")


def test_generate_falls_back_when_ai_fails(
    service: ProposalInsightsService,
    notices_repo: MagicMock,
    analyses_repo: MagicMock,
    ai_provider: MagicMock,
    make_notice: Callable[..., Notice],
    now: datetime,
) -> None:
    notices_repo.get_notice.return_value = make_notice()
    ai_provider.get_structured_output.side_effect = AiInvocationError("no key")

    insights = service.generate("notice-1", now=now)

    assert insights.source == AnalysisSource.HEURISTIC
    assert insights.notice_id == "notice-1"
    assert insights.win_probability.score == 50
    analyses_repo.upsert_proposal_insights.assert_called_once_with("notice-1", insights)


def test_generate_completes_partial_ai_answer(
    service: ProposalInsightsService,
    notices_repo: MagicMock,
    ai_provider: MagicMock,
    make_notice: Callable[..., Notice],
    now: datetime,
) -> None:
    notices_repo.get_notice.return_value = make_notice()
    ai_provider.get_structured_output.return_value = ProposalInsightsDraft(
        executive_summary="Boa oportunidade.",
        win_probability=WinProbability(score=64),
        recommendations=[
            ProposalRecommendation(priority="baixa", recommendation="Monitorar esclarecimentos"),
            ProposalRecommendation(priority="alta", recommendation="Visitar o local"),
        ],
    )

    insights = service.generate(
        "notice-1",
        company_profile=CompanyProfile(name="Tech Ltda", experience_years=3),
        competitors=[Competitor(name="Rival S.A.")],
        now=now,
    )

    assert insights.source == AnalysisSource.AI
    assert insights.executive_summary == "Boa oportunidade."
    assert insights.win_probability.score == 64
    assert insights.technical_strategy.team_requirements[0].role == "Gerente de Projeto"
    assert [item.priority for item in insights.recommendations] == [Priority.HIGH, Priority.LOW]
    prompt = ai_provider.get_structured_output.call_args.args[0]
    assert "Tech Ltda" in prompt
    assert "Rival S.A." in prompt
    assert '"title": "Aquisição de computadores"' in prompt
    assert '"organ": "Prefeitura Municipal de Recife"' in prompt
    assert ai_provider.get_structured_output.call_args.kwargs == {"temperature": 0.3, "max_tokens": 4000}


def test_generate_penalizes_values_above_organ_history(
    service: ProposalInsightsService,
    notices_repo: MagicMock,
    ai_provider: MagicMock,
    make_notice: Callable[..., Notice],
    now: datetime,
) -> None:
    notice = make_notice(estimated_value=Decimal("200000"))
    notices_repo.get_notice.return_value = notice
    notices_repo.list_notices_by_organ.return_value = [
        make_notice(id=f"old-{index}", estimated_value=value)
        for index, value in enumerate(["50000", "150000", "100000", "80000", "120000"])
    ]
    ai_provider.get_structured_output.side_effect = AiInvocationError("no key")

    insights = service.generate("notice-1", now=now)

    notices_repo.list_notices_by_organ.assert_called_once_with(notice.organ, "notice-1", 5)
    assert insights.win_probability.score == 40
    factor = insights.win_probability.factors[-1]
    assert factor.factor == "Valor acima da média histórica"
    assert factor.impact == FactorImpact.NEGATIVE
    assert factor.weight == 15


def test_generate_keeps_score_for_usual_values(
    service: ProposalInsightsService,
    notices_repo: MagicMock,
    ai_provider: MagicMock,
    make_notice: Callable[..., Notice],
    now: datetime,
) -> None:
    notices_repo.get_notice.return_value = make_notice(estimated_value=Decimal("140000"))
    notices_repo.list_notices_by_organ.return_value = [make_notice(id="old", estimated_value=Decimal("100000"))]
    ai_provider.get_structured_output.side_effect = AiInvocationError("no key")

    insights = service.generate("notice-1", now=now)

    assert insights.win_probability.score == 50
    assert insights.win_probability.factors == []


def test_history_lookup_failure_skips_adjustment(
    service: ProposalInsightsService,
    notices_repo: MagicMock,
    ai_provider: MagicMock,
    make_notice: Callable[..., Notice],
    now: datetime,
) -> None:
    notices_repo.get_notice.return_value = make_notice(estimated_value=Decimal("9000000"))
    notices_repo.list_notices_by_organ.side_effect = OperationalError("SELECT", {}, Exception("down"))
    ai_provider.get_structured_output.side_effect = AiInvocationError("no key")

    insights = service.generate("notice-1", now=now)

    assert all(factor.factor != "Valor acima da média histórica" for factor in insights.win_probability.factors)


def test_adjustment_never_goes_below_zero(
    service: ProposalInsightsService, notices_repo: MagicMock, make_notice: Callable[..., Notice], now: datetime
) -> None:
    notice = make_notice(estimated_value=Decimal("1000000"))
    notices_repo.list_notices_by_organ.return_value = [make_notice(id="old", estimated_value=Decimal("10"))]
    insights = heuristics.generate_insights_fallback(notice, now)
    insights.win_probability.score = 5

    adjusted = service.adjust_with_organ_history(insights, notice)

    assert adjusted.win_probability.score == 0


def test_generate_is_idempotent_with_a_fixed_model(
    service: ProposalInsightsService,
    notices_repo: MagicMock,
    analyses_repo: MagicMock,
    ai_provider: MagicMock,
    make_notice: Callable[..., Notice],
    now: datetime,
) -> None:
    notices_repo.get_notice.return_value = make_notice()
    ai_provider.get_structured_output.return_value = ProposalInsightsDraft(executive_summary="Resumo.")

    first = service.generate("notice-1", now=now)
    second = service.generate("notice-1", now=now)

    assert first == second
    assert analyses_repo.upsert_proposal_insights.call_count == 2


@pytest.mark.parametrize(
    "raw",
    ['{"win_probability": {"score": Infinity}}', '{"win_probability": {"score": "Infinity"}}'],
)
def test_generate_falls_back_on_non_finite_ai_score(
    notices_repo: MagicMock,
    analyses_repo: MagicMock,
    config: Config,
    make_notice: Callable[..., Notice],
    now: datetime,
    raw: str,
) -> None:
    notices_repo.get_notice.return_value = make_notice()
    ai_provider = AiProvider(ProposalInsightsDraft, MagicMock(), config)
    service = ProposalInsightsService(notices_repo, analyses_repo, ai_provider, config)

    with patch.object(ai_provider, "invoke_model", return_value=raw):
        insights = service.generate("notice-1", now=now)

    assert insights.source == AnalysisSource.HEURISTIC
    assert insights.win_probability.score == 50
