"""This module defines the service that generates strategic insights for a bid proposal."""

import json
from datetime import datetime
from decimal import Decimal
from typing import Any

from sibal.exceptions.analysis import AiInvocationError, NotFoundError
from sibal.models.enums import AnalysisSource, FactorImpact
from sibal.models.insights import (
    CompanyProfile,
    Competitor,
    HistoricalProposal,
    ProposalInsights,
    ProposalInsightsDraft,
    WinProbabilityFactor,
)
from sibal.models.notices import Notice
from sibal.providers.ai import AiProvider
from sibal.providers.config import Config, ConfigProvider
from sibal.providers.date import DateProvider
from sibal.providers.logging import Logger, LoggingProvider
from sibal.repositories.analyses import AnalysesRepository
from sibal.repositories.notices import NoticesRepository
from sibal.services import heuristics
from sqlalchemy.exc import SQLAlchemyError

SYSTEM_PROMPT = (
    "Você é um consultor especialista em licitações públicas com vasta experiência em estratégia de propostas. "
    "Gere insights detalhados e práticos em JSON válido."
)

HISTORICAL_VALUE_RATIO = Decimal("1.5")
HISTORICAL_VALUE_PENALTY = 10


class ProposalInsightsService:
    """Generates proposal strategy insights and adjusts them with the organ's history."""

    notices_repo: NoticesRepository
    analyses_repo: AnalysesRepository
    ai_provider: AiProvider[ProposalInsightsDraft]
    config: Config
    logger: Logger

    def __init__(
        self,
        notices_repo: NoticesRepository,
        analyses_repo: AnalysesRepository,
        ai_provider: AiProvider[ProposalInsightsDraft],
        config: Config | None = None,
    ) -> None:
        """Initializes the service with its dependencies.

        Args:
            notices_repo: The repository used to read notices.
            analyses_repo: The repository used to store the insights.
            ai_provider: An AI provider bound to `ProposalInsightsDraft`.
            config: The application configuration.
        """
        self.notices_repo = notices_repo
        self.analyses_repo = analyses_repo
        self.ai_provider = ai_provider
        self.config = config or ConfigProvider.get_config()
        self.logger = LoggingProvider().get_logger()

    def generate(
        self,
        notice_id: str,
        company_profile: CompanyProfile | None = None,
        historical_proposals: list[HistoricalProposal] | None = None,
        competitors: list[Competitor] | None = None,
        now: datetime | None = None,
    ) -> ProposalInsights:
        """Generates and stores the proposal insights of a notice.

        Args:
            notice_id: The ID of the notice the proposal targets.
            company_profile: The bidding company.
            historical_proposals: Past proposals of the company.
            competitors: Known competitors.
            now: The reference instant, mostly for tests.

        Returns:
            The generated insights.

        Raises:
            NotFoundError: If the notice does not exist.
        """
        notice = self.notices_repo.get_notice(notice_id)
        if notice is None:
            raise NotFoundError("Edital", notice_id)
        reference = now or DateProvider.now()
        history = historical_proposals or []

        fallback = heuristics.generate_insights_fallback(notice, reference, company_profile, history)
        self.logger.info(f"Generating proposal insights for notice {notice_id}.")
        try:
            draft = self.ai_provider.get_structured_output(
                self._build_prompt(notice, company_profile, history, competitors or []),
                SYSTEM_PROMPT,
                temperature=0.3,
                max_tokens=4000,
            )
            insights = self.complete_draft(draft, fallback)
        except AiInvocationError as e:
            self.logger.warning(f"AI insight generation failed for notice {notice_id}, using rules: {e}")
            insights = fallback

        insights.recommendations.sort(key=lambda recommendation: recommendation.priority.rank)
        insights = self.adjust_with_organ_history(insights, notice)
        self.analyses_repo.upsert_proposal_insights(notice.id, insights)
        self.logger.info(
            f"Insights for notice {notice_id} generated from {insights.source} output "
            f"with win probability {insights.win_probability.score}."
        )
        return insights

    def complete_draft(self, draft: ProposalInsightsDraft, fallback: ProposalInsights) -> ProposalInsights:
        """Fills every section the model left out with the rule-based one.

        Args:
            draft: The model's answer.
            fallback: The rule-based insights of the same notice.

        Returns:
            Complete insights tagged with the AI source.
        """
        missing = [name for name, value in draft if value is None]
        if missing:
            self.logger.info(f"Filled AI insight sections from rules: {', '.join(missing)}.")
        return ProposalInsights(
            notice_id=fallback.notice_id,
            executive_summary=draft.executive_summary or fallback.executive_summary,
            win_probability=draft.win_probability or fallback.win_probability,
            pricing_strategy=draft.pricing_strategy or fallback.pricing_strategy,
            technical_strategy=draft.technical_strategy or fallback.technical_strategy,
            compliance_checklist=(
                draft.compliance_checklist if draft.compliance_checklist is not None else fallback.compliance_checklist
            ),
            timeline_strategy=draft.timeline_strategy or fallback.timeline_strategy,
            resource_requirements=draft.resource_requirements or fallback.resource_requirements,
            risk_analysis=draft.risk_analysis or fallback.risk_analysis,
            recommendations=draft.recommendations if draft.recommendations is not None else fallback.recommendations,
            source=AnalysisSource.AI,
        )

    def adjust_with_organ_history(self, insights: ProposalInsights, notice: Notice) -> ProposalInsights:
        """Lowers the win probability of notices far above the organ's usual value.

        When the notice is worth more than 1.5 times the mean of the organ's
        other recent notices, the score drops by 10 points and a negative
        factor is added. A failed lookup skips the adjustment.

        Args:
            insights: The insights to adjust.
            notice: The notice the insights refer to.

        Returns:
            The adjusted insights.
        """
        try:
            others = self.notices_repo.list_notices_by_organ(
                notice.organ, notice.id, self.config.PROPOSAL_HISTORY_LIMIT
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Could not load the history of organ '{notice.organ}': {e}")
            return insights
        if not others:
            return insights

        average = sum((other.value_or_zero for other in others), Decimal("0")) / len(others)
        if notice.value_or_zero > average * HISTORICAL_VALUE_RATIO:
            self.logger.info(
                f"Notice {notice.id} is worth {notice.value_or_zero}, above 1.5x the organ average of {average:.2f}."
            )
            insights.win_probability.score = max(insights.win_probability.score - HISTORICAL_VALUE_PENALTY, 0)
            insights.win_probability.factors.append(
                WinProbabilityFactor(
                    factor="Valor acima da média histórica",
                    impact=FactorImpact.NEGATIVE,
                    weight=15,
                    description="Licitação com valor significativamente acima da média do órgão",
                )
            )
        return insights

    @staticmethod
    def _build_prompt(
        notice: Notice,
        company_profile: CompanyProfile | None,
        historical_proposals: list[HistoricalProposal],
        competitors: list[Competitor],
    ) -> str:
        """Builds the insight generation prompt."""

        def dump(value: Any) -> str:
            return json.dumps(value, indent=2, ensure_ascii=False, default=str)

        notice_data = notice.prompt_fields()
        return f"""
Analise a seguinte licitação e gere insights estratégicos para elaboração de proposta:

**EDITAL:**
{dump(notice_data)}

**PERFIL DA EMPRESA:**
{dump(company_profile.model_dump(mode="json") if company_profile else None)}

**HISTÓRICO DE PROPOSTAS:**
{dump([proposal.model_dump(mode="json") for proposal in historical_proposals])}

**CONCORRENTES:**
{dump([competitor.model_dump(mode="json") for competitor in competitors])}

**ANÁLISE DE RISCO:**
{dump(notice.risk_analysis)}

**RESUMO DO EDITAL:**
{dump(notice.detailed_summary)}

Gere apenas um objeto JSON com:

1. executive_summary: resumo executivo da oportunidade
2. win_probability: score de 0 a 100, factors (factor, impact positive/negative/neutral, weight, description),
   confidence_level (baixa/média/alta)
3. pricing_strategy: recommended_approach (aggressive/competitive/premium/cost_plus),
   price_range (minimum, optimal, maximum), pricing_factors, competitor_analysis
4. technical_strategy: key_differentiators, technical_approach, innovation_opportunities, risk_mitigation,
   team_requirements (role, experience_required, quantity)
5. compliance_checklist: array de categorias (category, requirements com item, status, action_required)
6. timeline_strategy: preparation_phases (phase, duration_days, key_activities, dependencies, critical_path)
   e milestones (milestone, date, importance)
7. resource_requirements: human_resources, financial_investment, external_resources
8. risk_analysis: risks (category, risk, probability, impact, mitigation_strategy) e contingency_plans
9. recommendations: array com priority (alta/média/baixa), recommendation, rationale, expected_impact

Seja específico, prático e baseado nos dados fornecidos.
"""
