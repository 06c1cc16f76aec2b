"""This module defines the service that writes executive summaries of notices."""

import json
from datetime import datetime

from sibal.exceptions.analysis import AiInvocationError, NotFoundError
from sibal.models.enums import AnalysisSource
from sibal.models.notices import Notice
from sibal.models.summaries import (
    CompetitiveLandscape,
    EvaluationCriteria,
    FinancialInfo,
    NoticeSummary,
    NoticeSummaryDraft,
    ParticipationRequirements,
    RisksAndOpportunities,
)
from sibal.providers.ai import AiProvider
from sibal.providers.date import DateProvider
from sibal.providers.logging import Logger, LoggingProvider
from sibal.repositories.notices import NoticesRepository
from sibal.services import heuristics

SYSTEM_PROMPT = (
    "Você é um especialista em licitações públicas com vasta experiência em análise de editais. "
    "Gere resumos detalhados e estruturados em JSON válido, focando em aspectos práticos para empresas "
    "interessadas em participar."
)


class NoticeSummarizerService:
    """Summarizes a notice for bidders and stores the summary on it."""

    notices_repo: NoticesRepository
    ai_provider: AiProvider[NoticeSummaryDraft]
    logger: Logger

    def __init__(self, notices_repo: NoticesRepository, ai_provider: AiProvider[NoticeSummaryDraft]) -> None:
        """Initializes the service with its dependencies.

        Args:
            notices_repo: The repository used to read and annotate notices.
            ai_provider: An AI provider bound to `NoticeSummaryDraft`.
        """
        self.notices_repo = notices_repo
        self.ai_provider = ai_provider
        self.logger = LoggingProvider().get_logger()

    def summarize(
        self, notice_id: str, focus_areas: list[str] | None = None, now: datetime | None = None
    ) -> NoticeSummary:
        """Summarizes a notice.

        Args:
            notice_id: The ID of the notice.
            focus_areas: Topics the summary should stress.
            now: The reference instant, mostly for tests.

        Returns:
            The validated summary.

        Raises:
            NotFoundError: If the notice does not exist.
        """
        notice = self.notices_repo.get_notice(notice_id)
        if notice is None:
            raise NotFoundError("Edital", notice_id)

        try:
            draft = self.ai_provider.get_structured_output(
                self._build_prompt(notice, focus_areas or []),
                SYSTEM_PROMPT,
                temperature=0.2,
                max_tokens=3000,
            )
            summary = self.validate_and_enrich(draft, notice)
        except AiInvocationError as e:
            self.logger.warning(f"AI summary failed for notice {notice_id}, using template: {e}")
            summary = heuristics.generate_summary_fallback(notice, now or DateProvider.now())

        self.notices_repo.update_notice(
            notice.id,
            {"summary": summary.executive_summary, "detailed_summary": summary.model_dump(mode="json")},
        )
        self.logger.info(f"Notice {notice_id} summarized from {summary.source} output.")
        return summary

    def validate_and_enrich(self, draft: NoticeSummaryDraft, notice: Notice) -> NoticeSummary:
        """Fills the documented defaults into a model-written summary.

        Args:
            draft: The model's answer.
            notice: The summarized notice.

        Returns:
            A complete summary tagged with the AI source.
        """
        financial = draft.financial_info or FinancialInfo()
        participation = draft.participation_requirements or ParticipationRequirements()
        criteria = draft.evaluation_criteria or EvaluationCriteria()
        landscape = draft.competitive_landscape or CompetitiveLandscape()

        return NoticeSummary(
            executive_summary=draft.executive_summary or f"Resumo do edital {notice.title}",
            key_requirements=draft.key_requirements or [],
            technical_specifications=draft.technical_specifications or [],
            deadlines=draft.deadlines or [],
            financial_info=FinancialInfo(
                estimated_value=(
                    financial.estimated_value if financial.estimated_value is not None else notice.value_or_zero
                ),
                payment_terms=financial.payment_terms or "Conforme edital",
                guarantee_required=financial.guarantee_required if financial.guarantee_required is not None else True,
                guarantee_percentage=(
                    financial.guarantee_percentage if financial.guarantee_percentage is not None else 5
                ),
            ),
            participation_requirements=participation,
            evaluation_criteria=EvaluationCriteria(
                technical_weight=criteria.technical_weight if criteria.technical_weight is not None else 70,
                price_weight=criteria.price_weight if criteria.price_weight is not None else 30,
                criteria_details=criteria.criteria_details,
            ),
            risks_and_opportunities=draft.risks_and_opportunities or RisksAndOpportunities(),
            competitive_landscape=CompetitiveLandscape(
                estimated_participants=(
                    landscape.estimated_participants if landscape.estimated_participants is not None else 5
                ),
                market_analysis=landscape.market_analysis or "Análise não disponível",
                success_factors=landscape.success_factors,
            ),
            source=AnalysisSource.AI,
        )

    @staticmethod
    def _build_prompt(notice: Notice, focus_areas: list[str]) -> str:
        """Builds the summary prompt."""
        notice_summary = {
            "Título": notice.title,
            "Descrição": notice.description,
            "Órgão": notice.organ,
            "Modalidade": notice.modality,
            "Valor Estimado": f"R$ {heuristics.format_brl(notice.estimated_value)}",
            "Data de Abertura": DateProvider.format_display(notice.opening_date),
            "Prazo de Entrega": DateProvider.format_display(notice.submission_deadline),
            "Status": notice.status or "Não informado",
            "URL": notice.url or "Não informado",
        }
        focus_text = f"\nFoque especialmente em: {', '.join(focus_areas)}\n" if focus_areas else ""
        return f"""
Analise detalhadamente o seguinte edital de licitação e gere um resumo executivo completo:

{json.dumps(notice_summary, indent=2, ensure_ascii=False)}
{focus_text}
Gere apenas um objeto JSON com:

1. executive_summary: resumo executivo em 2-3 parágrafos
2. key_requirements: array com os principais requisitos
3. technical_specifications: array com as especificações técnicas
4. deadlines: array com prazos importantes (type, date, description)
5. financial_info: estimated_value, payment_terms, guarantee_required, guarantee_percentage
6. participation_requirements: legal_requirements, technical_requirements, financial_requirements,
   experience_requirements
7. evaluation_criteria: technical_weight, price_weight, criteria_details
8. risks_and_opportunities: opportunities, risks, recommendations
9. competitive_landscape: estimated_participants, market_analysis, success_factors

Seja detalhado e preciso na análise.
"""
