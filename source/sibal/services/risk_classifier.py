"""This module defines the service that classifies the risk of taking part in a notice."""

import json
from datetime import datetime

from sibal.exceptions.analysis import AiInvocationError, NotFoundError
from sibal.models.enums import AnalysisSource, ConfidenceLevel, MarketDifficulty
from sibal.models.notices import Notice
from sibal.models.risk import CompetitiveAnalysis, FinancialAnalysis, RiskAnalysis, RiskAnalysisDraft
from sibal.providers.ai import AiProvider
from sibal.providers.date import DateProvider
from sibal.providers.logging import Logger, LoggingProvider
from sibal.repositories.notices import NoticesRepository
from sibal.services import heuristics
from sibal.services.scoring import clamp_score, risk_level_for_score

SYSTEM_PROMPT = (
    "Você é um especialista em licitações públicas e análise de risco. "
    "Retorne sempre respostas em JSON válido, estruturado e detalhado."
)

DEFAULT_RISK_SCORE = 50
DEFAULT_COMPETITORS = 5
DEFAULT_SUCCESS_PROBABILITY = 50


class RiskClassifierService:
    """Scores how risky a notice is for a bidder, with a rule-based fallback."""

    notices_repo: NoticesRepository
    ai_provider: AiProvider[RiskAnalysisDraft]
    logger: Logger

    def __init__(self, notices_repo: NoticesRepository, ai_provider: AiProvider[RiskAnalysisDraft]) -> None:
        """Initializes the service with its dependencies.

        Args:
            notices_repo: The repository used to read and annotate notices.
            ai_provider: An AI provider bound to `RiskAnalysisDraft`.
        """
        self.notices_repo = notices_repo
        self.ai_provider = ai_provider
        self.logger = LoggingProvider().get_logger()

    def classify(self, notice_id: str, company_profile: str | None = None, now: datetime | None = None) -> RiskAnalysis:
        """Classifies the risk of a notice and stores the result on it.

        The AI model is asked first. Any failure of the model falls back to
        the deterministic rules, so only a missing notice or a storage error
        reaches the caller.

        Args:
            notice_id: The ID of the notice to classify.
            company_profile: A free-text description of the bidding company.
            now: The reference instant, mostly for tests.

        Returns:
            The validated risk analysis.

        Raises:
            NotFoundError: If the notice does not exist.
        """
        notice = self.notices_repo.get_notice(notice_id)
        if notice is None:
            raise NotFoundError("Edital", notice_id)
        reference = now or DateProvider.now()

        self.logger.info(f"Classifying risk for notice {notice_id}.")
        try:
            draft = self.ai_provider.get_structured_output(
                self._build_prompt(notice, company_profile),
                SYSTEM_PROMPT,
                temperature=0.3,
                max_tokens=2000,
            )
            source = AnalysisSource.AI
        except AiInvocationError as e:
            self.logger.warning(f"AI risk classification failed for notice {notice_id}, using rules: {e}")
            draft = heuristics.classify_risk_fallback(notice, reference)
            source = AnalysisSource.HEURISTIC

        analysis = self.validate_and_enrich(draft, notice, source)
        self.notices_repo.update_notice(
            notice.id,
            {
                "risk_level": analysis.risk_level.value,
                "risk_score": analysis.risk_score,
                "risk_analysis": analysis.model_dump(mode="json"),
            },
        )
        self.logger.info(
            f"Notice {notice_id} classified as {analysis.risk_level} ({analysis.risk_score}) from {source} output."
        )
        return analysis

    def validate_and_enrich(self, draft: RiskAnalysisDraft, notice: Notice, source: AnalysisSource) -> RiskAnalysis:
        """Turns a possibly partial draft into a complete analysis.

        Missing values get their documented defaults, numbers are clamped to
        their ranges and the level is always re-derived from the score.

        Args:
            draft: The draft produced by the model or by the rules.
            notice: The classified notice.
            source: Which strategy produced the draft.

        Returns:
            The complete risk analysis.
        """
        filled: list[str] = []

        if draft.risk_score is None:
            filled.append("risk_score")
        score = clamp_score(draft.risk_score if draft.risk_score is not None else DEFAULT_RISK_SCORE)
        level = risk_level_for_score(score)
        if draft.risk_level and draft.risk_level != level.value:
            self.logger.info(f"Replacing reported risk level '{draft.risk_level}' with '{level}' for score {score}.")

        competitive = draft.competitive_analysis
        competitors = competitive.estimated_competitors if competitive else None
        difficulty = competitive.market_difficulty if competitive else None
        success = competitive.success_probability if competitive else None
        if competitors is None:
            filled.append("estimated_competitors")
        if difficulty is None:
            filled.append("market_difficulty")
        if success is None:
            filled.append("success_probability")

        financial = draft.financial_analysis
        estimated_cost = financial.estimated_cost if financial else None
        margin = financial.profit_margin_estimate if financial else None
        roi = financial.roi_projection if financial else None
        if estimated_cost is None:
            filled.append("estimated_cost")
        if margin is None:
            filled.append("profit_margin_estimate")
        if roi is None:
            filled.append("roi_projection")

        if filled:
            self.logger.info(f"Filled default values for notice {notice.id}: {', '.join(filled)}.")

        return RiskAnalysis(
            risk_level=level,
            risk_score=score,
            risk_factors=draft.risk_factors or [],
            recommendations=draft.recommendations or [],
            competitive_analysis=CompetitiveAnalysis(
                estimated_competitors=max(0, competitors if competitors is not None else DEFAULT_COMPETITORS),
                market_difficulty=difficulty or MarketDifficulty.MODERATE,
                success_probability=clamp_score(success if success is not None else DEFAULT_SUCCESS_PROBABILITY),
            ),
            financial_analysis=FinancialAnalysis(
                estimated_cost=(
                    estimated_cost
                    if estimated_cost is not None
                    else notice.value_or_zero * heuristics.ESTIMATED_COST_RATIO
                ),
                profit_margin_estimate=margin if margin is not None else heuristics.DEFAULT_PROFIT_MARGIN,
                roi_projection=roi if roi is not None else heuristics.DEFAULT_ROI,
            ),
            source=source,
            confidence=ConfidenceLevel.HIGH if source == AnalysisSource.AI else ConfidenceLevel.LOW,
        )

    @staticmethod
    def _build_prompt(notice: Notice, company_profile: str | None) -> str:
        """Builds the risk classification prompt.

        Args:
            notice: The notice to classify.
            company_profile: A free-text description of the bidding company.

        Returns:
            The prompt text.
        """
        notice_summary = {
            "Título": notice.title,
            "Descrição": notice.description,
            "Órgão": notice.organ,
            "Modalidade": notice.modality,
            "Valor Estimado": f"R$ {heuristics.format_brl(notice.estimated_value)}",
            "Prazo de Entrega": DateProvider.format_display(notice.submission_deadline),
            "Status": notice.status or "Não informado",
        }
        profile_block = f"\nPerfil da Empresa: {company_profile}\n" if company_profile else ""
        return f"""
Analise o seguinte edital de licitação e classifique o risco:

{json.dumps(notice_summary, indent=2, ensure_ascii=False)}
{profile_block}
Classifique o risco considerando:
1. Complexidade técnica
2. Valor do contrato
3. Prazo disponível
4. Requisitos específicos
5. Histórico do órgão
6. Concorrência estimada
7. Capacidade da empresa (se fornecida)

Retorne apenas um objeto JSON com:
- risk_level (baixo/médio/alto/crítico)
- risk_score (inteiro de 0 a 100)
- risk_factors (array de objetos com category, factor, impact (baixo/médio/alto), description)
- recommendations (array de strings)
- competitive_analysis (estimated_competitors, market_difficulty (fácil/moderado/difícil/muito_difícil),
  success_probability de 0 a 100)
- financial_analysis (estimated_cost, profit_margin_estimate, roi_projection)
"""
