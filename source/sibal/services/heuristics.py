"""This module defines the deterministic fallbacks used when the AI model is unavailable.

Every function here is pure: it reads its inputs, never performs I/O and never
raises on malformed text. Weighted decisions are written as `ScoringRule`
tables so that each threshold can be tested on its own.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from sibal.models.documents import (
    Address,
    Contact,
    DocumentSection,
    ExtractedRequirement,
    ExtractedTable,
    KeyDate,
    KeyInformation,
    KeyValue,
)
from sibal.models.enums import (
    AnalysisSource,
    ConfidenceLevel,
    FactorImpact,
    ImpactLevel,
    MarketDifficulty,
    PricingApproach,
    Priority,
)
from sibal.models.insights import (
    CompanyProfile,
    ComplianceCategory,
    ComplianceRequirement,
    CompetitorAnalysis,
    CompetitorRange,
    ExternalResource,
    FinancialInvestment,
    HistoricalProposal,
    HumanResource,
    Milestone,
    PreparationPhase,
    PriceRange,
    PricingStrategy,
    ProposalInsights,
    ProposalRecommendation,
    ProposalRisk,
    ProposalRiskAnalysis,
    ResourceRequirements,
    TeamRequirement,
    TechnicalStrategy,
    TimelineStrategy,
    WinProbability,
    WinProbabilityFactor,
)
from sibal.models.notices import Notice
from sibal.models.risk import (
    CompetitiveAnalysisDraft,
    FinancialAnalysisDraft,
    RiskAnalysisDraft,
    RiskFactor,
)
from sibal.models.summaries import (
    CompetitiveLandscape,
    EvaluationCriteria,
    FinancialInfo,
    NoticeSummary,
    ParticipationRequirements,
    RisksAndOpportunities,
    SummaryDeadline,
)
from sibal.providers.date import DateProvider
from sibal.services.scoring import ScoringEngine, ScoringRule, risk_level_for_score

HIGH_VALUE_THRESHOLD = Decimal("1000000")
SMALL_VALUE_THRESHOLD = Decimal("100000")
SHORT_DEADLINE_DAYS = 7
ESTIMATED_COST_RATIO = Decimal("0.8")
DEFAULT_PROFIT_MARGIN = 15.0
DEFAULT_ROI = 12.0
MAX_FALLBACK_REQUIREMENTS = 30
MAX_SECTIONS = 50

DATE_PATTERN = re.compile(r"(\d{1,2}[/\-]\d{1,2}[/\-]\d{4})")
VALUE_PATTERN = re.compile(r"R\$\s*([\d.,]+)")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"(\(?\d{2}\)?\s*\d{4,5}[-\s]?\d{4})")
ADDRESS_PATTERN = re.compile(r"\b(?:Rua|Av|Avenida|Praça)\s+[^\n]{10,100}", re.IGNORECASE)

_SENTENCE_SPLIT = re.compile(r"(?<=[.;])\s+|\n+")
_OBLIGATION_PATTERN = re.compile(
    r"\b(deverá|deverão|deve|devem|obrigatóri[oa]s?|exigid[oa]s?|necessári[oa]s?|poderá|poderão|facultativ[oa]s?)\b",
    re.IGNORECASE,
)
_OPTIONAL_PATTERN = re.compile(r"\b(poderá|poderão|facultativ[oa]s?|opcional)\b", re.IGNORECASE)
_REQUIREMENT_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Habilitação Jurídica", ("contrato social", "estatuto", "ato constitutivo", "registro comercial")),
    (
        "Regularidade Fiscal e Trabalhista",
        ("certidão", "certidões", "fgts", "cndt", "débitos", "fiscal", "tribut", "cnpj", "inss"),
    ),
    (
        "Qualificação Técnica",
        ("atestado", "capacidade técnica", "acervo", "crea", "responsável técnico", "experiência"),
    ),
    (
        "Qualificação Econômico-Financeira",
        ("balanço", "patrimônio líquido", "falência", "liquidez", "capital social"),
    ),
    ("Proposta Comercial", ("proposta", "preço", "planilha")),
)
_HEADING_PATTERN = re.compile(
    r"^(?:\d+(?:\.\d+)*\.?|CAP[IÍ]TULO\s+[IVXLC\d]+|CL[AÁ]USULA\s+\S+|ANEXO\s+[IVXLC\d]+|SEÇÃO\s+[IVXLC\d]+)"
    r"\s*[-–.:]?\s*\S.*$"
)

RISK_RECOMMENDATIONS = [
    "Revisar documentação cuidadosamente",
    "Verificar capacidade técnica",
    "Analisar concorrência",
    "Preparar proposta com antecedência",
]


def format_brl(value: Decimal | float | int | None) -> str:
    """Formats an amount with Brazilian separators, e.g. ``1.234,56``.

    Args:
        value: The amount.

    Returns:
        The formatted amount, or "não informado" when it is unknown.
    """
    if value is None:
        return "não informado"
    formatted = f"{Decimal(value):,.2f}"
    return formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def parse_brazilian_amount(raw: str) -> Decimal | None:
    """Parses a monetary amount written with Brazilian separators.

    ``1.234,56`` becomes 1234.56 and ``1.000`` becomes 1000. A lone dot
    followed by one or two digits is read as a decimal point.

    Args:
        raw: The digits and separators captured after ``R$``.

    Returns:
        The amount, or None when the text holds no number.
    """
    cleaned = raw.strip().rstrip(".,")
    if not cleaned:
        return None
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif cleaned.count(".") > 1 or re.search(r"\.\d{3}$", cleaned):
        cleaned = cleaned.replace(".", "")
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


@dataclass(frozen=True)
class RiskContext:
    """What the risk rules look at."""

    notice: Notice
    days_to_deadline: int | None


def _is_open_competition(notice: Notice) -> bool:
    return notice.modality.strip().lower() == "concorrência"


RISK_RULES: list[ScoringRule[RiskContext, RiskFactor]] = [
    ScoringRule(
        name="short_deadline",
        predicate=lambda ctx: ctx.days_to_deadline is not None and ctx.days_to_deadline < SHORT_DEADLINE_DAYS,
        delta=25,
        factor=lambda ctx: RiskFactor(
            category="Prazo",
            factor="Prazo muito curto",
            impact=ImpactLevel.HIGH,
            description=f"Apenas {ctx.days_to_deadline} dias até o prazo",
        ),
    ),
    ScoringRule(
        name="high_value",
        predicate=lambda ctx: ctx.notice.value_or_zero > HIGH_VALUE_THRESHOLD,
        delta=20,
        factor=lambda ctx: RiskFactor(
            category="Financeiro",
            factor="Alto valor",
            impact=ImpactLevel.MEDIUM,
            description="Licitação de alto valor requer maior preparação",
        ),
    ),
    ScoringRule(
        name="open_competition",
        predicate=lambda ctx: _is_open_competition(ctx.notice),
        delta=15,
        factor=lambda ctx: RiskFactor(
            category="Modalidade",
            factor="Concorrência pública",
            impact=ImpactLevel.MEDIUM,
            description="Modalidade mais complexa e competitiva",
        ),
    ),
]

COMPETITOR_RULES: list[ScoringRule[Notice, str]] = [
    ScoringRule(name="open_competition", predicate=_is_open_competition, delta=3),
    ScoringRule(name="high_value", predicate=lambda notice: notice.value_or_zero > HIGH_VALUE_THRESHOLD, delta=2),
]

risk_engine: ScoringEngine[RiskContext, RiskFactor] = ScoringEngine(RISK_RULES, base_score=30)
competitor_engine: ScoringEngine[Notice, str] = ScoringEngine(COMPETITOR_RULES, base_score=5)


def _days_to_submission(notice: Notice, now: datetime) -> int | None:
    if notice.submission_deadline is None:
        return None
    return DateProvider.days_until(notice.submission_deadline, now)


def classify_risk_fallback(notice: Notice, now: datetime) -> RiskAnalysisDraft:
    """Scores the risk of a notice from its deadline, value and modality.

    Args:
        notice: The notice to classify.
        now: The reference instant.

    Returns:
        A complete draft whose level already matches the banding of its score.
    """
    result = risk_engine.evaluate(RiskContext(notice=notice, days_to_deadline=_days_to_submission(notice, now)))
    return RiskAnalysisDraft(
        risk_level=risk_level_for_score(result.score).value,
        risk_score=result.score,
        risk_factors=result.factors,
        recommendations=list(RISK_RECOMMENDATIONS),
        competitive_analysis=CompetitiveAnalysisDraft(
            estimated_competitors=competitor_engine.evaluate(notice).score,
            market_difficulty=MarketDifficulty.MODERATE,
            success_probability=max(20, 80 - result.score),
        ),
        financial_analysis=FinancialAnalysisDraft(
            estimated_cost=notice.value_or_zero * ESTIMATED_COST_RATIO,
            profit_margin_estimate=DEFAULT_PROFIT_MARGIN,
            roi_projection=DEFAULT_ROI,
        ),
    )


def extract_key_information_fallback(text: str) -> KeyInformation:
    """Finds dates, amounts, contacts and addresses with regular expressions.

    Each email becomes one contact, paired with the phone number found at the
    same position in the text, if any.

    Args:
        text: The document text.

    Returns:
        The extracted key information.
    """
    dates = [
        KeyDate(date=match, description=f"Data extraída do documento ({index})")
        for index, match in enumerate(DATE_PATTERN.findall(text), start=1)
    ]

    values: list[KeyValue] = []
    for raw in VALUE_PATTERN.findall(text):
        amount = parse_brazilian_amount(raw)
        if amount is not None:
            values.append(KeyValue(amount=amount, description=f"Valor extraído do documento ({len(values) + 1})"))

    phones = PHONE_PATTERN.findall(text)
    contacts = [
        Contact(name=f"Contato {index + 1}", email=email, phone=phones[index] if index < len(phones) else None)
        for index, email in enumerate(EMAIL_PATTERN.findall(text))
    ]

    addresses = [
        Address(address=match.group(0).strip(), context=f"Endereço encontrado no documento ({index})")
        for index, match in enumerate(ADDRESS_PATTERN.finditer(text), start=1)
    ]
    return KeyInformation(dates=dates, values=values, contacts=contacts, addresses=addresses)


def _requirement_category(sentence: str) -> str:
    lowered = sentence.lower()
    for category, keywords in _REQUIREMENT_CATEGORIES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "Geral"


def extract_requirements_fallback(text: str) -> list[ExtractedRequirement]:
    """Collects sentences that state an obligation and groups them by keyword.

    Sentences with "poderá" or "facultativo" are kept as optional
    requirements; every other obligation is mandatory.

    Args:
        text: The document text.

    Returns:
        Up to 30 requirements, in document order and without duplicates.
    """
    requirements: list[ExtractedRequirement] = []
    seen: set[str] = set()
    for raw_sentence in _SENTENCE_SPLIT.split(text):
        sentence = " ".join(raw_sentence.split())
        if len(sentence) < 15 or not _OBLIGATION_PATTERN.search(sentence):
            continue
        key = sentence.lower()
        if key in seen:
            continue
        seen.add(key)
        requirements.append(
            ExtractedRequirement(
                category=_requirement_category(sentence),
                requirement=sentence[:300],
                mandatory=not _OPTIONAL_PATTERN.search(sentence),
            )
        )
        if len(requirements) >= MAX_FALLBACK_REQUIREMENTS:
            break
    return requirements


def detect_sections(pages: list[str]) -> list[DocumentSection]:
    """Finds numbered or upper-case headings, with the page they start on.

    Args:
        pages: The text of each page.

    Returns:
        Up to 50 sections, in reading order.
    """
    sections: list[DocumentSection] = []
    for page_number, page in enumerate(pages, start=1):
        lines = [line.strip() for line in page.splitlines()]
        for index, line in enumerate(lines):
            if not 4 <= len(line) <= 90 or not _HEADING_PATTERN.match(line):
                continue
            letters = [char for char in line if char.isalpha()]
            if not letters or any(char.islower() for char in letters):
                continue
            following = next((candidate for candidate in lines[index + 1 :] if candidate), "")
            sections.append(DocumentSection(title=line, page=page_number, content_summary=following[:120]))
            if len(sections) >= MAX_SECTIONS:
                return sections
    return sections


def calculate_confidence_score(text: str, tables: list[ExtractedTable]) -> int:
    """Scores how trustworthy a text extraction looks.

    Args:
        text: The extracted text.
        tables: The extracted tables.

    Returns:
        50, plus 20 for long texts, 15 for any table and 15 when the text
        mentions a licitação or edital, capped at 100.
    """
    score = 50
    if len(text) > 1000:
        score += 20
    if tables:
        score += 15
    lowered = text.lower()
    if "licitação" in lowered or "edital" in lowered:
        score += 15
    return min(score, 100)


@dataclass(frozen=True)
class InsightContext:
    """What the win-probability rules look at."""

    notice: Notice
    company_profile: CompanyProfile | None
    days_remaining: int | None


def _experience(ctx: InsightContext) -> int | None:
    return ctx.company_profile.experience_years if ctx.company_profile else None


WIN_PROBABILITY_RULES: list[ScoringRule[InsightContext, WinProbabilityFactor]] = [
    ScoringRule(
        name="experienced_company",
        predicate=lambda ctx: (_experience(ctx) or 0) >= 5,
        delta=15,
        factor=lambda ctx: WinProbabilityFactor(
            factor="Experiência da empresa",
            impact=FactorImpact.POSITIVE,
            weight=25,
            description=f"{_experience(ctx)} anos de experiência no setor",
        ),
    ),
    ScoringRule(
        name="inexperienced_company",
        predicate=lambda ctx: _experience(ctx) is not None and (_experience(ctx) or 0) < 2,
        delta=-10,
        factor=lambda ctx: WinProbabilityFactor(
            factor="Experiência da empresa",
            impact=FactorImpact.NEGATIVE,
            weight=25,
            description="Pouca experiência comprovada no setor",
        ),
    ),
    ScoringRule(
        name="comfortable_deadline",
        predicate=lambda ctx: ctx.days_remaining is not None and ctx.days_remaining > 15,
        delta=10,
        factor=lambda ctx: WinProbabilityFactor(
            factor="Prazo disponível",
            impact=FactorImpact.POSITIVE,
            weight=20,
            description=f"{ctx.days_remaining} dias para preparação",
        ),
    ),
    ScoringRule(
        name="tight_deadline",
        predicate=lambda ctx: ctx.days_remaining is not None and ctx.days_remaining < SHORT_DEADLINE_DAYS,
        delta=-15,
        factor=lambda ctx: WinProbabilityFactor(
            factor="Prazo disponível",
            impact=FactorImpact.NEGATIVE,
            weight=20,
            description=f"Apenas {ctx.days_remaining} dias para preparação",
        ),
    ),
    ScoringRule(
        name="large_contract",
        predicate=lambda ctx: ctx.notice.value_or_zero > HIGH_VALUE_THRESHOLD,
        delta=-10,
        factor=lambda ctx: WinProbabilityFactor(
            factor="Contratação de grande porte",
            impact=FactorImpact.NEGATIVE,
            weight=15,
            description="Contratos de alto valor atraem concorrentes mais estruturados",
        ),
    ),
    ScoringRule(
        name="small_contract",
        predicate=lambda ctx: Decimal("0") < ctx.notice.value_or_zero <= SMALL_VALUE_THRESHOLD,
        delta=5,
        factor=lambda ctx: WinProbabilityFactor(
            factor="Contratação de pequeno porte",
            impact=FactorImpact.POSITIVE,
            weight=10,
            description="Menor concorrência esperada em contratos de baixo valor",
        ),
    ),
]

win_probability_engine: ScoringEngine[InsightContext, WinProbabilityFactor] = ScoringEngine(
    WIN_PROBABILITY_RULES, base_score=50
)


def _lost_ratio(historical_proposals: list[HistoricalProposal]) -> float:
    if not historical_proposals:
        return 0.0
    lost = sum(1 for proposal in historical_proposals if proposal.result != "won")
    return lost / len(historical_proposals)


def _pricing_strategy(value: Decimal, historical_proposals: list[HistoricalProposal]) -> PricingStrategy:
    if historical_proposals and _lost_ratio(historical_proposals) >= 0.5:
        approach = PricingApproach.AGGRESSIVE
        ratios = (Decimal("0.80"), Decimal("0.88"), Decimal("0.95"))
        positioning = "Histórico de derrotas sugere preços mais agressivos"
    else:
        approach = PricingApproach.COMPETITIVE
        ratios = (Decimal("0.85"), Decimal("0.92"), Decimal("1"))
        positioning = "Posicionamento competitivo recomendado"
    return PricingStrategy(
        recommended_approach=approach,
        price_range=PriceRange(minimum=value * ratios[0], optimal=value * ratios[1], maximum=value * ratios[2]),
        pricing_factors=[
            "Valor estimado do edital",
            "Margem de lucro desejada",
            "Custos operacionais",
            "Concorrência esperada",
        ],
        competitor_analysis=CompetitorAnalysis(
            estimated_competitor_range=CompetitorRange(min=value * Decimal("0.80"), max=value * Decimal("0.95")),
            market_positioning=positioning,
        ),
    )


def generate_insights_fallback(
    notice: Notice,
    now: datetime,
    company_profile: CompanyProfile | None = None,
    historical_proposals: list[HistoricalProposal] | None = None,
) -> ProposalInsights:
    """Builds complete proposal insights from fixed templates and the win-probability rules.

    Args:
        notice: The notice the proposal targets.
        now: The reference instant.
        company_profile: The bidding company, if known.
        historical_proposals: Past proposals of the company.

    Returns:
        Insights tagged with the heuristic source.
    """
    history = historical_proposals or []
    days_remaining = _days_to_submission(notice, now)
    days = days_remaining if days_remaining is not None else 0
    value = notice.value_or_zero

    win = win_probability_engine.evaluate(
        InsightContext(notice=notice, company_profile=company_profile, days_remaining=days_remaining)
    )
    if company_profile:
        company_text = (
            f"Empresa {company_profile.name} possui {company_profile.experience_years or 0} anos de experiência no setor."
        )
    else:
        company_text = "Análise baseada apenas nos dados do edital."
    deadline_text = f"{days_remaining} dias para preparação" if days_remaining is not None else "prazo não informado"

    recommendations = [
        ProposalRecommendation(
            priority=Priority.HIGH,
            recommendation="Iniciar análise detalhada do edital imediatamente",
            rationale="Tempo limitado para preparação",
            expected_impact="Melhor qualidade da proposta",
        ),
        ProposalRecommendation(
            priority=Priority.MEDIUM,
            recommendation="Formar equipe multidisciplinar",
            rationale="Complexidade do projeto",
            expected_impact="Cobertura completa dos requisitos",
        ),
    ]
    if history and _lost_ratio(history) >= 0.5:
        recommendations.append(
            ProposalRecommendation(
                priority=Priority.MEDIUM,
                recommendation="Revisar as lições aprendidas das propostas anteriores",
                rationale="Mais da metade das propostas recentes não foi vencedora",
                expected_impact="Evitar a repetição de erros de precificação e documentação",
            )
        )

    return ProposalInsights(
        notice_id=notice.id,
        executive_summary=(
            f"Oportunidade de licitação no valor de R$ {format_brl(notice.estimated_value)} "
            f"com {deadline_text}. {company_text}"
        ),
        win_probability=WinProbability(
            score=win.score,
            factors=win.factors,
            confidence_level=ConfidenceLevel.MEDIUM if company_profile else ConfidenceLevel.LOW,
        ),
        pricing_strategy=_pricing_strategy(value, history),
        technical_strategy=TechnicalStrategy(
            key_differentiators=["Qualidade técnica superior", "Experiência comprovada", "Equipe qualificada"],
            technical_approach="Abordagem técnica baseada nas especificações do edital",
            innovation_opportunities=["Soluções inovadoras dentro do escopo", "Melhorias de processo"],
            risk_mitigation=["Planejamento detalhado", "Equipe experiente", "Controle de qualidade"],
            team_requirements=[
                TeamRequirement(role="Gerente de Projeto", experience_required="5+ anos", quantity=1),
                TeamRequirement(role="Especialista Técnico", experience_required="3+ anos", quantity=2),
            ],
        ),
        compliance_checklist=[
            ComplianceCategory(
                category="Documentação Legal",
                requirements=[
                    ComplianceRequirement(item="CNPJ atualizado", action_required="Verificar validade"),
                    ComplianceRequirement(item="Certidões negativas", action_required="Obter certidões atualizadas"),
                ],
            )
        ],
        timeline_strategy=TimelineStrategy(
            preparation_phases=[
                PreparationPhase(
                    phase="Análise do Edital",
                    duration_days=max(2, math.floor(days * 0.2)),
                    key_activities=["Leitura detalhada", "Identificação de requisitos"],
                    critical_path=True,
                ),
                PreparationPhase(
                    phase="Preparação da Proposta",
                    duration_days=max(5, math.floor(days * 0.6)),
                    key_activities=["Elaboração técnica", "Precificação", "Documentação"],
                    dependencies=["Análise do Edital"],
                    critical_path=True,
                ),
            ],
            milestones=[
                Milestone(milestone="Entrega da Proposta", date=notice.submission_deadline, importance="critical")
            ],
        ),
        resource_requirements=ResourceRequirements(
            human_resources=[
                HumanResource(
                    department="Comercial", hours_required=40, skill_level="Senior", cost_estimate=Decimal("8000")
                ),
                HumanResource(
                    department="Técnico", hours_required=60, skill_level="Pleno", cost_estimate=Decimal("9000")
                ),
            ],
            financial_investment=[
                FinancialInvestment(
                    category="Preparação da Proposta",
                    amount=Decimal("15000"),
                    justification="Custos de elaboração e documentação",
                )
            ],
            external_resources=[
                ExternalResource(type="Consultoria Jurídica", cost=Decimal("5000"), necessity="recommended")
            ],
        ),
        risk_analysis=ProposalRiskAnalysis(
            risks=[
                ProposalRisk(
                    category="Prazo",
                    risk="Prazo insuficiente para preparação",
                    probability=Priority.HIGH if days < 10 else Priority.LOW,
                    impact=ImpactLevel.HIGH,
                    mitigation_strategy="Mobilizar equipe dedicada",
                ),
                ProposalRisk(
                    category="Concorrência",
                    risk="Alta concorrência",
                    probability=Priority.MEDIUM,
                    impact=ImpactLevel.MEDIUM,
                    mitigation_strategy="Diferenciação técnica e preço competitivo",
                ),
            ],
            contingency_plans=["Plano B para recursos adicionais", "Estratégia alternativa de precificação"],
        ),
        recommendations=recommendations,
        source=AnalysisSource.HEURISTIC,
    )


def generate_summary_fallback(notice: Notice, now: datetime) -> NoticeSummary:
    """Builds a generic summary from the notice's own fields.

    Args:
        notice: The notice to summarize.
        now: The reference instant.

    Returns:
        A summary tagged with the heuristic source.
    """
    days_remaining = _days_to_submission(notice, now)
    remaining_text = f" ({days_remaining} dias restantes)" if days_remaining is not None else ""
    executive_summary = (
        f"Licitação do {notice.organ or 'órgão não informado'} na modalidade "
        f"{notice.modality or 'não informada'} com valor estimado de R$ {format_brl(notice.estimated_value)}. "
        f"Prazo para entrega de propostas: {DateProvider.format_display(notice.submission_deadline)}"
        f"{remaining_text}. {notice.description}"
    ).strip()

    return NoticeSummary(
        executive_summary=executive_summary,
        key_requirements=[
            "Documentação de habilitação completa",
            "Proposta técnica detalhada",
            "Proposta comercial",
            "Garantia de participação (se exigida)",
        ],
        technical_specifications=[
            "Especificações conforme edital",
            "Padrões de qualidade exigidos",
            "Normas técnicas aplicáveis",
        ],
        deadlines=[
            SummaryDeadline(
                type="Entrega de Propostas",
                date=notice.submission_deadline.isoformat() if notice.submission_deadline else None,
                description="Prazo final para entrega da documentação",
            ),
            SummaryDeadline(
                type="Abertura",
                date=notice.opening_date.isoformat() if notice.opening_date else None,
                description="Data de abertura das propostas",
            ),
        ],
        financial_info=FinancialInfo(
            estimated_value=notice.value_or_zero,
            payment_terms="Conforme edital",
            guarantee_required=True,
            guarantee_percentage=5,
        ),
        participation_requirements=ParticipationRequirements(
            legal_requirements=["CNPJ ativo", "Regularidade fiscal", "Certidões negativas"],
            technical_requirements=["Capacidade técnica comprovada", "Atestados de capacidade"],
            financial_requirements=["Balanço patrimonial", "Índices de liquidez"],
            experience_requirements=["Experiência no ramo", "Atestados de execução"],
        ),
        evaluation_criteria=EvaluationCriteria(
            technical_weight=70,
            price_weight=30,
            criteria_details=["Menor preço", "Melhor técnica", "Qualificação da equipe"],
        ),
        risks_and_opportunities=RisksAndOpportunities(
            opportunities=[
                "Contrato de longo prazo",
                "Possibilidade de renovação",
                "Referência para novos contratos",
            ],
            risks=["Prazo apertado", "Alta concorrência", "Especificações complexas"],
            recommendations=[
                "Analisar edital detalhadamente",
                "Preparar documentação com antecedência",
                "Verificar capacidade de execução",
            ],
        ),
        competitive_landscape=CompetitiveLandscape(
            estimated_participants=8,
            market_analysis="Mercado competitivo com empresas estabelecidas",
            success_factors=["Preço competitivo", "Experiência comprovada", "Qualidade técnica"],
        ),
        source=AnalysisSource.HEURISTIC,
    )
