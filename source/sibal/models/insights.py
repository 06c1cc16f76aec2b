"""This module defines the Pydantic models for proposal insight generation."""

import math
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from sibal.models.enums import (
    AnalysisSource,
    ConfidenceLevel,
    FactorImpact,
    ImpactLevel,
    PricingApproach,
    Priority,
    parse_enum,
)


class CompanyProfile(BaseModel):
    """The bidding company, as described by the caller."""

    name: str = ""
    cnpj: str | None = None
    sector: str | None = None
    size: Literal["micro", "pequena", "media", "média", "grande"] | None = None
    experience_years: int | None = Field(None, ge=0)
    specialties: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    annual_revenue: Decimal | None = None
    employee_count: int | None = None


class HistoricalProposal(BaseModel):
    """A past proposal of the company and its outcome."""

    notice_id: str
    result: Literal["won", "lost", "disqualified"]
    bid_value: Decimal
    winning_value: Decimal | None = None
    lessons_learned: str | None = None


class Competitor(BaseModel):
    """A known competitor in the notice's market."""

    name: str
    market_share: float | None = None
    typical_pricing: str | None = None
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class WinProbabilityFactor(BaseModel):
    """A factor that moves the win probability up or down."""

    factor: str
    impact: FactorImpact = FactorImpact.NEUTRAL
    weight: int = Field(0, ge=0, le=100)
    description: str = ""

    @field_validator("impact", mode="before")
    @classmethod
    def coerce_impact(cls, value: Any) -> FactorImpact:
        """Accepts impact labels written in another case."""
        return parse_enum(FactorImpact, value, FactorImpact.NEUTRAL)


class WinProbability(BaseModel):
    """The estimated chance of winning the notice."""

    score: int = Field(..., ge=0, le=100)
    factors: list[WinProbabilityFactor] = Field(default_factory=list)
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, value: Any) -> int:
        """Rounds and clamps the score into the 0-100 range."""
        score = float(value)
        if not math.isfinite(score):
            raise ValueError("score must be a finite number")
        return max(0, min(100, round(score)))

    @field_validator("confidence_level", mode="before")
    @classmethod
    def coerce_confidence(cls, value: Any) -> ConfidenceLevel:
        """Accepts confidence labels written without accents."""
        return parse_enum(ConfidenceLevel, value, ConfidenceLevel.MEDIUM)


class PriceRange(BaseModel):
    """The recommended bid price band."""

    minimum: Decimal
    optimal: Decimal
    maximum: Decimal


class CompetitorRange(BaseModel):
    """The price band competitors are expected to bid in."""

    min: Decimal
    max: Decimal


class CompetitorAnalysis(BaseModel):
    """How the company should position itself against competitors."""

    estimated_competitor_range: CompetitorRange
    market_positioning: str = ""


class PricingStrategy(BaseModel):
    """The recommended pricing approach."""

    recommended_approach: PricingApproach = PricingApproach.COMPETITIVE
    price_range: PriceRange
    pricing_factors: list[str] = Field(default_factory=list)
    competitor_analysis: CompetitorAnalysis | None = None

    @field_validator("recommended_approach", mode="before")
    @classmethod
    def coerce_approach(cls, value: Any) -> PricingApproach:
        """Accepts approach labels written in another case."""
        return parse_enum(PricingApproach, value, PricingApproach.COMPETITIVE)


class TeamRequirement(BaseModel):
    """A role the proposal team needs."""

    role: str
    experience_required: str = ""
    quantity: int = 1


class TechnicalStrategy(BaseModel):
    """How the technical proposal should be built."""

    key_differentiators: list[str] = Field(default_factory=list)
    technical_approach: str = ""
    innovation_opportunities: list[str] = Field(default_factory=list)
    risk_mitigation: list[str] = Field(default_factory=list)
    team_requirements: list[TeamRequirement] = Field(default_factory=list)


class ComplianceRequirement(BaseModel):
    """A single compliance item and its status."""

    item: str
    status: Literal["compliant", "needs_attention", "non_compliant", "unknown"] = "unknown"
    action_required: str | None = None
    deadline: str | None = None


class ComplianceCategory(BaseModel):
    """A group of compliance items."""

    category: str
    requirements: list[ComplianceRequirement] = Field(default_factory=list)


class PreparationPhase(BaseModel):
    """A phase of the proposal preparation plan."""

    phase: str
    duration_days: int = Field(1, ge=0)
    key_activities: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    critical_path: bool = False


class Milestone(BaseModel):
    """A dated milestone of the preparation plan."""

    milestone: str
    date: datetime | None = None
    importance: Literal["critical", "high", "medium", "low"] = "medium"


class TimelineStrategy(BaseModel):
    """The preparation schedule."""

    preparation_phases: list[PreparationPhase] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)


class HumanResource(BaseModel):
    """Internal effort needed from one department."""

    department: str
    hours_required: int = 0
    skill_level: str = ""
    cost_estimate: Decimal = Decimal("0")


class FinancialInvestment(BaseModel):
    """Money that must be spent to prepare the proposal."""

    category: str
    amount: Decimal
    justification: str = ""


class ExternalResource(BaseModel):
    """A third-party service needed for the proposal."""

    type: str
    provider: str | None = None
    cost: Decimal = Decimal("0")
    necessity: Literal["essential", "recommended", "optional"] = "recommended"


class ResourceRequirements(BaseModel):
    """All resources needed to prepare the proposal."""

    human_resources: list[HumanResource] = Field(default_factory=list)
    financial_investment: list[FinancialInvestment] = Field(default_factory=list)
    external_resources: list[ExternalResource] = Field(default_factory=list)


class ProposalRisk(BaseModel):
    """A risk of the bidding effort itself."""

    category: str
    risk: str
    probability: Priority = Priority.MEDIUM
    impact: ImpactLevel = ImpactLevel.MEDIUM
    mitigation_strategy: str = ""

    @field_validator("probability", mode="before")
    @classmethod
    def coerce_probability(cls, value: Any) -> Priority:
        """Accepts probability labels written without accents."""
        return parse_enum(Priority, value, Priority.MEDIUM)

    @field_validator("impact", mode="before")
    @classmethod
    def coerce_impact(cls, value: Any) -> ImpactLevel:
        """Accepts impact labels written without accents."""
        return parse_enum(ImpactLevel, value, ImpactLevel.MEDIUM)


class ProposalRiskAnalysis(BaseModel):
    """The risks of the bidding effort and the plans to contain them."""

    risks: list[ProposalRisk] = Field(default_factory=list)
    contingency_plans: list[str] = Field(default_factory=list)


class ProposalRecommendation(BaseModel):
    """A prioritized recommendation for the proposal team."""

    priority: Priority = Priority.MEDIUM
    recommendation: str
    rationale: str = ""
    expected_impact: str = ""

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, value: Any) -> Priority:
        """Accepts priority labels written without accents."""
        return parse_enum(Priority, value, Priority.MEDIUM)


class ProposalInsightsDraft(BaseModel):
    """The raw shape of proposal insights; any section may be missing."""

    executive_summary: str | None = None
    win_probability: WinProbability | None = None
    pricing_strategy: PricingStrategy | None = None
    technical_strategy: TechnicalStrategy | None = None
    compliance_checklist: list[ComplianceCategory] | None = None
    timeline_strategy: TimelineStrategy | None = None
    resource_requirements: ResourceRequirements | None = None
    risk_analysis: ProposalRiskAnalysis | None = None
    recommendations: list[ProposalRecommendation] | None = None


class ProposalInsights(BaseModel):
    """The validated output of the proposal insight generator."""

    notice_id: str
    executive_summary: str
    win_probability: WinProbability
    pricing_strategy: PricingStrategy
    technical_strategy: TechnicalStrategy
    compliance_checklist: list[ComplianceCategory] = Field(default_factory=list)
    timeline_strategy: TimelineStrategy
    resource_requirements: ResourceRequirements
    risk_analysis: ProposalRiskAnalysis
    recommendations: list[ProposalRecommendation] = Field(default_factory=list)
    source: AnalysisSource
