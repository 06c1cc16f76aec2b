"""This module defines the Pydantic models for notice summaries."""

from decimal import Decimal

from pydantic import BaseModel, Field
from sibal.models.enums import AnalysisSource


class SummaryDeadline(BaseModel):
    """A deadline mentioned in a summary."""

    type: str
    date: str | None = None
    description: str = ""


class FinancialInfo(BaseModel):
    """Financial terms of a notice."""

    estimated_value: Decimal | None = None
    payment_terms: str | None = None
    guarantee_required: bool | None = None
    guarantee_percentage: float | None = None


class ParticipationRequirements(BaseModel):
    """What a bidder must prove to take part."""

    legal_requirements: list[str] = Field(default_factory=list)
    technical_requirements: list[str] = Field(default_factory=list)
    financial_requirements: list[str] = Field(default_factory=list)
    experience_requirements: list[str] = Field(default_factory=list)


class EvaluationCriteria(BaseModel):
    """How proposals are judged."""

    technical_weight: float | None = None
    price_weight: float | None = None
    criteria_details: list[str] = Field(default_factory=list)


class RisksAndOpportunities(BaseModel):
    """Upsides and downsides of the notice."""

    opportunities: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class CompetitiveLandscape(BaseModel):
    """The expected competition."""

    estimated_participants: int | None = None
    market_analysis: str | None = None
    success_factors: list[str] = Field(default_factory=list)


class NoticeSummaryDraft(BaseModel):
    """The raw shape of a summary; any section may be missing."""

    executive_summary: str | None = None
    key_requirements: list[str] | None = None
    technical_specifications: list[str] | None = None
    deadlines: list[SummaryDeadline] | None = None
    financial_info: FinancialInfo | None = None
    participation_requirements: ParticipationRequirements | None = None
    evaluation_criteria: EvaluationCriteria | None = None
    risks_and_opportunities: RisksAndOpportunities | None = None
    competitive_landscape: CompetitiveLandscape | None = None


class NoticeSummary(BaseModel):
    """The validated output of the notice summarizer."""

    executive_summary: str
    key_requirements: list[str] = Field(default_factory=list)
    technical_specifications: list[str] = Field(default_factory=list)
    deadlines: list[SummaryDeadline] = Field(default_factory=list)
    financial_info: FinancialInfo
    participation_requirements: ParticipationRequirements
    evaluation_criteria: EvaluationCriteria
    risks_and_opportunities: RisksAndOpportunities
    competitive_landscape: CompetitiveLandscape
    source: AnalysisSource
