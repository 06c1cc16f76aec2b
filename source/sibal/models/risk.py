"""This module defines the Pydantic models for notice risk classification.

The `*Draft` models describe what the AI model (or the fallback heuristic) may
return: every field is optional so that a partial answer still validates. The
risk classifier then turns a draft into a fully populated `RiskAnalysis`.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sibal.models.enums import (
    AnalysisSource,
    ConfidenceLevel,
    ImpactLevel,
    MarketDifficulty,
    RiskLevel,
    parse_enum,
)


class RiskFactor(BaseModel):
    """A single reason contributing to the risk of a notice."""

    category: str = Field(..., description="The risk area, e.g. 'Prazo' or 'Financeiro'.")
    factor: str = Field(..., description="A short name for the factor.")
    impact: ImpactLevel = Field(ImpactLevel.MEDIUM, description="How much the factor weighs on the risk.")
    description: str = Field("", description="A one-sentence explanation (in pt-br).")

    @field_validator("impact", mode="before")
    @classmethod
    def coerce_impact(cls, value: Any) -> ImpactLevel:
        """Accepts impact labels written without accents or in another case."""
        return parse_enum(ImpactLevel, value, ImpactLevel.MEDIUM)


class CompetitiveAnalysisDraft(BaseModel):
    """A possibly incomplete competitive analysis."""

    model_config = ConfigDict(allow_inf_nan=False)

    estimated_competitors: int | None = None
    market_difficulty: MarketDifficulty | None = None
    success_probability: float | None = None

    @field_validator("market_difficulty", mode="before")
    @classmethod
    def coerce_difficulty(cls, value: Any) -> MarketDifficulty | None:
        """Accepts difficulty labels written without accents or in another case."""
        if value is None:
            return None
        return parse_enum(MarketDifficulty, value, MarketDifficulty.MODERATE)


class FinancialAnalysisDraft(BaseModel):
    """A possibly incomplete financial analysis."""

    model_config = ConfigDict(allow_inf_nan=False)

    estimated_cost: Decimal | None = None
    profit_margin_estimate: float | None = None
    roi_projection: float | None = None


class RiskAnalysisDraft(BaseModel):
    """The raw shape of a risk analysis before validation and enrichment."""

    model_config = ConfigDict(allow_inf_nan=False)

    risk_level: str | None = None
    risk_score: float | None = None
    risk_factors: list[RiskFactor] | None = None
    recommendations: list[str] | None = None
    competitive_analysis: CompetitiveAnalysisDraft | None = None
    financial_analysis: FinancialAnalysisDraft | None = None


class CompetitiveAnalysis(BaseModel):
    """The expected competition around a notice."""

    estimated_competitors: int = Field(..., ge=0)
    market_difficulty: MarketDifficulty
    success_probability: int = Field(..., ge=0, le=100)


class FinancialAnalysis(BaseModel):
    """A rough financial projection for taking part in a notice."""

    estimated_cost: Decimal
    profit_margin_estimate: float
    roi_projection: float


class RiskAnalysis(BaseModel):
    """The validated output of the risk classifier.

    Attributes:
        risk_level: The tier derived from `risk_score`; never set on its own.
        risk_score: An integer from 0 to 100.
        risk_factors: The factors that drove the score, in evaluation order.
        recommendations: Suggested next steps, most important first.
        competitive_analysis: The expected competition.
        financial_analysis: The financial projection.
        source: Whether the model or the heuristic produced the analysis.
        confidence: How much the caller should trust the analysis.
    """

    risk_level: RiskLevel
    risk_score: int = Field(..., ge=0, le=100)
    risk_factors: list[RiskFactor] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    competitive_analysis: CompetitiveAnalysis
    financial_analysis: FinancialAnalysis
    source: AnalysisSource
    confidence: ConfidenceLevel
