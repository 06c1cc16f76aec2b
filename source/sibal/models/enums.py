"""This module defines the enumerations shared by the analyzers."""

import unicodedata
from enum import StrEnum
from typing import TypeVar

EnumType = TypeVar("EnumType", bound=StrEnum)


def _fold(value: str) -> str:
    """Lowercases a label and strips its accents."""
    normalized = unicodedata.normalize("NFKD", value.strip().lower())
    return "".join(char for char in normalized if not unicodedata.combining(char)).replace(" ", "_")


def parse_enum(enum_cls: type[EnumType], value: object, default: EnumType) -> EnumType:
    """Maps a loosely written label onto an enum member.

    Model answers often drop accents or change case ("medio", "Alto"), so the
    comparison ignores both.

    Args:
        enum_cls: The target enumeration.
        value: The raw value to interpret.
        default: The member returned when nothing matches.

    Returns:
        The matching member, or the default.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return default
    folded = _fold(value)
    for member in enum_cls:
        if _fold(member.value) == folded or member.name.lower() == folded:
            return member
    return default


class AnalysisSource(StrEnum):
    """Identifies which strategy produced an analyzer result."""

    AI = "ai"
    HEURISTIC = "heuristic"


class ConfidenceLevel(StrEnum):
    """A coarse reliability tag attached to analyzer results."""

    LOW = "baixa"
    MEDIUM = "média"
    HIGH = "alta"


class RiskLevel(StrEnum):
    """Risk tiers, ordered from the least to the most severe."""

    LOW = "baixo"
    MEDIUM = "médio"
    HIGH = "alto"
    CRITICAL = "crítico"


class ImpactLevel(StrEnum):
    """The impact of a single risk factor."""

    LOW = "baixo"
    MEDIUM = "médio"
    HIGH = "alto"


class MarketDifficulty(StrEnum):
    """How hard the market around a notice is expected to be."""

    EASY = "fácil"
    MODERATE = "moderado"
    HARD = "difícil"
    VERY_HARD = "muito_difícil"


class UrgencyLevel(StrEnum):
    """Urgency tiers for deadline alerts, ordered from the lowest."""

    LOW = "baixa"
    MEDIUM = "média"
    HIGH = "alta"
    CRITICAL = "crítica"


class Priority(StrEnum):
    """Priority of checklist items and recommendations."""

    HIGH = "alta"
    MEDIUM = "média"
    LOW = "baixa"

    @property
    def rank(self) -> int:
        """Sort key where the highest priority comes first."""
        return {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}[self]


class DeadlineStatus(StrEnum):
    """Where a deadline stands relative to the monitoring instant."""

    UPCOMING = "upcoming"
    TODAY = "today"
    OVERDUE = "overdue"


class DeadlineType(StrEnum):
    """The deadline kinds the monitor can track."""

    PROPOSAL_SUBMISSION = "proposal_submission"
    OPENING = "opening"
    PUBLIC_SESSION = "public_session"
    APPEAL = "appeal"

    @property
    def label(self) -> str:
        """The Portuguese label used in alerts and calendar events."""
        return {
            DeadlineType.PROPOSAL_SUBMISSION: "Entrega de Propostas",
            DeadlineType.OPENING: "Abertura das Propostas",
            DeadlineType.PUBLIC_SESSION: "Sessão Pública",
            DeadlineType.APPEAL: "Prazo de Recurso",
        }[self]


class DocumentType(StrEnum):
    """The procurement document kinds accepted by the extractor."""

    NOTICE = "edital"
    ANNEX = "anexo"
    MINUTES = "ata"
    RESULT = "resultado"


class DocumentFormat(StrEnum):
    """File formats the extractor can read, inferred from the URL extension."""

    PDF = "pdf"
    DOCX = "docx"
    XLSX = "xlsx"
    TEXT = "text"


class ProcessingStatus(StrEnum):
    """Terminal states of a document processing run."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class FactorImpact(StrEnum):
    """Direction of a win-probability factor."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class PricingApproach(StrEnum):
    """Pricing strategies a proposal can follow."""

    AGGRESSIVE = "aggressive"
    COMPETITIVE = "competitive"
    PREMIUM = "premium"
    COST_PLUS = "cost_plus"
