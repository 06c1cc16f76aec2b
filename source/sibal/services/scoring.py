"""This module defines the generic scoring engine and the fixed banding rules.

Every weighted heuristic of the analyzers is expressed as a table of
`ScoringRule` entries (predicate, delta, factor) evaluated by one
`ScoringEngine`. The banding helpers map scores and remaining days onto the
enumerated tiers used across the results.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from sibal.models.enums import DeadlineStatus, RiskLevel, UrgencyLevel

ContextType = TypeVar("ContextType")
FactorType = TypeVar("FactorType")

URGENCY_ORDER: dict[UrgencyLevel, int] = {
    UrgencyLevel.LOW: 1,
    UrgencyLevel.MEDIUM: 2,
    UrgencyLevel.HIGH: 3,
    UrgencyLevel.CRITICAL: 4,
}

RISK_BANDS: tuple[tuple[int, RiskLevel], ...] = (
    (80, RiskLevel.CRITICAL),
    (60, RiskLevel.HIGH),
    (40, RiskLevel.MEDIUM),
)


@dataclass(frozen=True)
class ScoringRule(Generic[ContextType, FactorType]):
    """A single row of a scoring table.

    Attributes:
        name: A stable identifier of the rule, used in logs.
        predicate: Decides whether the rule applies to a context.
        delta: The amount added to the score when the rule applies.
        factor: Builds the factor reported when the rule applies. It receives
            the same context as the predicate, so descriptions can quote it.
    """

    name: str
    predicate: Callable[[ContextType], bool]
    delta: int
    factor: Callable[[ContextType], FactorType] | None = None


@dataclass
class ScoreResult(Generic[FactorType]):
    """The outcome of evaluating a scoring table."""

    score: int
    factors: list[FactorType] = field(default_factory=list)
    applied_rules: list[str] = field(default_factory=list)


def clamp_score(value: float, lower: int = 0, upper: int = 100) -> int:
    """Rounds a score and clamps it into a closed range.

    Args:
        value: The raw score.
        lower: The smallest allowed score.
        upper: The largest allowed score.

    Returns:
        The rounded, clamped score.
    """
    return max(lower, min(upper, round(value)))


class ScoringEngine(Generic[ContextType, FactorType]):
    """Evaluates an ordered table of scoring rules against a context."""

    rules: Sequence[ScoringRule[ContextType, FactorType]]
    base_score: int
    lower: int
    upper: int

    def __init__(
        self,
        rules: Sequence[ScoringRule[ContextType, FactorType]],
        base_score: int,
        lower: int = 0,
        upper: int = 100,
    ) -> None:
        """Initializes the engine.

        Args:
            rules: The rules, in the order their factors should be reported.
            base_score: The score before any rule applies.
            lower: The smallest score the engine may return.
            upper: The largest score the engine may return.
        """
        self.rules = rules
        self.base_score = base_score
        self.lower = lower
        self.upper = upper

    def evaluate(self, context: ContextType) -> ScoreResult[FactorType]:
        """Applies every matching rule, in order, and clamps the total.

        Args:
            context: The value the predicates and factor builders read.

        Returns:
            The clamped score together with the factors of the rules that applied.
        """
        score = self.base_score
        result: ScoreResult[FactorType] = ScoreResult(score=score)
        for rule in self.rules:
            if not rule.predicate(context):
                continue
            score += rule.delta
            result.applied_rules.append(rule.name)
            if rule.factor is not None:
                result.factors.append(rule.factor(context))
        result.score = clamp_score(score, self.lower, self.upper)
        return result


def risk_level_for_score(score: int) -> RiskLevel:
    """Maps a risk score onto its tier.

    Scores below 40 are baixo, 40 to 59 médio, 60 to 79 alto and 80 or more
    crítico.

    Args:
        score: A score in the 0-100 range.

    Returns:
        The matching risk level.
    """
    for threshold, level in RISK_BANDS:
        if score >= threshold:
            return level
    return RiskLevel.LOW


def classify_deadline(days_remaining: int) -> tuple[DeadlineStatus, UrgencyLevel]:
    """Derives the status and base urgency of a deadline.

    Args:
        days_remaining: Whole days until the deadline, rounded up.

    Returns:
        A ``(status, urgency)`` pair.
    """
    if days_remaining < 0:
        return DeadlineStatus.OVERDUE, UrgencyLevel.CRITICAL
    if days_remaining == 0:
        return DeadlineStatus.TODAY, UrgencyLevel.CRITICAL
    if days_remaining <= 2:
        return DeadlineStatus.UPCOMING, UrgencyLevel.HIGH
    if days_remaining <= 5:
        return DeadlineStatus.UPCOMING, UrgencyLevel.MEDIUM
    return DeadlineStatus.UPCOMING, UrgencyLevel.LOW


def upgrade_urgency(level: UrgencyLevel) -> UrgencyLevel:
    """Raises an urgency by one tier, saturating at crítica.

    Args:
        level: The current urgency.

    Returns:
        The next tier up.
    """
    ordered = sorted(URGENCY_ORDER, key=URGENCY_ORDER.__getitem__)
    position = ordered.index(level)
    return ordered[min(position + 1, len(ordered) - 1)]
