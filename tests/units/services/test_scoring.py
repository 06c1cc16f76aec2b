"""Unit tests for the scoring engine and the banding helpers."""

import pytest
from sibal.models.enums import DeadlineStatus, RiskLevel, UrgencyLevel
from sibal.services.scoring import (
    ScoringEngine,
    ScoringRule,
    clamp_score,
    classify_deadline,
    risk_level_for_score,
    upgrade_urgency,
)


@pytest.mark.parametrize(("value", "expected"), [(-5, 0), (0, 0), (49.6, 50), (100, 100), (150, 100)])
def test_clamp_score(value: float, expected: int) -> None:
    assert clamp_score(value) == expected


def test_engine_applies_matching_rules_in_order() -> None:
    rules: list[ScoringRule[int, str]] = [
        ScoringRule(name="positive", predicate=lambda n: n > 0, delta=10, factor=lambda n: f"positivo {n}"),
        ScoringRule(name="even", predicate=lambda n: n % 2 == 0, delta=-5, factor=lambda n: "par"),
        ScoringRule(name="large", predicate=lambda n: n > 100, delta=40),
    ]
    engine = ScoringEngine(rules, base_score=50)

    result = engine.evaluate(4)

    assert result.score == 55
    assert result.factors == ["positivo 4", "par"]
    assert result.applied_rules == ["positive", "even"]


def test_engine_clamps_total() -> None:
    rules: list[ScoringRule[int, str]] = [ScoringRule(name="big", predicate=lambda n: True, delta=500)]

    assert ScoringEngine(rules, base_score=50).evaluate(1).score == 100
    assert ScoringEngine(rules, base_score=0, upper=80).evaluate(1).score == 80


@pytest.mark.parametrize(
    ("score", "expected"),
    [
        (0, RiskLevel.LOW),
        (39, RiskLevel.LOW),
        (40, RiskLevel.MEDIUM),
        (59, RiskLevel.MEDIUM),
        (60, RiskLevel.HIGH),
        (79, RiskLevel.HIGH),
        (80, RiskLevel.CRITICAL),
        (100, RiskLevel.CRITICAL),
    ],
)
def test_risk_level_for_score(score: int, expected: RiskLevel) -> None:
    assert risk_level_for_score(score) == expected


@pytest.mark.parametrize(
    ("days", "status", "urgency"),
    [
        (-3, DeadlineStatus.OVERDUE, UrgencyLevel.CRITICAL),
        (0, DeadlineStatus.TODAY, UrgencyLevel.CRITICAL),
        (1, DeadlineStatus.UPCOMING, UrgencyLevel.HIGH),
        (2, DeadlineStatus.UPCOMING, UrgencyLevel.HIGH),
        (3, DeadlineStatus.UPCOMING, UrgencyLevel.MEDIUM),
        (5, DeadlineStatus.UPCOMING, UrgencyLevel.MEDIUM),
        (6, DeadlineStatus.UPCOMING, UrgencyLevel.LOW),
        (45, DeadlineStatus.UPCOMING, UrgencyLevel.LOW),
    ],
)
def test_classify_deadline(days: int, status: DeadlineStatus, urgency: UrgencyLevel) -> None:
    assert classify_deadline(days) == (status, urgency)


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        (UrgencyLevel.LOW, UrgencyLevel.MEDIUM),
        (UrgencyLevel.MEDIUM, UrgencyLevel.HIGH),
        (UrgencyLevel.HIGH, UrgencyLevel.CRITICAL),
        (UrgencyLevel.CRITICAL, UrgencyLevel.CRITICAL),
    ],
)
def test_upgrade_urgency_saturates(level: UrgencyLevel, expected: UrgencyLevel) -> None:
    assert upgrade_urgency(level) == expected
