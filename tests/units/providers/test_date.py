"""Unit tests for the DateProvider."""

from datetime import datetime, timedelta, timezone

import pytest
from sibal.providers.date import DateProvider


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(0), 0),
        (timedelta(seconds=1), 1),
        (timedelta(days=1), 1),
        (timedelta(days=1, hours=1), 2),
        (timedelta(hours=-1), 0),
        (timedelta(days=-1, hours=-1), -1),
    ],
)
def test_days_until_rounds_up(now: datetime, delta: timedelta, expected: int) -> None:
    assert DateProvider.days_until(now + delta, now) == expected


def test_days_until_treats_naive_values_as_utc(now: datetime) -> None:
    naive_deadline = (now + timedelta(days=3)).replace(tzinfo=None)

    assert DateProvider.days_until(naive_deadline, now) == 3


def test_as_utc_converts_other_timezones() -> None:
    brasilia = timezone(timedelta(hours=-3))
    value = datetime(2025, 1, 1, 9, 0, tzinfo=brasilia)

    assert DateProvider.as_utc(value) == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_format_display() -> None:
    assert DateProvider.format_display(datetime(2024, 2, 1)) == "01/02/2024"
    assert DateProvider.format_display(None) == "Não informado"


def test_now_is_aware() -> None:
    assert DateProvider.now().tzinfo is not None
