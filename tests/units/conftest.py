"""This module contains shared fixtures for all unit tests."""

import os
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest
from sibal.models.notices import Notice

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def unset_ai_credentials() -> None:
    """Unsets the AI credentials for the entire test session.

    This guarantees that no unit test can reach the real model endpoint.
    """
    os.environ.pop("GROQ_API_KEY", None)


@pytest.fixture
def now() -> datetime:
    """Returns the fixed reference instant used across the tests."""
    return NOW


@pytest.fixture
def make_notice(now: datetime) -> Callable[..., Notice]:
    """Fixture that builds notices with sensible defaults.

    Returns:
        A factory accepting field overrides.
    """

    def _make(**overrides: Any) -> Notice:
        data: dict[str, Any] = {
            "id": "notice-1",
            "title": "Aquisição de computadores",
            "description": "Aquisição de 200 computadores para as escolas municipais.",
            "organ": "Prefeitura Municipal de Recife",
            "modality": "Pregão Eletrônico",
            "estimated_value": Decimal("500000"),
            "opening_date": now + timedelta(days=12),
            "submission_deadline": now + timedelta(days=10),
        }
        data.update(overrides)
        return Notice(**data)

    return _make
