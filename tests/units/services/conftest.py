"""This module contains shared fixtures for the services unit tests."""

from unittest.mock import MagicMock

import pytest
from sibal.providers.config import Config


@pytest.fixture
def config() -> Config:
    """Returns a configuration with the documented defaults."""
    return Config(GROQ_API_KEY=None)


@pytest.fixture
def notices_repo() -> MagicMock:
    """Returns a mocked notices repository."""
    repo = MagicMock()
    repo.list_followed_notice_ids.return_value = set()
    repo.list_notices_by_organ.return_value = []
    return repo


@pytest.fixture
def analyses_repo() -> MagicMock:
    """Returns a mocked analyses repository."""
    return MagicMock()


@pytest.fixture
def ai_provider() -> MagicMock:
    """Returns a mocked AI provider."""
    return MagicMock()
