"""Unit tests for the ConfigProvider."""

from unittest.mock import patch

from pytest import MonkeyPatch
from sibal.providers.config import Config, ConfigProvider


def test_get_config_returns_config_instance() -> None:
    with patch("sibal.providers.config.Config") as mock_config_constructor:
        config = ConfigProvider.get_config()

    mock_config_constructor.assert_called_once()
    assert config is not None


def test_defaults() -> None:
    config = Config(_env_file=None)

    assert config.DEADLINE_DEFAULT_DAYS_AHEAD == 7
    assert config.DOCUMENT_TEXT_MAX_CHARS == 10000
    assert config.AI_PROMPT_TEXT_MAX_CHARS == 2000
    assert config.PROPOSAL_HISTORY_LIMIT == 5


def test_reads_environment(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("DEADLINE_MAX_ALERTS", "10")
    monkeypatch.setenv("GROQ_MODEL", "other-model")

    config = ConfigProvider.get_config()

    assert config.DEADLINE_MAX_ALERTS == 10
    assert config.GROQ_MODEL == "other-model"


def test_groq_url_gets_trailing_slash() -> None:
    config = Config(GROQ_API_URL="https://api.groq.com/openai/v1")

    assert config.GROQ_API_URL == "https://api.groq.com/openai/v1/"


def test_ai_max_temperature_is_capped(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("AI_MAX_TEMPERATURE", "1.2")

    assert ConfigProvider.get_config().AI_MAX_TEMPERATURE == 0.4


def test_ai_max_temperature_accepts_lower_values() -> None:
    assert Config(_env_file=None, AI_MAX_TEMPERATURE=0.2).AI_MAX_TEMPERATURE == 0.2
    assert Config(_env_file=None, AI_MAX_TEMPERATURE=-1).AI_MAX_TEMPERATURE == 0.0
