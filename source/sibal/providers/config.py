"""This module defines the configuration management for the application.

It uses Pydantic's BaseSettings to create a strongly-typed configuration
class that reads from environment variables and .env files. This ensures
all required configuration is present and valid at startup.
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TEMPERATURE_CEILING = 0.4


class Config(BaseSettings):
    """A Pydantic model for managing application settings.

    It automatically loads configuration from environment variables and .env files.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    LOG_LEVEL: str = "INFO"

    POSTGRES_DRIVER: str = "postgresql"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "sibal"
    POSTGRES_DB_SCHEMA: str | None = None

    HTTP_REQUEST_DELAY_SECONDS: float = 0.0

    GROQ_API_URL: str = "https://api.groq.com/openai/v1/"
    GROQ_API_KEY: str | None = None
    GROQ_MODEL: str = "llama-3.1-70b-versatile"

    AI_MAX_TEMPERATURE: float = 0.4
    AI_REQUEST_TIMEOUT_SECONDS: int = 60

    DOCUMENT_TEXT_MAX_CHARS: int = 10000
    AI_PROMPT_TEXT_MAX_CHARS: int = 2000

    DEADLINE_DEFAULT_DAYS_AHEAD: int = 7
    DEADLINE_MAX_ALERTS: int = 50

    PROPOSAL_HISTORY_LIMIT: int = 5

    @field_validator("AI_MAX_TEMPERATURE")
    @classmethod
    def cap_temperature(cls, value: float) -> float:
        """Clamps the temperature ceiling into [0, 0.4]."""
        return min(max(value, 0.0), TEMPERATURE_CEILING)

    @model_validator(mode="after")
    def normalize_groq_url(self) -> "Config":
        """Ensures the Groq base URL ends with a slash.

        The AI provider joins relative paths such as ``chat/completions`` onto
        this URL, which silently drops the last path segment when the slash
        is missing.

        Returns:
            The modified Config object.
        """
        if not self.GROQ_API_URL.endswith("/"):
            self.GROQ_API_URL = f"{self.GROQ_API_URL}/"
        return self


class ConfigProvider:
    """A provider class that acts as a factory for the application's configuration.

    It does not hold state but provides a method to create fresh config instances.
    """

    @staticmethod
    def get_config() -> Config:
        """Factory method that instantiates and returns a new Config object.

        Calling this function will always create a new instance of the Config model,
        which forces Pydantic to reload and re-validate all settings from the
        current environment variables. This ensures the configuration is always fresh.

        Returns:
            A new, validated Config object.
        """
        return Config()
