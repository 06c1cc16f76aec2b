"""This module provides a generic interface to an OpenAI-compatible chat model.

It defines a generic `AiProvider` class that is specialized with a Pydantic
model describing the structured output expected from the model. The provider
sends one chat-completion request per call, extracts the first JSON span from
the free-form answer, and validates it against the bound schema. Every kind of
failure is normalized to `AiInvocationError` so that analyzers only need a
single `except` clause before switching to their heuristic fallback.
"""

import json
from typing import Any, Generic, TypeVar
from urllib.parse import urljoin

import json5
from pydantic import BaseModel, ValidationError
from requests.exceptions import RequestException
from sibal.exceptions.analysis import AiInvocationError
from sibal.providers.config import Config, ConfigProvider
from sibal.providers.http import HttpProvider
from sibal.providers.logging import Logger, LoggingProvider

PydanticModel = TypeVar("PydanticModel", bound=BaseModel)

_CLOSERS = {"{": "}", "[": "]"}


def _reject_constant(name: str) -> float:
    """Refuses the NaN and Infinity literals that JSON5 would otherwise accept."""
    raise ValueError(f"non-finite number {name} in AI response")


def extract_json_span(text: str) -> str | None:
    """Finds the first balanced JSON object or array inside free-form text.

    The scan starts at the first ``{`` or ``[`` and tracks nesting while
    skipping brackets that appear inside string literals.

    Args:
        text: The raw text returned by the model.

    Returns:
        The substring holding the first balanced span, or None when the text
        has no opening bracket or the span never closes.
    """
    start = next((index for index, char in enumerate(text) if char in _CLOSERS), None)
    if start is None:
        return None

    stack: list[str] = []
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ("}", "]"):
            if not stack or stack.pop() != char:
                return None
            if not stack:
                return text[start : index + 1]
    return None


class AiProvider(Generic[PydanticModel]):
    """Provides a generic interface to the Groq chat-completions endpoint.

    This class is specialized for a specific Pydantic output model.
    """

    logger: Logger
    config: Config
    http_provider: HttpProvider
    output_schema: type[PydanticModel]

    def __init__(
        self,
        output_schema: type[PydanticModel],
        http_provider: HttpProvider | None = None,
        config: Config | None = None,
    ):
        """Initialize the AiProvider.

        Args:
            output_schema: The Pydantic model class that this provider instance
                will use for all structured outputs.
            http_provider: The HTTP client used to reach the model endpoint.
            config: The application configuration.
        """
        self.logger = LoggingProvider().get_logger()
        self.config = config or ConfigProvider.get_config()
        self.output_schema = output_schema
        self.http_provider = http_provider or HttpProvider(self.config)

    @property
    def completions_url(self) -> str:
        """The absolute URL of the chat-completions endpoint."""
        return urljoin(self.config.GROQ_API_URL, "chat/completions")

    def invoke_model(self, prompt: str, system_prompt: str, temperature: float, max_tokens: int) -> str:
        """Sends a single chat-completion request and returns the raw answer.

        The temperature is capped at `AI_MAX_TEMPERATURE` to keep answers
        reproducible. No retry is attempted.

        Args:
            prompt: The fully composed user prompt.
            system_prompt: The system instruction for the model.
            temperature: The requested sampling temperature.
            max_tokens: The maximum number of output tokens.

        Returns:
            The text content of the first choice.

        Raises:
            AiInvocationError: If the request fails, the status is not 2xx,
                the envelope is malformed or the content is empty.
        """
        if not self.config.GROQ_API_KEY:
            raise AiInvocationError("GROQ_API_KEY is not configured.")

        payload = {
            "model": self.config.GROQ_MODEL,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": min(temperature, self.config.AI_MAX_TEMPERATURE),
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.config.GROQ_API_KEY}",
            "Content-Type": "application/json",
        }

        try:
            response = self.http_provider.post(
                self.completions_url,
                json=payload,
                headers=headers,
                timeout=(5, self.config.AI_REQUEST_TIMEOUT_SECONDS),
            )
        except RequestException as e:
            self.logger.warning(f"AI request failed before a response was received: {e}")
            raise AiInvocationError(f"AI request failed: {e}") from e

        if not response.ok:
            self.logger.warning(f"AI endpoint answered with status {response.status_code}: {response.reason}")
            raise AiInvocationError(f"AI endpoint returned HTTP {response.status_code}.")

        try:
            body: Any = response.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AiInvocationError(f"AI endpoint returned an unexpected envelope: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise AiInvocationError("AI model returned an empty response.")

        self.logger.debug(f"Raw text response from AI model: {content}")
        return content

    def get_structured_output(
        self,
        prompt: str,
        system_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 2000,
    ) -> PydanticModel:
        """Invokes the model and parses its answer into the bound schema.

        Args:
            prompt: The fully composed user prompt, including the expected
                JSON layout.
            system_prompt: The system instruction for the model.
            temperature: The requested sampling temperature.
            max_tokens: The maximum number of output tokens.

        Returns:
            An instance of the output schema populated with the model's answer.

        Raises:
            AiInvocationError: If the invocation fails or the answer holds no
                parsable JSON matching the schema.
        """
        raw = self.invoke_model(prompt, system_prompt, temperature, max_tokens)
        return self.parse_response(raw)

    def parse_response(self, raw: str) -> PydanticModel:
        """Extracts and validates the JSON payload of a raw model answer.

        Args:
            raw: The raw text returned by the model.

        Returns:
            A validated instance of the output schema.

        Raises:
            AiInvocationError: If no JSON span is found or it does not validate.
        """
        span = extract_json_span(raw)
        if span is None:
            self.logger.warning("No JSON span found in the AI response.")
            raise AiInvocationError("AI response did not contain a JSON payload.")

        try:
            json_data = json5.loads(span, parse_constant=_reject_constant)
            return self.output_schema.model_validate(json_data)
        except (json.JSONDecodeError, ValueError, OverflowError, ValidationError) as e:
            self.logger.warning(f"Failed to parse or validate the AI response as {self.output_schema.__name__}: {e}")
            raise AiInvocationError(
                f"AI model returned a response that could not be parsed into the expected structure: {e}"
            ) from e
