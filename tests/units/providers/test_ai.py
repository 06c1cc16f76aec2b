"""Unit tests for the AiProvider."""

from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel, Field
from requests.exceptions import ConnectionError as RequestsConnectionError
from sibal.exceptions.analysis import AiInvocationError
from sibal.providers.ai import AiProvider, extract_json_span
from sibal.providers.config import Config


class MockOutputSchema(BaseModel):
    risk_score: int = Field(..., ge=0, le=100)
    summary: str


def make_response(content: object, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.reason = "OK" if response.ok else "Error"
    response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return response


@pytest.fixture
def http_provider() -> MagicMock:
    return MagicMock()


@pytest.fixture
def provider(http_provider: MagicMock) -> AiProvider[MockOutputSchema]:
    config = Config(GROQ_API_KEY="test-key", GROQ_API_URL="https://api.example.com/v1", GROQ_MODEL="test-model")
    return AiProvider(MockOutputSchema, http_provider, config)


def test_extract_json_span_skips_surrounding_prose() -> None:
    text = 'Claro! Aqui está: {"a": {"b": [1, 2]}} Espero ter ajudado.'
    assert extract_json_span(text) == '{"a": {"b": [1, 2]}}'


def test_extract_json_span_ignores_brackets_inside_strings() -> None:
    text = '```json\n{"summary": "valor {estimado} ]", "n": 1}\n```'
    assert extract_json_span(text) == '{"summary": "valor {estimado} ]", "n": 1}'


def test_extract_json_span_handles_arrays() -> None:
    assert extract_json_span('resultado: [{"x": 1}, {"x": 2}]') == '[{"x": 1}, {"x": 2}]'


@pytest.mark.parametrize("text", ["sem json aqui", '{"a": 1', '{"a": [1}'])
def test_extract_json_span_returns_none_without_balanced_span(text: str) -> None:
    assert extract_json_span(text) is None


def test_completions_url_is_joined_onto_the_base_url(provider: AiProvider[MockOutputSchema]) -> None:
    assert provider.completions_url == "https://api.example.com/v1/chat/completions"


def test_get_structured_output_parses_fenced_answer(
    provider: AiProvider[MockOutputSchema], http_provider: MagicMock
) -> None:
    http_provider.post.return_value = make_response('```json\n{"risk_score": 42, "summary": "ok",}\n```')

    result = provider.get_structured_output("prompt", "system", temperature=0.3, max_tokens=500)

    assert result == MockOutputSchema(risk_score=42, summary="ok")
    _, kwargs = http_provider.post.call_args
    assert kwargs["json"]["model"] == "test-model"
    assert kwargs["json"]["max_tokens"] == 500
    assert kwargs["json"]["messages"][0] == {"role": "system", "content": "system"}
    assert kwargs["headers"]["Authorization"] == "Bearer test-key"


def test_invoke_model_caps_temperature(provider: AiProvider[MockOutputSchema], http_provider: MagicMock) -> None:
    http_provider.post.return_value = make_response("texto")

    provider.invoke_model("prompt", "system", temperature=0.9, max_tokens=100)

    _, kwargs = http_provider.post.call_args
    assert kwargs["json"]["temperature"] == 0.4


def test_invoke_model_caps_temperature_above_configured_ceiling(http_provider: MagicMock) -> None:
    config = Config(GROQ_API_KEY="test-key", AI_MAX_TEMPERATURE=0.9)
    provider = AiProvider(MockOutputSchema, http_provider, config)
    http_provider.post.return_value = make_response("texto")

    provider.invoke_model("prompt", "system", temperature=0.8, max_tokens=100)

    assert http_provider.post.call_args.kwargs["json"]["temperature"] == 0.4


def test_invoke_model_requires_api_key(http_provider: MagicMock) -> None:
    provider = AiProvider(MockOutputSchema, http_provider, Config(GROQ_API_KEY=None))

    with pytest.raises(AiInvocationError, match="GROQ_API_KEY"):
        provider.invoke_model("prompt", "system", 0.1, 100)
    http_provider.post.assert_not_called()


def test_invoke_model_wraps_request_errors(provider: AiProvider[MockOutputSchema], http_provider: MagicMock) -> None:
    http_provider.post.side_effect = RequestsConnectionError("boom")

    with pytest.raises(AiInvocationError, match="AI request failed"):
        provider.invoke_model("prompt", "system", 0.1, 100)


def test_invoke_model_rejects_error_status(provider: AiProvider[MockOutputSchema], http_provider: MagicMock) -> None:
    http_provider.post.return_value = make_response("", status_code=429)

    with pytest.raises(AiInvocationError, match="HTTP 429"):
        provider.invoke_model("prompt", "system", 0.1, 100)


def test_invoke_model_rejects_malformed_envelope(
    provider: AiProvider[MockOutputSchema], http_provider: MagicMock
) -> None:
    response = make_response("x")
    response.json.return_value = {"choices": []}
    http_provider.post.return_value = response

    with pytest.raises(AiInvocationError, match="unexpected envelope"):
        provider.invoke_model("prompt", "system", 0.1, 100)


@pytest.mark.parametrize("content", ["", "   ", None])
def test_invoke_model_rejects_empty_content(
    provider: AiProvider[MockOutputSchema], http_provider: MagicMock, content: object
) -> None:
    http_provider.post.return_value = make_response(content)

    with pytest.raises(AiInvocationError, match="empty response"):
        provider.invoke_model("prompt", "system", 0.1, 100)


def test_parse_response_without_json(provider: AiProvider[MockOutputSchema]) -> None:
    with pytest.raises(AiInvocationError, match="did not contain a JSON payload"):
        provider.parse_response("Desculpe, não consigo ajudar.")


def test_parse_response_with_schema_mismatch(provider: AiProvider[MockOutputSchema]) -> None:
    with pytest.raises(AiInvocationError, match="could not be parsed"):
        provider.parse_response('{"risk_score": 300, "summary": "fora do intervalo"}')


@pytest.mark.parametrize(
    "raw",
    [
        '{"risk_score": NaN, "summary": "x"}',
        '{"risk_score": Infinity, "summary": "x"}',
        '{"risk_score": -Infinity, "summary": "x"}',
    ],
)
def test_parse_response_rejects_non_finite_numbers(provider: AiProvider[MockOutputSchema], raw: str) -> None:
    with pytest.raises(AiInvocationError, match="could not be parsed"):
        provider.parse_response(raw)
