"""Unit tests for the ToolRegistry."""

from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel
from sibal.exceptions.analysis import NotFoundError, ToolArgumentError, UnknownToolError
from sibal.models.enums import DeadlineType, DocumentType
from sibal.models.insights import CompanyProfile
from sibal.providers import logging as logging_module
from sibal.providers.config import Config
from sibal.services.tools import ToolRegistry


class EchoResult(BaseModel):
    value: str


@pytest.fixture
def services() -> dict[str, MagicMock]:
    mocks = {
        name: MagicMock()
        for name in ("risk_classifier", "notice_summarizer", "document_extractor", "deadline_monitor", "proposal_insights")
    }
    mocks["risk_classifier"].classify.return_value = EchoResult(value="risk")
    mocks["notice_summarizer"].summarize.return_value = EchoResult(value="summary")
    mocks["document_extractor"].process_document.return_value = EchoResult(value="document")
    mocks["deadline_monitor"].monitor.return_value = EchoResult(value="deadlines")
    mocks["proposal_insights"].generate.return_value = EchoResult(value="insights")
    return mocks


@pytest.fixture
def registry(services: dict[str, MagicMock]) -> ToolRegistry:
    return ToolRegistry(**services)


def test_list_tools(registry: ToolRegistry) -> None:
    tools = registry.list_tools()

    assert [tool["name"] for tool in tools] == [
        "risk_classifier",
        "summarize_notice",
        "process_document",
        "monitor_deadlines",
        "generate_proposal_insights",
    ]
    assert "notice_id" in tools[0]["input_schema"]["properties"]
    assert tools[0]["input_schema"]["required"] == ["notice_id"]


def test_call_risk_classifier(registry: ToolRegistry, services: dict[str, MagicMock]) -> None:
    result = registry.call_tool("risk_classifier", {"notice_id": "notice-1", "company_profile": "TI"})

    assert result == {"value": "risk"}
    services["risk_classifier"].classify.assert_called_once_with("notice-1", "TI")


def test_call_summarize_notice(registry: ToolRegistry, services: dict[str, MagicMock]) -> None:
    registry.call_tool("summarize_notice", {"notice_id": "notice-1"})

    services["notice_summarizer"].summarize.assert_called_once_with("notice-1", [])


def test_call_process_document(registry: ToolRegistry, services: dict[str, MagicMock]) -> None:
    registry.call_tool("process_document", {"document_type": "anexo", "content": "texto", "extract_tables": False})

    services["document_extractor"].process_document.assert_called_once_with(
        document_type=DocumentType.ANNEX,
        document_url=None,
        content="texto",
        notice_id=None,
        extract_tables=False,
        extract_requirements=False,
    )


def test_call_monitor_deadlines(registry: ToolRegistry, services: dict[str, MagicMock]) -> None:
    registry.call_tool(
        "monitor_deadlines", {"company_id": "company-1", "days_ahead": 15, "deadline_types": ["opening"]}
    )

    services["deadline_monitor"].monitor.assert_called_once_with("company-1", 15, [DeadlineType.OPENING])


def test_call_generate_proposal_insights(registry: ToolRegistry, services: dict[str, MagicMock]) -> None:
    registry.call_tool(
        "generate_proposal_insights",
        {"notice_id": "notice-1", "company_profile": {"name": "Tech Ltda", "experience_years": 4}},
    )

    services["proposal_insights"].generate.assert_called_once_with(
        "notice-1", CompanyProfile(name="Tech Ltda", experience_years=4), [], []
    )


def test_call_unknown_tool(registry: ToolRegistry) -> None:
    with pytest.raises(UnknownToolError, match="Ferramenta desconhecida: delete_everything"):
        registry.call_tool("delete_everything", {})


@pytest.mark.parametrize(
    ("name", "args"),
    [
        ("risk_classifier", {}),
        ("risk_classifier", {"notice_id": ""}),
        ("risk_classifier", {"notice_id": "notice-1", "unexpected": True}),
        ("monitor_deadlines", {"company_id": "company-1", "days_ahead": 91}),
        ("monitor_deadlines", {"company_id": "company-1", "deadline_types": ["lunch"]}),
        ("process_document", {"document_type": "edital"}),
        ("process_document", {"document_type": "contrato", "content": "x"}),
        ("generate_proposal_insights", {"notice_id": "n", "company_profile": {"experience_years": -1}}),
    ],
)
def test_call_rejects_invalid_arguments(
    registry: ToolRegistry, services: dict[str, MagicMock], name: str, args: dict[str, object]
) -> None:
    with pytest.raises(ToolArgumentError):
        registry.call_tool(name, args)
    for service in services.values():
        assert not any(call for call in service.method_calls)


def test_call_runs_inside_a_correlation_id(registry: ToolRegistry, services: dict[str, MagicMock]) -> None:
    seen: list[str] = []

    def classify(*args: object) -> EchoResult:
        seen.append(logging_module._log_context.correlation_id)
        return EchoResult(value="risk")

    services["risk_classifier"].classify.side_effect = classify

    registry.call_tool("risk_classifier", {"notice_id": "notice-1"})

    assert len(seen) == 1 and seen[0].startswith("risk_classifier:")
    assert logging_module._log_context.correlation_id is None


def test_call_propagates_analyzer_errors(registry: ToolRegistry, services: dict[str, MagicMock]) -> None:
    services["risk_classifier"].classify.side_effect = NotFoundError("Edital", "notice-1")

    with pytest.raises(NotFoundError):
        registry.call_tool("risk_classifier", {"notice_id": "notice-1"})


def test_from_engine_wires_every_tool() -> None:
    registry = ToolRegistry.from_engine(MagicMock(), Config(GROQ_API_KEY=None))

    assert len(registry.list_tools()) == 5
