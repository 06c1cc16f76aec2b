"""This module exposes the analyzers through a name-based tool contract.

Callers invoke a tool by name with a plain dictionary of arguments. The
arguments are validated by a Pydantic model before any I/O happens, the tool
runs inside its own logging correlation ID, and the result is returned as a
JSON-compatible dictionary.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from sibal.exceptions.analysis import ToolArgumentError, UnknownToolError
from sibal.models.deadlines import DeadlineMonitoringResult
from sibal.models.documents import DocumentProcessingResult, KeyInformation, RequirementList
from sibal.models.enums import DeadlineType, DocumentType
from sibal.models.insights import CompanyProfile, Competitor, HistoricalProposal, ProposalInsightsDraft
from sibal.models.risk import RiskAnalysisDraft
from sibal.models.summaries import NoticeSummaryDraft
from sibal.providers.ai import AiProvider
from sibal.providers.config import Config, ConfigProvider
from sibal.providers.document_parser import DocumentParserProvider
from sibal.providers.http import HttpProvider
from sibal.providers.logging import Logger, LoggingProvider
from sibal.repositories.analyses import AnalysesRepository
from sibal.repositories.notices import NoticesRepository
from sibal.services.deadline_monitor import MAX_DAYS_AHEAD, MIN_DAYS_AHEAD, DeadlineMonitorService
from sibal.services.document_extractor import DocumentExtractorService
from sibal.services.notice_summarizer import NoticeSummarizerService
from sibal.services.proposal_insights import ProposalInsightsService
from sibal.services.risk_classifier import RiskClassifierService
from sqlalchemy import Engine


class ToolArguments(BaseModel):
    """Base class of tool argument models; unknown arguments are rejected."""

    model_config = ConfigDict(extra="forbid")


class RiskClassifierArgs(ToolArguments):
    """Arguments of the risk_classifier tool."""

    notice_id: str = Field(..., min_length=1)
    company_profile: str | None = None


class SummarizeNoticeArgs(ToolArguments):
    """Arguments of the summarize_notice tool."""

    notice_id: str = Field(..., min_length=1)
    focus_areas: list[str] = Field(default_factory=list)


class ProcessDocumentArgs(ToolArguments):
    """Arguments of the process_document tool."""

    document_type: DocumentType
    document_url: str | None = None
    content: str | None = None
    notice_id: str | None = None
    extract_tables: bool = True
    extract_requirements: bool = False

    @model_validator(mode="after")
    def require_source(self) -> "ProcessDocumentArgs":
        """Ensures the document can be read from somewhere."""
        if not self.document_url and self.content is None:
            raise ValueError("either document_url or content is required")
        return self


class MonitorDeadlinesArgs(ToolArguments):
    """Arguments of the monitor_deadlines tool."""

    company_id: str = Field(..., min_length=1)
    days_ahead: int | None = Field(None, ge=MIN_DAYS_AHEAD, le=MAX_DAYS_AHEAD)
    deadline_types: list[DeadlineType] | None = None


class GenerateProposalInsightsArgs(ToolArguments):
    """Arguments of the generate_proposal_insights tool."""

    notice_id: str = Field(..., min_length=1)
    company_profile: CompanyProfile | None = None
    historical_proposals: list[HistoricalProposal] = Field(default_factory=list)
    competitors: list[Competitor] = Field(default_factory=list)


@dataclass(frozen=True)
class Tool:
    """A registered tool."""

    name: str
    description: str
    args_model: type[ToolArguments]
    handler: Callable[[Any], BaseModel]


class ToolRegistry:
    """Dispatches tool calls to the analyzer services."""

    logger: Logger
    _tools: dict[str, Tool]

    def __init__(
        self,
        risk_classifier: RiskClassifierService,
        notice_summarizer: NoticeSummarizerService,
        document_extractor: DocumentExtractorService,
        deadline_monitor: DeadlineMonitorService,
        proposal_insights: ProposalInsightsService,
    ) -> None:
        """Initializes the registry with the analyzer services.

        Args:
            risk_classifier: The risk classification service.
            notice_summarizer: The notice summary service.
            document_extractor: The document extraction service.
            deadline_monitor: The deadline monitoring service.
            proposal_insights: The proposal insight service.
        """
        self.logger = LoggingProvider().get_logger()

        def classify(args: RiskClassifierArgs) -> BaseModel:
            return risk_classifier.classify(args.notice_id, args.company_profile)

        def summarize(args: SummarizeNoticeArgs) -> BaseModel:
            return notice_summarizer.summarize(args.notice_id, args.focus_areas)

        def process(args: ProcessDocumentArgs) -> DocumentProcessingResult:
            return document_extractor.process_document(
                document_type=args.document_type,
                document_url=args.document_url,
                content=args.content,
                notice_id=args.notice_id,
                extract_tables=args.extract_tables,
                extract_requirements=args.extract_requirements,
            )

        def monitor(args: MonitorDeadlinesArgs) -> DeadlineMonitoringResult:
            return deadline_monitor.monitor(args.company_id, args.days_ahead, args.deadline_types)

        def insights(args: GenerateProposalInsightsArgs) -> BaseModel:
            return proposal_insights.generate(
                args.notice_id, args.company_profile, args.historical_proposals, args.competitors
            )

        tools = [
            Tool("risk_classifier", "Classifica o risco de participar de um edital.", RiskClassifierArgs, classify),
            Tool("summarize_notice", "Gera um resumo executivo de um edital.", SummarizeNoticeArgs, summarize),
            Tool(
                "process_document",
                "Extrai texto, tabelas, requisitos e informações-chave de um documento.",
                ProcessDocumentArgs,
                process,
            ),
            Tool(
                "monitor_deadlines",
                "Monitora os prazos dos editais e gera alertas para uma empresa.",
                MonitorDeadlinesArgs,
                monitor,
            ),
            Tool(
                "generate_proposal_insights",
                "Gera insights estratégicos para a elaboração de uma proposta.",
                GenerateProposalInsightsArgs,
                insights,
            ),
        ]
        self._tools = {tool.name: tool for tool in tools}

    @classmethod
    def from_engine(cls, engine: Engine, config: Config | None = None) -> "ToolRegistry":
        """Wires every service from a database engine and the configuration.

        Args:
            engine: The SQLAlchemy engine of the notice store.
            config: The application configuration.

        Returns:
            A ready-to-use registry.
        """
        config = config or ConfigProvider.get_config()
        http_provider = HttpProvider(config)
        notices_repo = NoticesRepository(engine)
        analyses_repo = AnalysesRepository(engine)
        return cls(
            risk_classifier=RiskClassifierService(
                notices_repo, AiProvider(RiskAnalysisDraft, http_provider, config)
            ),
            notice_summarizer=NoticeSummarizerService(
                notices_repo, AiProvider(NoticeSummaryDraft, http_provider, config)
            ),
            document_extractor=DocumentExtractorService(
                http_provider,
                DocumentParserProvider(),
                AiProvider(KeyInformation, http_provider, config),
                AiProvider(RequirementList, http_provider, config),
                analyses_repo,
                config,
            ),
            deadline_monitor=DeadlineMonitorService(notices_repo, analyses_repo, config),
            proposal_insights=ProposalInsightsService(
                notices_repo, analyses_repo, AiProvider(ProposalInsightsDraft, http_provider, config), config
            ),
        )

    def list_tools(self) -> list[dict[str, Any]]:
        """Describes the registered tools.

        Returns:
            One entry per tool with its name, description and JSON schema.
        """
        return [
            {"name": tool.name, "description": tool.description, "input_schema": tool.args_model.model_json_schema()}
            for tool in self._tools.values()
        ]

    def call_tool(self, name: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
        """Validates the arguments of a tool and runs it.

        Args:
            name: The tool name.
            args: The raw arguments.

        Returns:
            The tool result as a JSON-compatible dictionary.

        Raises:
            UnknownToolError: If no tool has that name.
            ToolArgumentError: If the arguments do not validate.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(f"Ferramenta desconhecida: {name}")
        try:
            parsed = tool.args_model.model_validate(args or {})
        except ValidationError as e:
            raise ToolArgumentError(f"Argumentos inválidos para {name}: {e}") from e

        correlation_id = f"{name}:{uuid.uuid4().hex[:12]}"
        with LoggingProvider().set_correlation_id(correlation_id):
            self.logger.info(f"Running tool {name}.")
            result = tool.handler(parsed)
            self.logger.info(f"Tool {name} finished.")
        return result.model_dump(mode="json")
