"""This module defines the service that extracts structured data from procurement documents."""

import time
import uuid

from requests.exceptions import RequestException
from sibal.exceptions.analysis import AiInvocationError, DocumentError, DownloadError
from sibal.models.documents import (
    DocumentProcessingResult,
    DocumentStructure,
    ExtractedRequirement,
    KeyInformation,
    ParsedDocument,
    RequirementList,
)
from sibal.models.enums import AnalysisSource, DocumentFormat, DocumentType, ProcessingStatus
from sibal.providers.ai import AiProvider
from sibal.providers.config import Config, ConfigProvider
from sibal.providers.document_parser import DocumentParserProvider
from sibal.providers.http import HttpProvider
from sibal.providers.logging import Logger, LoggingProvider
from sibal.repositories.analyses import AnalysesRepository
from sibal.services import heuristics

KEY_INFORMATION_SYSTEM_PROMPT = (
    "Você é um especialista em extração de informações de documentos de licitação. "
    "Retorne sempre JSON válido e estruturado."
)
REQUIREMENTS_SYSTEM_PROMPT = "Extraia requisitos de documentos de licitação. Retorne JSON array válido."


class DocumentExtractorService:
    """Downloads a document, reads it and extracts key facts and requirements."""

    http_provider: HttpProvider
    parser: DocumentParserProvider
    key_information_ai: AiProvider[KeyInformation]
    requirements_ai: AiProvider[RequirementList]
    analyses_repo: AnalysesRepository | None
    config: Config
    logger: Logger

    def __init__(
        self,
        http_provider: HttpProvider,
        parser: DocumentParserProvider,
        key_information_ai: AiProvider[KeyInformation],
        requirements_ai: AiProvider[RequirementList],
        analyses_repo: AnalysesRepository | None = None,
        config: Config | None = None,
    ) -> None:
        """Initializes the service with its dependencies.

        Args:
            http_provider: The HTTP client used to download documents.
            parser: The provider that reads document files.
            key_information_ai: An AI provider bound to `KeyInformation`.
            requirements_ai: An AI provider bound to `RequirementList`.
            analyses_repo: The repository used to store results. Results are
                not stored when it is omitted.
            config: The application configuration.
        """
        self.http_provider = http_provider
        self.parser = parser
        self.key_information_ai = key_information_ai
        self.requirements_ai = requirements_ai
        self.analyses_repo = analyses_repo
        self.config = config or ConfigProvider.get_config()
        self.logger = LoggingProvider().get_logger()

    def process_document(
        self,
        document_type: DocumentType,
        document_url: str | None = None,
        content: str | None = None,
        notice_id: str | None = None,
        extract_tables: bool = True,
        extract_requirements: bool = False,
    ) -> DocumentProcessingResult:
        """Processes one document end to end.

        Download and format errors do not escape: they produce a result with
        the failed status, zeroed fields and the error message. Successful and
        partial results are stored when a notice ID is given.

        Args:
            document_type: The kind of procurement document.
            document_url: Where to download the document from.
            content: Inline document text, used instead of a download.
            notice_id: The notice the document belongs to.
            extract_tables: Whether tables should be extracted.
            extract_requirements: Whether the requirements pass should run.

        Returns:
            The processing result.
        """
        started = time.perf_counter()
        document_id = uuid.uuid4()
        self.logger.info(f"Processing {document_type} document {document_id} from {document_url or 'inline content'}.")

        try:
            parsed = self.extract(document_url, content, extract_tables)
        except DocumentError as e:
            self.logger.error(f"Document {document_id} could not be processed: {e}")
            return DocumentProcessingResult(
                document_id=document_id,
                document_url=document_url,
                document_type=document_type,
                processing_status=ProcessingStatus.FAILED,
                confidence_score=0,
                processing_time_ms=self._elapsed_ms(started),
                errors=[str(e)],
            )

        result = self._build_result(
            document_id, document_url, document_type, parsed, extract_tables, extract_requirements, started
        )
        self.logger.info(
            f"Document {document_id} processed with status {result.processing_status} "
            f"and confidence {result.confidence_score}."
        )
        if notice_id and self.analyses_repo is not None:
            self.analyses_repo.save_document_processing_result(notice_id, result)
        return result

    def extract(self, document_url: str | None, content: str | None, extract_tables: bool = True) -> ParsedDocument:
        """Reads a document from inline content or from its URL.

        The format is checked from the URL extension before anything is
        downloaded.

        Args:
            document_url: Where to download the document from.
            content: Inline document text; takes precedence over the URL.
            extract_tables: Whether tables should be extracted.

        Returns:
            The parsed document.

        Raises:
            DownloadError: If the download fails or returns a non-2xx status.
            UnsupportedTypeError: If the format is unknown or unreadable.
            DocumentError: If neither a URL nor content is given.
        """
        if content is not None:
            return self.parser.parse(content.encode("utf-8"), DocumentFormat.TEXT, extract_tables)
        if not document_url:
            raise DocumentError("É necessário informar document_url ou content.")

        document_format = self.parser.detect_format(document_url)
        try:
            response = self.http_provider.get(document_url)
        except RequestException as e:
            raise DownloadError(f"Falha ao baixar documento: {e}") from e
        if not response.ok:
            raise DownloadError(f"Falha ao baixar documento: HTTP {response.status_code} {response.reason}")
        return self.parser.parse(response.content, document_format, extract_tables)

    def extract_key_information(self, text: str, document_type: DocumentType) -> tuple[KeyInformation, AnalysisSource]:
        """Extracts key facts with the AI model, falling back to regular expressions.

        Args:
            text: The full document text.
            document_type: The kind of procurement document.

        Returns:
            The key information and the strategy that produced it.
        """
        if text.strip():
            prompt = f"""
Analise o seguinte texto de um documento de licitação ({document_type}) e extraia informações estruturadas:

{text[: self.config.AI_PROMPT_TEXT_MAX_CHARS]}

Extraia e retorne apenas um objeto JSON com:
1. dates: array com datas importantes (type, date, description)
2. values: array com valores monetários (type, amount, currency, description)
3. contacts: array com contatos (name, role, email, phone)
4. addresses: array com endereços (type, address, context)

Seja preciso e extraia apenas informações claramente identificadas.
"""
            try:
                information = self.key_information_ai.get_structured_output(
                    prompt, KEY_INFORMATION_SYSTEM_PROMPT, temperature=0.1, max_tokens=1500
                )
                return information, AnalysisSource.AI
            except AiInvocationError as e:
                self.logger.warning(f"AI key information extraction failed, using regular expressions: {e}")
        return heuristics.extract_key_information_fallback(text), AnalysisSource.HEURISTIC

    def extract_requirements(self, text: str, document_type: DocumentType) -> list[ExtractedRequirement]:
        """Extracts participation requirements in an independent AI pass.

        Args:
            text: The full document text.
            document_type: The kind of procurement document.

        Returns:
            The requirements found by the model, or by the keyword rules when
            the model is unavailable.
        """
        if not text.strip():
            return []
        prompt = f"""
Analise o seguinte texto de {document_type} e extraia todos os requisitos:

{text[: self.config.AI_PROMPT_TEXT_MAX_CHARS]}

Extraia requisitos em um JSON array com objetos contendo:
- category: categoria do requisito
- requirement: descrição do requisito
- mandatory: se é obrigatório (boolean)
- details: detalhes adicionais
"""
        try:
            requirement_list = self.requirements_ai.get_structured_output(
                prompt, REQUIREMENTS_SYSTEM_PROMPT, temperature=0.1, max_tokens=1000
            )
            return requirement_list.requirements
        except AiInvocationError as e:
            self.logger.warning(f"AI requirements extraction failed, using keyword rules: {e}")
            return heuristics.extract_requirements_fallback(text)

    def _build_result(
        self,
        document_id: uuid.UUID,
        document_url: str | None,
        document_type: DocumentType,
        parsed: ParsedDocument,
        extract_tables: bool,
        extract_requirements: bool,
        started: float,
    ) -> DocumentProcessingResult:
        """Runs the extraction passes over a parsed document and assembles the result."""
        warnings: list[str] = []
        max_chars = self.config.DOCUMENT_TEXT_MAX_CHARS
        if len(parsed.text) > max_chars:
            warnings.append(f"Texto truncado em {max_chars} caracteres.")
        if not parsed.text.strip():
            warnings.append("Nenhum texto extraído do documento.")

        key_information, source = self.extract_key_information(parsed.text, document_type)
        if source == AnalysisSource.HEURISTIC and parsed.text.strip():
            warnings.append("Informações-chave extraídas por expressões regulares.")

        requirements = self.extract_requirements(parsed.text, document_type) if extract_requirements else []
        tables = parsed.tables if extract_tables else []

        partial = (
            not parsed.text.strip()
            or key_information.is_empty()
            or (extract_requirements and not requirements)
        )
        return DocumentProcessingResult(
            document_id=document_id,
            document_url=document_url,
            document_type=document_type,
            processing_status=ProcessingStatus.PARTIAL if partial else ProcessingStatus.SUCCESS,
            extracted_text=parsed.text[:max_chars],
            extracted_tables=tables,
            extracted_requirements=requirements,
            key_information=key_information,
            document_structure=DocumentStructure(
                sections=heuristics.detect_sections(parsed.pages),
                total_pages=len(parsed.pages),
                document_format=parsed.document_format,
            ),
            confidence_score=heuristics.calculate_confidence_score(parsed.text, tables),
            processing_time_ms=self._elapsed_ms(started),
            warnings=warnings,
            source=source,
        )

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)
