"""This module provides a service for reading text and tables out of document files.

The file format is chosen from the extension of the document URL only; the
content is never sniffed. PDF files are read with pdfplumber, Word files with
python-docx and spreadsheets with openpyxl.
"""

import io
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

import docx
import openpyxl
import pdfplumber
from sibal.exceptions.analysis import UnsupportedTypeError
from sibal.models.documents import ExtractedTable, ParsedDocument
from sibal.models.enums import DocumentFormat
from sibal.providers.logging import Logger, LoggingProvider

_EXTENSION_FORMATS = {
    "pdf": DocumentFormat.PDF,
    "doc": DocumentFormat.DOCX,
    "docx": DocumentFormat.DOCX,
    "xls": DocumentFormat.XLSX,
    "xlsx": DocumentFormat.XLSX,
}


def _clean_cell(value: object) -> str:
    """Renders a table cell as a single-line string."""
    if value is None:
        return ""
    return " ".join(str(value).split())


class DocumentParserProvider:
    """A provider that turns raw document bytes into text, pages and tables."""

    logger: Logger

    def __init__(self) -> None:
        """Initializes the DocumentParserProvider."""
        self.logger = LoggingProvider().get_logger()

    @staticmethod
    def detect_format(document_url: str) -> DocumentFormat:
        """Infers the document format from the extension of a URL path.

        Query strings and fragments are ignored, so
        ``https://host/edital.PDF?download=1`` is read as a PDF.

        Args:
            document_url: The URL of the document.

        Returns:
            The matching document format.

        Raises:
            UnsupportedTypeError: If the extension is missing or unknown.
        """
        path = unquote(urlparse(document_url).path)
        extension = PurePosixPath(path).suffix.lower().lstrip(".")
        document_format = _EXTENSION_FORMATS.get(extension)
        if document_format is None:
            raise UnsupportedTypeError(f"Tipo de documento não suportado: '{extension or 'sem extensão'}'")
        return document_format

    def parse(self, content: bytes, document_format: DocumentFormat, extract_tables: bool = True) -> ParsedDocument:
        """Reads the text, pages and, optionally, the tables of a document.

        Args:
            content: The raw bytes of the file.
            document_format: The format returned by `detect_format`.
            extract_tables: Whether tables should be collected as well.

        Returns:
            The parsed document.

        Raises:
            UnsupportedTypeError: If the content cannot be read in the given format.
        """
        self.logger.debug(f"Parsing {len(content)} bytes as {document_format}.")
        try:
            if document_format == DocumentFormat.PDF:
                return self._parse_pdf(content, extract_tables)
            if document_format == DocumentFormat.DOCX:
                return self._parse_docx(content, extract_tables)
            if document_format == DocumentFormat.XLSX:
                return self._parse_xlsx(content, extract_tables)
            return self._parse_text(content)
        except UnsupportedTypeError:
            raise
        except Exception as e:
            self.logger.warning(f"Failed to read document as {document_format}: {e}")
            raise UnsupportedTypeError(f"Não foi possível ler o documento como {document_format}: {e}") from e

    def _parse_pdf(self, content: bytes, extract_tables: bool) -> ParsedDocument:
        """Reads a PDF page by page."""
        pages: list[str] = []
        tables: list[ExtractedTable] = []
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            for page_number, page in enumerate(pdf.pages, start=1):
                pages.append(page.extract_text() or "")
                if not extract_tables:
                    continue
                for raw_table in page.extract_tables():
                    table = self._build_table(raw_table, len(tables) + 1, f"Página {page_number}")
                    if table:
                        tables.append(table)
        return ParsedDocument(
            text="\n\n".join(page for page in pages if page).strip(),
            pages=pages,
            tables=tables,
            document_format=DocumentFormat.PDF,
        )

    def _parse_docx(self, content: bytes, extract_tables: bool) -> ParsedDocument:
        """Reads the paragraphs and tables of a Word document.

        Word files have no stable page boundaries, so the whole body is
        reported as a single page.
        """
        document = docx.Document(io.BytesIO(content))
        paragraphs = [paragraph.text.strip() for paragraph in document.paragraphs if paragraph.text.strip()]
        tables: list[ExtractedTable] = []
        if extract_tables:
            for raw_table in document.tables:
                rows = [[cell.text for cell in row.cells] for row in raw_table.rows]
                table = self._build_table(rows, len(tables) + 1, "Documento")
                if table:
                    tables.append(table)
        text = "\n\n".join(paragraphs)
        return ParsedDocument(text=text, pages=[text], tables=tables, document_format=DocumentFormat.DOCX)

    def _parse_xlsx(self, content: bytes, extract_tables: bool) -> ParsedDocument:
        """Reads every worksheet of a spreadsheet; each sheet is one page."""
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        pages: list[str] = []
        tables: list[ExtractedTable] = []
        try:
            for sheet_name in workbook.sheetnames:
                rows = [list(row) for row in workbook[sheet_name].iter_rows(values_only=True)]
                lines = [" | ".join(_clean_cell(value) for value in row if value is not None) for row in rows]
                pages.append("\n".join([f"=== Planilha: {sheet_name} ==="] + [line for line in lines if line]))
                if extract_tables:
                    table = self._build_table(rows, len(tables) + 1, f"Planilha {sheet_name}")
                    if table:
                        tables.append(table)
        finally:
            workbook.close()
        return ParsedDocument(
            text="\n\n".join(pages).strip(),
            pages=pages,
            tables=tables,
            document_format=DocumentFormat.XLSX,
        )

    @staticmethod
    def _parse_text(content: bytes) -> ParsedDocument:
        """Decodes plain text content."""
        text = content.decode("utf-8", errors="replace").strip()
        return ParsedDocument(text=text, pages=[text], tables=[], document_format=DocumentFormat.TEXT)

    @staticmethod
    def _build_table(raw_rows: list[list[object]], index: int, context: str) -> ExtractedTable | None:
        """Turns raw rows into a table, using the first non-empty row as headers.

        Args:
            raw_rows: The rows as returned by the parsing library.
            index: The 1-based position of the table in the document.
            context: Where the table was found.

        Returns:
            The table, or None when every row is empty.
        """
        cleaned = [[_clean_cell(cell) for cell in row] for row in raw_rows if row]
        rows = [row for row in cleaned if any(row)]
        if not rows:
            return None
        return ExtractedTable(table_id=f"tabela_{index}", headers=rows[0], rows=rows[1:], context=context)
