"""Unit tests for the DocumentParserProvider."""

import io
from unittest.mock import MagicMock, patch

import docx
import openpyxl
import pytest
from sibal.exceptions.analysis import UnsupportedTypeError
from sibal.models.enums import DocumentFormat
from sibal.providers.document_parser import DocumentParserProvider


@pytest.fixture
def parser() -> DocumentParserProvider:
    return DocumentParserProvider()


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://compras.gov.br/editais/123/edital.pdf", DocumentFormat.PDF),
        ("https://compras.gov.br/edital.PDF?download=1#page=2", DocumentFormat.PDF),
        ("https://compras.gov.br/anexo.docx", DocumentFormat.DOCX),
        ("https://compras.gov.br/anexo.doc", DocumentFormat.DOCX),
        ("https://compras.gov.br/planilha%20de%20precos.xlsx", DocumentFormat.XLSX),
        ("https://compras.gov.br/planilha.xls", DocumentFormat.XLSX),
    ],
)
def test_detect_format(url: str, expected: DocumentFormat) -> None:
    assert DocumentParserProvider.detect_format(url) == expected


@pytest.mark.parametrize("url", ["https://compras.gov.br/edital.zip", "https://compras.gov.br/edital"])
def test_detect_format_rejects_unknown_extensions(url: str) -> None:
    with pytest.raises(UnsupportedTypeError, match="Tipo de documento não suportado"):
        DocumentParserProvider.detect_format(url)


def test_parse_text(parser: DocumentParserProvider) -> None:
    parsed = parser.parse("  Edital de licitação nº 1  ".encode("utf-8"), DocumentFormat.TEXT)

    assert parsed.text == "Edital de licitação nº 1"
    assert parsed.pages == ["Edital de licitação nº 1"]
    assert parsed.tables == []
    assert parsed.document_format == "text"


def test_parse_docx_reads_paragraphs_and_tables(parser: DocumentParserProvider) -> None:
    document = docx.Document()
    document.add_paragraph("EDITAL DE PREGÃO ELETRÔNICO")
    document.add_paragraph("")
    document.add_paragraph("Objeto: aquisição de computadores.")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Item"
    table.cell(0, 1).text = "Quantidade"
    table.cell(1, 0).text = "Computador"
    table.cell(1, 1).text = "200"
    buffer = io.BytesIO()
    document.save(buffer)

    parsed = parser.parse(buffer.getvalue(), DocumentFormat.DOCX)

    assert parsed.text == "EDITAL DE PREGÃO ELETRÔNICO\n\nObjeto: aquisição de computadores."
    assert len(parsed.pages) == 1
    assert len(parsed.tables) == 1
    assert parsed.tables[0].table_id == "tabela_1"
    assert parsed.tables[0].headers == ["Item", "Quantidade"]
    assert parsed.tables[0].rows == [["Computador", "200"]]


def test_parse_docx_without_tables(parser: DocumentParserProvider) -> None:
    document = docx.Document()
    document.add_paragraph("Texto")
    document.add_table(rows=1, cols=1).cell(0, 0).text = "A"
    buffer = io.BytesIO()
    document.save(buffer)

    parsed = parser.parse(buffer.getvalue(), DocumentFormat.DOCX, extract_tables=False)

    assert parsed.tables == []


def test_parse_xlsx_reads_each_sheet_as_a_page(parser: DocumentParserProvider) -> None:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = "Itens"
    sheet.append(["Item", "Valor"])
    sheet.append(["Notebook", 4500])
    second = workbook.create_sheet("Vazia")
    second.append([None, None])
    buffer = io.BytesIO()
    workbook.save(buffer)

    parsed = parser.parse(buffer.getvalue(), DocumentFormat.XLSX)

    assert len(parsed.pages) == 2
    assert parsed.pages[0].startswith("=== Planilha: Itens ===")
    assert "Notebook | 4500" in parsed.text
    assert len(parsed.tables) == 1
    assert parsed.tables[0].headers == ["Item", "Valor"]
    assert parsed.tables[0].rows == [["Notebook", "4500"]]
    assert parsed.tables[0].context == "Planilha Itens"


def test_parse_pdf_collects_pages_and_tables(parser: DocumentParserProvider) -> None:
    first_page = MagicMock()
    first_page.extract_text.return_value = "EDITAL Nº 10/2025"
    first_page.extract_tables.return_value = [[["Lote", "Valor"], ["1", "R$ 10,00"]], [[None, ""]]]
    second_page = MagicMock()
    second_page.extract_text.return_value = None
    second_page.extract_tables.return_value = []
    pdf = MagicMock()
    pdf.pages = [first_page, second_page]

    with patch("sibal.providers.document_parser.pdfplumber.open") as mock_open:
        mock_open.return_value.__enter__.return_value = pdf
        parsed = parser.parse(b"%PDF-1.7", DocumentFormat.PDF)

    assert parsed.pages == ["EDITAL Nº 10/2025", ""]
    assert parsed.text == "EDITAL Nº 10/2025"
    assert len(parsed.tables) == 1
    assert parsed.tables[0].rows == [["1", "R$ 10,00"]]
    assert parsed.tables[0].context == "Página 1"


def test_parse_wraps_library_errors(parser: DocumentParserProvider) -> None:
    with pytest.raises(UnsupportedTypeError, match="Não foi possível ler o documento"):
        parser.parse(b"not a zip file", DocumentFormat.DOCX)
