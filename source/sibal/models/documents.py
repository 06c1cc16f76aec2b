"""This module defines the Pydantic models for procurement document processing."""

from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator
from sibal.models.enums import AnalysisSource, DocumentType, ProcessingStatus


class ExtractedTable(BaseModel):
    """A table found in a document."""

    table_id: str
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)
    context: str = ""


class ExtractedRequirement(BaseModel):
    """A participation requirement found in a document."""

    category: str = Field("Geral", description="The requirement group, e.g. 'Habilitação Jurídica'.")
    requirement: str = Field(..., description="The requirement text (in pt-br).")
    mandatory: bool = True
    details: str = ""


class RequirementList(BaseModel):
    """The structured output of the requirements extraction pass.

    The model is asked for a bare JSON array, but some answers wrap it in an
    object, so both shapes are accepted.
    """

    requirements: list[ExtractedRequirement] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_list(cls, data: Any) -> Any:
        """Wraps a bare list of requirements into the model's shape."""
        if isinstance(data, list):
            return {"requirements": data}
        return data


class KeyDate(BaseModel):
    """A relevant date found in a document."""

    type: str = "data_encontrada"
    date: str
    description: str = ""


class KeyValue(BaseModel):
    """A monetary value found in a document."""

    type: str = "valor_monetario"
    amount: Decimal
    currency: str = "BRL"
    description: str = ""


class Contact(BaseModel):
    """A contact person or channel found in a document."""

    name: str = ""
    role: str = "Não especificado"
    email: str | None = None
    phone: str | None = None


class Address(BaseModel):
    """A postal address found in a document."""

    type: str = "endereco_extraido"
    address: str
    context: str = ""


class KeyInformation(BaseModel):
    """The key facts extracted from a document."""

    dates: list[KeyDate] = Field(default_factory=list)
    values: list[KeyValue] = Field(default_factory=list)
    contacts: list[Contact] = Field(default_factory=list)
    addresses: list[Address] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """Tells whether no fact at all was extracted.

        Returns:
            True when every section is empty.
        """
        return not (self.dates or self.values or self.contacts or self.addresses)


class DocumentSection(BaseModel):
    """A heading detected in a document and the page it starts on."""

    title: str
    page: int = 1
    content_summary: str = ""


class DocumentStructure(BaseModel):
    """The layout of a processed document."""

    sections: list[DocumentSection] = Field(default_factory=list)
    total_pages: int = 0
    document_format: str = "unknown"


class ParsedDocument(BaseModel):
    """The raw text and tables read from a document file."""

    text: str = ""
    pages: list[str] = Field(default_factory=list)
    tables: list[ExtractedTable] = Field(default_factory=list)
    document_format: str = "unknown"


class DocumentProcessingResult(BaseModel):
    """The outcome of processing one procurement document.

    Attributes:
        document_id: A unique identifier generated for this processing run.
        document_url: The URL the document was read from, if any.
        document_type: The kind of procurement document.
        processing_status: success, partial or failed.
        extracted_text: The document text, truncated.
        extracted_tables: The tables found, when table extraction was asked for.
        extracted_requirements: The requirements found, when asked for.
        key_information: Dates, values, contacts and addresses.
        document_structure: Detected sections and page count.
        confidence_score: A 0-100 quality signal of the extraction.
        processing_time_ms: Wall-clock time spent processing.
        errors: Error messages; never empty when the status is failed.
        warnings: Non-fatal issues met during processing.
        source: Whether the key information came from the model or the regexes.
    """

    document_id: UUID
    document_url: str | None = None
    document_type: DocumentType
    processing_status: ProcessingStatus
    extracted_text: str = ""
    extracted_tables: list[ExtractedTable] = Field(default_factory=list)
    extracted_requirements: list[ExtractedRequirement] = Field(default_factory=list)
    key_information: KeyInformation = Field(default_factory=KeyInformation)
    document_structure: DocumentStructure = Field(default_factory=DocumentStructure)
    confidence_score: int = Field(0, ge=0, le=100)
    processing_time_ms: int = 0
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    source: AnalysisSource = AnalysisSource.HEURISTIC
