"""This module defines the Pydantic model for procurement notices.

Notices are owned by the ingestion side of the system; the analyzers only read
them and write back their risk classification and summary.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Notice(BaseModel):
    """Represents a public tender notice ("edital") as stored in the notice store.

    Attributes:
        id: The unique identifier of the notice.
        title: The notice title.
        description: The free-text object description.
        organ: The public organ running the procurement.
        modality: The procurement modality, e.g. "Pregão Eletrônico" or
            "Concorrência".
        estimated_value: The estimated contract value, in BRL.
        opening_date: When the proposals are opened.
        submission_deadline: The last instant to submit a proposal.
        public_session_date: When the public bidding session takes place.
        appeal_deadline: The last instant to file an appeal.
        url: The public URL of the notice.
        status: The notice status as reported by the source portal.
        risk_level: The last risk tier computed by the risk classifier.
        risk_score: The last risk score computed by the risk classifier.
        risk_analysis: The last full risk analysis, as stored JSON.
        summary: The executive summary written by the summarizer.
        detailed_summary: The last full summary, as stored JSON.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str = ""
    description: str = ""
    organ: str = ""
    modality: str = ""
    estimated_value: Decimal | None = None
    opening_date: datetime | None = None
    submission_deadline: datetime | None = None
    public_session_date: datetime | None = None
    appeal_deadline: datetime | None = None
    url: str | None = None
    status: str | None = None
    risk_level: str | None = None
    risk_score: int | None = None
    risk_analysis: dict[str, Any] | None = Field(default=None, repr=False)
    summary: str | None = None
    detailed_summary: dict[str, Any] | None = Field(default=None, repr=False)

    @property
    def value_or_zero(self) -> Decimal:
        """The estimated value, treating an unknown value as zero."""
        return self.estimated_value if self.estimated_value is not None else Decimal("0")

    def prompt_fields(self) -> dict[str, Any]:
        """Returns the notice fields that are shared with the AI model.

        Returns:
            A JSON-serializable dictionary of the notice's public data.
        """
        return self.model_dump(
            mode="json",
            include={
                "id",
                "title",
                "description",
                "organ",
                "modality",
                "estimated_value",
                "opening_date",
                "submission_deadline",
                "status",
            },
        )
