"""This module defines the Pydantic models for deadline monitoring."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field
from sibal.models.enums import AnalysisSource, DeadlineStatus, DeadlineType, Priority, UrgencyLevel


class ChecklistItem(BaseModel):
    """A preparation step with its own intermediate deadline."""

    item: str
    completed: bool = False
    deadline: datetime
    priority: Priority


class DeadlineAlert(BaseModel):
    """An alert about one deadline of one notice.

    `status` is always derived from `days_remaining`; `urgency_level` starts
    from the same derivation and may be raised one tier for followed notices.
    """

    notice_id: str
    notice_title: str
    organ: str
    deadline_type: DeadlineType
    deadline_label: str
    deadline_date: datetime
    days_remaining: int
    urgency_level: UrgencyLevel
    status: DeadlineStatus
    followed: bool = False
    estimated_value: Decimal | None = None
    actions_required: list[str] = Field(default_factory=list)
    preparation_checklist: list[ChecklistItem] = Field(default_factory=list)


class DeadlineSummary(BaseModel):
    """Alert counts per time bucket."""

    today: int = 0
    this_week: int = 0
    next_week: int = 0
    overdue: int = 0


class DeadlineRecommendation(BaseModel):
    """A prioritized action derived from the alert buckets."""

    priority: Priority
    action: str
    deadline: str
    impact: str


class ReminderSettings(BaseModel):
    """When and how a calendar event should remind the company."""

    days_before: list[int]
    notification_types: list[str] = Field(default_factory=lambda: ["email", "push", "sms"])


class CalendarEvent(BaseModel):
    """A calendar entry for an upcoming deadline."""

    title: str
    date: datetime
    type: str
    description: str
    reminder_settings: ReminderSettings


class DeadlineMonitoringResult(BaseModel):
    """The output of one deadline monitoring run for a company."""

    company_id: str
    monitoring_date: datetime
    days_ahead: int
    total_deadlines: int
    critical_deadlines: int
    alerts: list[DeadlineAlert] = Field(default_factory=list)
    summary: DeadlineSummary = Field(default_factory=DeadlineSummary)
    recommendations: list[DeadlineRecommendation] = Field(default_factory=list)
    calendar_events: list[CalendarEvent] = Field(default_factory=list)
    source: AnalysisSource = AnalysisSource.HEURISTIC
