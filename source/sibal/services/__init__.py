"""This module initializes the services package.

It also re-exports the analyzer services to provide a simpler, flatter
import structure for the CLI and other callers.
"""

from sibal.services.deadline_monitor import DeadlineMonitorService
from sibal.services.document_extractor import DocumentExtractorService
from sibal.services.notice_summarizer import NoticeSummarizerService
from sibal.services.proposal_insights import ProposalInsightsService
from sibal.services.risk_classifier import RiskClassifierService
from sibal.services.tools import ToolRegistry

__all__ = [
    "DeadlineMonitorService",
    "DocumentExtractorService",
    "NoticeSummarizerService",
    "ProposalInsightsService",
    "RiskClassifierService",
    "ToolRegistry",
]
