"""This module defines the repository for persisting analyzer artifacts."""

from sibal.models.deadlines import DeadlineMonitoringResult
from sibal.models.documents import DocumentProcessingResult
from sibal.models.insights import ProposalInsights
from sibal.providers.logging import Logger, LoggingProvider
from sqlalchemy import Engine, text


class AnalysesRepository:
    """Handles database operations for analyzer results.

    Each artifact is upserted on its natural key, so re-running an analyzer
    replaces the previous result instead of accumulating copies.

    Args:
        engine: An SQLAlchemy Engine instance for database communication.
    """

    logger: Logger
    engine: Engine

    def __init__(self, engine: Engine) -> None:
        """Initializes the repository with a database engine.

        Args:
            engine: The SQLAlchemy Engine to be used for all database
                communications.
        """
        self.logger = LoggingProvider().get_logger()
        self.engine = engine

    def save_document_processing_result(self, notice_id: str, result: DocumentProcessingResult) -> None:
        """Upserts a document processing result keyed by notice and document URL.

        Results of inline content have no URL and are always inserted.

        Args:
            notice_id: The notice the document belongs to.
            result: The processing result.
        """
        self.logger.info(f"Saving document processing result {result.document_id} for notice {notice_id}.")
        sql = text(
            """
            INSERT INTO document_processing_results (
                notice_id, document_url, document_id, document_type,
                processing_status, confidence_score, processing_result
            ) VALUES (
                :notice_id, :document_url, :document_id, :document_type,
                :processing_status, :confidence_score, CAST(:processing_result AS JSONB)
            )
            ON CONFLICT (notice_id, document_url) DO UPDATE SET
                document_id = EXCLUDED.document_id,
                document_type = EXCLUDED.document_type,
                processing_status = EXCLUDED.processing_status,
                confidence_score = EXCLUDED.confidence_score,
                processing_result = EXCLUDED.processing_result,
                updated_at = now();
            """
        )
        params = {
            "notice_id": notice_id,
            "document_url": result.document_url,
            "document_id": str(result.document_id),
            "document_type": result.document_type.value,
            "processing_status": result.processing_status.value,
            "confidence_score": result.confidence_score,
            "processing_result": result.model_dump_json(),
        }
        with self.engine.connect() as conn:
            conn.execute(sql, params)
            conn.commit()
        self.logger.info("Document processing result saved successfully.")

    def save_deadline_monitoring_result(self, result: DeadlineMonitoringResult) -> None:
        """Upserts the latest deadline monitoring result of a company.

        Args:
            result: The monitoring result.
        """
        self.logger.info(f"Saving deadline monitoring result for company {result.company_id}.")
        sql = text(
            """
            INSERT INTO deadline_monitoring_results (
                company_id, monitoring_date, total_deadlines, critical_deadlines, monitoring_result
            ) VALUES (
                :company_id, :monitoring_date, :total_deadlines, :critical_deadlines,
                CAST(:monitoring_result AS JSONB)
            )
            ON CONFLICT (company_id) DO UPDATE SET
                monitoring_date = EXCLUDED.monitoring_date,
                total_deadlines = EXCLUDED.total_deadlines,
                critical_deadlines = EXCLUDED.critical_deadlines,
                monitoring_result = EXCLUDED.monitoring_result,
                updated_at = now();
            """
        )
        params = {
            "company_id": result.company_id,
            "monitoring_date": result.monitoring_date,
            "total_deadlines": result.total_deadlines,
            "critical_deadlines": result.critical_deadlines,
            "monitoring_result": result.model_dump_json(),
        }
        with self.engine.connect() as conn:
            conn.execute(sql, params)
            conn.commit()
        self.logger.info("Deadline monitoring result saved successfully.")

    def upsert_proposal_insights(self, notice_id: str, insights: ProposalInsights) -> None:
        """Upserts the proposal insights of a notice.

        Args:
            notice_id: The notice the insights refer to.
            insights: The generated insights.
        """
        self.logger.info(f"Saving proposal insights for notice {notice_id}.")
        sql = text(
            """
            INSERT INTO proposal_insights (notice_id, win_probability, source, insights)
            VALUES (:notice_id, :win_probability, :source, CAST(:insights AS JSONB))
            ON CONFLICT (notice_id) DO UPDATE SET
                win_probability = EXCLUDED.win_probability,
                source = EXCLUDED.source,
                insights = EXCLUDED.insights,
                updated_at = now();
            """
        )
        params = {
            "notice_id": notice_id,
            "win_probability": insights.win_probability.score,
            "source": insights.source.value,
            "insights": insights.model_dump_json(),
        }
        with self.engine.connect() as conn:
            conn.execute(sql, params)
            conn.commit()
        self.logger.info("Proposal insights saved successfully.")
