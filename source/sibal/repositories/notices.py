"""This module defines the repository for reading and annotating notices."""

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sibal.models.notices import Notice
from sibal.providers.logging import Logger, LoggingProvider
from sqlalchemy import Engine, text

NOTICE_COLUMNS = """
    id, title, description, organ, modality, estimated_value,
    opening_date, submission_deadline, public_session_date, appeal_deadline,
    url, status, risk_level, risk_score, risk_analysis, summary, detailed_summary
"""

UPDATABLE_COLUMNS = frozenset({"risk_level", "risk_score", "risk_analysis", "summary", "detailed_summary"})
JSON_COLUMNS = frozenset({"risk_analysis", "detailed_summary"})


class NoticesRepository:
    """Handles database operations for the `notices` table.

    Notices are written by the ingestion side; this repository only reads
    them and stores the annotations produced by the analyzers.

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

    def _row_to_notice(self, row: Mapping[str, Any]) -> Notice | None:
        """Converts a database row into a Notice, decoding JSON columns stored as text.

        Args:
            row: A row mapping from a query over `NOTICE_COLUMNS`.

        Returns:
            The notice, or None when a JSON column is corrupt or the row does
            not validate.
        """
        data = dict(row)
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        for column in JSON_COLUMNS:
            if isinstance(data.get(column), str):
                try:
                    data[column] = json.loads(data[column])
                except json.JSONDecodeError as e:
                    self.logger.error(f"Failed to decode column {column} of notice {data.get('id')} from DB: {e}")
                    return None
        try:
            return Notice.model_validate(data)
        except ValidationError as e:
            self.logger.error(f"Failed to parse notice {data.get('id')} from DB due to validation error: {e}")
            return None

    def _fetch_notices(self, sql: Any, params: dict[str, Any]) -> list[Notice]:
        with self.engine.connect() as conn:
            rows = conn.execute(sql, params).mappings().all()
        notices = [self._row_to_notice(row) for row in rows]
        return [notice for notice in notices if notice is not None]

    def get_notice(self, notice_id: str) -> Notice | None:
        """Retrieves a single notice by its ID.

        Args:
            notice_id: The ID of the notice.

        Returns:
            A `Notice` object if found, otherwise `None`.
        """
        sql = text(f"SELECT {NOTICE_COLUMNS} FROM notices WHERE id = :notice_id")
        with self.engine.connect() as conn:
            row = conn.execute(sql, {"notice_id": notice_id}).mappings().one_or_none()
        if row is None:
            return None
        return self._row_to_notice(row)

    def update_notice(self, notice_id: str, fields: dict[str, Any]) -> None:
        """Writes analyzer annotations back onto a notice.

        Only the annotation columns may be updated; JSON values are serialized
        and cast to JSONB.

        Args:
            notice_id: The ID of the notice to update.
            fields: A mapping of column name to new value.

        Raises:
            ValueError: If a field is not an updatable column.
        """
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Columns cannot be updated on notices: {', '.join(sorted(unknown))}")
        if not fields:
            return

        assignments = []
        params: dict[str, Any] = {"notice_id": notice_id}
        for column in sorted(fields):
            value = fields[column]
            if column in JSON_COLUMNS:
                assignments.append(f"{column} = CAST(:{column} AS JSONB)")
                params[column] = json.dumps(value, default=str) if value is not None else None
            else:
                assignments.append(f"{column} = :{column}")
                params[column] = value
        assignments.append("updated_at = now()")

        self.logger.info(f"Updating notice {notice_id} columns: {', '.join(sorted(fields))}.")
        sql = text(f"UPDATE notices SET {', '.join(assignments)} WHERE id = :notice_id")
        with self.engine.connect() as conn:
            conn.execute(sql, params)
            conn.commit()

    def list_notices_by_deadline_window(self, start: datetime, end: datetime) -> list[Notice]:
        """Lists the notices whose submission deadline falls inside a window.

        Args:
            start: The inclusive lower bound.
            end: The inclusive upper bound.

        Returns:
            The matching notices, earliest deadline first.
        """
        sql = text(
            f"""
            SELECT {NOTICE_COLUMNS}
            FROM notices
            WHERE submission_deadline >= :start
              AND submission_deadline <= :end
            ORDER BY submission_deadline ASC
            """
        )
        return self._fetch_notices(sql, {"start": start, "end": end})

    def list_notices_by_organ(self, organ: str, exclude_id: str, limit: int) -> list[Notice]:
        """Lists other notices published by the same organ.

        Args:
            organ: The organ name.
            exclude_id: A notice ID to leave out, usually the current one.
            limit: The maximum number of notices to return.

        Returns:
            Up to `limit` notices of the organ.
        """
        sql = text(
            f"""
            SELECT {NOTICE_COLUMNS}
            FROM notices
            WHERE organ = :organ AND id <> :exclude_id
            LIMIT :limit
            """
        )
        return self._fetch_notices(sql, {"organ": organ, "exclude_id": exclude_id, "limit": limit})

    def list_followed_notice_ids(self, company_id: str) -> set[str]:
        """Returns the IDs of the notices a company follows.

        Args:
            company_id: The company ID.

        Returns:
            The set of followed notice IDs.
        """
        sql = text("SELECT notice_id FROM user_follows WHERE company_id = :company_id")
        with self.engine.connect() as conn:
            rows = conn.execute(sql, {"company_id": company_id}).fetchall()
        return {str(row[0]) for row in rows}
