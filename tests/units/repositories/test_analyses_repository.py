"""Unit tests for AnalysesRepository."""

import json
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from unittest.mock import MagicMock
from sibal.models.deadlines import DeadlineMonitoringResult
from sibal.models.documents import DocumentProcessingResult
from sibal.models.enums import DocumentType, ProcessingStatus
from sibal.repositories.analyses import AnalysesRepository
from sqlalchemy import Engine


@pytest.fixture
def mock_engine() -> MagicMock:
    """Mock the SQLAlchemy engine."""
    return MagicMock(spec=Engine)


@pytest.fixture
def mock_connection(mock_engine: MagicMock) -> MagicMock:
    """Mock the database connection."""
    connection = MagicMock()
    mock_engine.connect.return_value.__enter__.return_value = connection
    return connection


@pytest.fixture
def repository(mock_engine: MagicMock) -> AnalysesRepository:
    """Create an AnalysesRepository instance."""
    return AnalysesRepository(mock_engine)


def test_save_document_processing_result(repository: AnalysesRepository, mock_connection: MagicMock) -> None:
    document_id = uuid4()
    result = DocumentProcessingResult(
        document_id=document_id,
        document_url="https://compras.gov.br/edital.pdf",
        document_type=DocumentType.NOTICE,
        processing_status=ProcessingStatus.SUCCESS,
        confidence_score=85,
    )

    repository.save_document_processing_result("notice-1", result)

    sql, params = mock_connection.execute.call_args.args
    assert "ON CONFLICT (notice_id, document_url)" in str(sql)
    assert params["document_id"] == str(document_id)
    assert params["document_type"] == "edital"
    assert params["processing_status"] == "success"
    assert params["confidence_score"] == 85
    assert json.loads(params["processing_result"])["document_url"] == "https://compras.gov.br/edital.pdf"
    mock_connection.commit.assert_called_once()


def test_save_deadline_monitoring_result(repository: AnalysesRepository, mock_connection: MagicMock) -> None:
    monitoring_date = datetime(2025, 3, 10, 12, tzinfo=timezone.utc)
    result = DeadlineMonitoringResult(
        company_id="company-1",
        monitoring_date=monitoring_date,
        days_ahead=7,
        total_deadlines=3,
        critical_deadlines=1,
    )

    repository.save_deadline_monitoring_result(result)

    sql, params = mock_connection.execute.call_args.args
    assert "ON CONFLICT (company_id)" in str(sql)
    assert params["company_id"] == "company-1"
    assert params["monitoring_date"] == monitoring_date
    assert params["total_deadlines"] == 3
    assert params["critical_deadlines"] == 1
    mock_connection.commit.assert_called_once()


def test_upsert_proposal_insights(repository: AnalysesRepository, mock_connection: MagicMock) -> None:
    insights = MagicMock()
    insights.win_probability.score = 62
    insights.source.value = "ai"
    insights.model_dump_json.return_value = '{"notice_id": "notice-1"}'

    repository.upsert_proposal_insights("notice-1", insights)

    sql, params = mock_connection.execute.call_args.args
    assert "ON CONFLICT (notice_id)" in str(sql)
    assert params == {
        "notice_id": "notice-1",
        "win_probability": 62,
        "source": "ai",
        "insights": '{"notice_id": "notice-1"}',
    }
    mock_connection.commit.assert_called_once()
