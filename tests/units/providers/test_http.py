"""Unit tests for the HttpProvider."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
import requests
from requests.exceptions import ConnectTimeout, ReadTimeout
from sibal.providers.config import Config
from sibal.providers.http import HttpProvider


@pytest.fixture
def provider() -> HttpProvider:
    return HttpProvider(Config(HTTP_REQUEST_DELAY_SECONDS=0))


@pytest.fixture(autouse=True)
def no_retry_wait() -> Generator[None, None, None]:
    """Skips the exponential back-off between retries."""
    with patch.object(HttpProvider.get.retry, "sleep"):
        yield


def test_get_session_is_created_once(provider: HttpProvider) -> None:
    session = provider._get_session()

    assert isinstance(session, requests.Session)
    assert session.trust_env is False
    assert provider._get_session() is session


@patch("requests.Session.get")
def test_get_successful(mock_get: MagicMock, provider: HttpProvider) -> None:
    mock_get.return_value = MagicMock(status_code=200)

    response = provider.get("http://example.com/edital.pdf")

    assert response.status_code == 200
    mock_get.assert_called_once_with("http://example.com/edital.pdf", timeout=(5, 30))


@patch("requests.Session.get", side_effect=ConnectTimeout)
def test_get_retry_on_connect_timeout(mock_get: MagicMock, provider: HttpProvider) -> None:
    with pytest.raises(ConnectTimeout):
        provider.get("http://example.com")
    assert mock_get.call_count == 3


@patch("requests.Session.get", side_effect=ReadTimeout)
def test_get_retry_on_read_timeout(mock_get: MagicMock, provider: HttpProvider) -> None:
    with pytest.raises(ReadTimeout):
        provider.get("http://example.com")
    assert mock_get.call_count == 3


@patch("requests.Session.post", side_effect=ReadTimeout)
def test_post_is_not_retried(mock_post: MagicMock, provider: HttpProvider) -> None:
    with pytest.raises(ReadTimeout):
        provider.post("http://example.com", json={})
    assert mock_post.call_count == 1


def test_close_discards_session(provider: HttpProvider) -> None:
    session = provider._get_session()
    with patch.object(session, "close") as mock_close:
        provider.close()

    mock_close.assert_called_once()
    assert provider._session is None
