"""This module provides a centralized HTTP client for the application."""

import time
from typing import Any

import requests
from requests.exceptions import ConnectTimeout, ReadTimeout
from sibal.providers.config import Config, ConfigProvider
from sibal.providers.logging import Logger, LoggingProvider
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random_exponential


class HttpProvider:
    """A centralized HTTP client that manages a requests.Session."""

    _session: requests.Session | None = None
    _config: Config
    _logger: Logger

    def __init__(self, config: Config | None = None) -> None:
        """Initializes the HttpProvider.

        Args:
            config: An optional configuration object. A fresh one is loaded
                from the environment when omitted.
        """
        self._config = config or ConfigProvider.get_config()
        self._logger = LoggingProvider().get_logger()
        self._session = None

    def _get_session(self) -> requests.Session:
        """Initializes and returns the requests.Session used by this provider.

        The session is configured to ignore system-level proxy settings by
        setting `trust_env` to `False`.

        Returns:
            A configured `requests.Session` instance.
        """
        if self._session is None:
            self._session = requests.Session()
            self._session.trust_env = False
            self._session.headers.update(
                {
                    "User-Agent": "sibal-notice-intelligence/1.0",
                    "Connection": "close",
                }
            )
        return self._session

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_random_exponential(multiplier=1, max=10),
        retry=(retry_if_exception_type(ConnectTimeout) | retry_if_exception_type(ReadTimeout)),
        reraise=True,
    )
    def get(self, url: str, **kwargs: Any) -> requests.Response:
        """Performs a GET request with a retry mechanism on timeouts.

        It uses a granular timeout of 5 seconds for the connection and 30
        seconds for the read.

        Args:
            url: The URL to request.
            **kwargs: Additional keyword arguments to pass to requests.get.

        Returns:
            The requests.Response object.
        """
        time.sleep(self._config.HTTP_REQUEST_DELAY_SECONDS)
        session = self._get_session()
        kwargs.setdefault("timeout", (5, 30))
        self._logger.debug(f"Fetching URL: {url} with params: {kwargs.get('params')}")
        response = session.get(url, **kwargs)
        self._logger.debug(f"Request to {response.url} completed with status: {response.status_code}")
        return response

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        """Performs a single POST request.

        POST requests are never retried: the AI endpoint is billed per call and
        callers that need resilience wrap the whole analyzer call instead.

        Args:
            url: The URL to request.
            **kwargs: Additional keyword arguments to pass to requests.post.

        Returns:
            The requests.Response object.
        """
        session = self._get_session()
        kwargs.setdefault("timeout", (5, 30))
        self._logger.debug(f"Posting to URL: {url}")
        response = session.post(url, **kwargs)
        self._logger.debug(f"POST to {response.url} completed with status: {response.status_code}")
        return response

    def close(self) -> None:
        """Closes the session."""
        if self._session:
            self._session.close()
            self._session = None
