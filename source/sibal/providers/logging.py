"""Logging for the analyzers, tagged with the correlation ID of the running tool.

Every record passes through `ContextualFilter`, which reads the correlation ID
of the current thread, so all the lines emitted by one tool call share a tag.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Generator
from contextlib import contextmanager
from logging import Filter, Formatter, Logger, LogRecord, StreamHandler, _nameToLevel, getLogger

from sibal.providers.config import ConfigProvider

_log_context = threading.local()

LOGGER_NAME = "sibal"
LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] [%(correlation_id)s] - %(message)s"


class ContextualFilter(Filter):
    """Stamps each record with the thread's correlation ID, or "-" outside a tool call."""

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = getattr(_log_context, "correlation_id", None) or "-"
        return True


class LoggingProvider:
    """Hands out the single `sibal` logger, configuring it on first use."""

    _instance: LoggingProvider | None = None
    _logger: Logger | None = None

    def __new__(cls) -> LoggingProvider:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_logger(self, level_override: str | None = None) -> Logger:
        """Returns the application logger.

        The level comes from `LOG_LEVEL` the first time. A level override,
        as passed by the CLI `--log-level` option, wins at any call; unknown
        level names leave the current level untouched.

        Args:
            level_override: An optional log level name, e.g. ``"DEBUG"``.

        Returns:
            The configured logger.
        """
        if self._logger is None:
            logger = getLogger(LOGGER_NAME)
            if not logger.handlers:
                handler = StreamHandler(sys.stderr)
                handler.setFormatter(Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
                handler.addFilter(ContextualFilter())
                logger.addHandler(handler)
            logger.setLevel(_nameToLevel.get(ConfigProvider.get_config().LOG_LEVEL.upper(), _nameToLevel["INFO"]))
            self._logger = logger

        if level_override:
            self._logger.setLevel(_nameToLevel.get(level_override.upper(), self._logger.level))
        return self._logger

    @contextmanager
    def set_correlation_id(self, correlation_id: str) -> Generator[None, None, None]:
        """Tags the log lines of the enclosed block, clearing the tag on exit.

        Args:
            correlation_id: The tag, usually ``"<tool name>:<short uuid>"``.
        """
        _log_context.correlation_id = correlation_id
        try:
            yield
        finally:
            _log_context.correlation_id = None
