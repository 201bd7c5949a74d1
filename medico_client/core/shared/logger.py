"""
Shared Logger

Logging for the client package. Everything logs under the ``medico_client``
namespace so an embedding application decides where records go;
``setup_logging`` only installs a handler on that namespace.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from medico_client.config.settings import get_settings

PACKAGE_LOGGER = "medico_client"
LINE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the workflow context under ``context``."""

    def __init__(self, environment: str | None = None):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.environment:
            entry["environment"] = self.environment

        context = getattr(record, "workflow_context", None)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = f"{self.COLORS.get(original, '')}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class ContextLogger:
    """Logger bound to a workflow run (owner, document, step...)."""

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = logging.getLogger(name)
        self._context = context or {}

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def with_context(self, **kwargs: Any) -> "ContextLogger":
        return ContextLogger(self._logger.name, {**self._context, **kwargs})

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra={"workflow_context": {**self._context, **kwargs}})

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)


def configure_logging(level: str = "INFO", json_output: bool = False, environment: str | None = None) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_output: Emit JSON lines instead of colored text
        environment: Stamped on every JSON record

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level.upper())
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter(environment=environment))
    else:
        handler.setFormatter(ColoredFormatter(LINE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    package_logger.addHandler(handler)
    return package_logger


def setup_logging() -> logging.Logger:
    """Configure logging from Settings (LOG_LEVEL, LOG_JSON, ENVIRONMENT)."""
    settings = get_settings()
    return configure_logging(
        level=settings.LOG_LEVEL,
        json_output=settings.LOG_JSON,
        environment=settings.ENVIRONMENT,
    )


def get_workflow_logger(workflow: str, **context: Any) -> ContextLogger:
    """Get the context logger for a workflow controller."""
    return ContextLogger(f"{PACKAGE_LOGGER}.workflow.{workflow}", {"workflow": workflow, **context})
