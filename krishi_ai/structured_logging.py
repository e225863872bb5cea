"""
Structured Logging Module for Krishi AI

JSON-formatted logging that tags every record emitted during a flow run
with that run's ID, so retries of one request can be followed in the logs.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Optional
from contextvars import ContextVar
import uuid

run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def get_run_id() -> Optional[str]:
    """Get the current flow run ID from context."""
    return run_id_var.get()


def set_run_id(run_id: Optional[str] = None) -> str:
    """Set a new flow run ID in context. Returns the ID."""
    if run_id is None:
        run_id = str(uuid.uuid4())[:8]
    run_id_var.set(run_id)
    return run_id


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, service_name: str = "krishi-ai"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        run_id = get_run_id()
        if run_id:
            log_data["run_id"] = run_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data") and record.extra_data:
            log_data["data"] = record.extra_data

        return json.dumps(log_data, default=str, ensure_ascii=False)


class StructuredLogger:
    """Wrapper around logging.Logger that attaches keyword args as structured data."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: Any = None, **kwargs: Any) -> None:
        extra = {"extra_data": kwargs} if kwargs else {}
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: Any = None, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)


def setup_logging(
    level: Any = logging.INFO,
    service_name: str = "krishi-ai",
    use_json: bool = True
) -> None:
    """Set up logging for the application.

    Args:
        level: Logging level, as an int or a name like "INFO"
        service_name: Service name for log entries
        use_json: Whether to use JSON formatting (default: True)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if use_json:
        handler.setFormatter(JSONFormatter(service_name))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))

    root_logger.addHandler(handler)

    # SDK transport chatter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)


def configure_logging(settings=None) -> None:
    """Install logging from LOG_FORMAT / LOG_LEVEL settings."""
    from .config import get_settings

    settings = settings or get_settings()
    setup_logging(
        level=settings.log_level,
        use_json=settings.log_format == "json",
    )
