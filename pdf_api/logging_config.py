"""
Centralized logging configuration for the service.

Provides structured JSON logging with correlation ID support,
redaction of signed-URL credentials, environment-aware behavior,
and optional daily-rotated file logs kept for 48 hours.

All modules should use:
    from pdf_api.logging_config import get_logger
    logger = get_logger(__name__)
"""

import json
import logging
import os
import re
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

ROOT_LOGGER_NAME = "pdf_api"

# ---------------------------------------------------------------------------
# Correlation ID context (thread-safe via contextvars)
# ---------------------------------------------------------------------------
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_HEADER = "x-correlation-id"


def get_correlation_id() -> str:
    """Return the current correlation ID, or empty string if none set."""
    return _correlation_id.get()


def set_correlation_id(cid: str) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id.set(cid)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Environment detection
# ---------------------------------------------------------------------------
def _get_environment() -> str:
    """Detect the current environment from ENV or APP_ENV."""
    return os.environ.get("APP_ENV", os.environ.get("ENV", "development")).lower()


def is_production() -> bool:
    return _get_environment() == "production"


# ---------------------------------------------------------------------------
# Secret redaction
# ---------------------------------------------------------------------------
# Source URLs are frequently pre-signed, so query-string credentials are
# scrubbed along with the usual header-style secrets.
_SECRET_PATTERNS = [
    re.compile(r"(api[_-]?key\s*[:=]\s*)['\"]?[\w\-]{10,}['\"]?", re.IGNORECASE),
    re.compile(r"(token\s*[:=]\s*)['\"]?[\w\-]{10,}['\"]?", re.IGNORECASE),
    re.compile(r"(password\s*[:=]\s*)['\"]?[^\s'\"]{4,}['\"]?", re.IGNORECASE),
    re.compile(r"(Bearer\s+)[\w\-\.]{10,}", re.IGNORECASE),
    re.compile(r"([?&](?:x-amz-signature|x-amz-credential|x-amz-security-token|signature|sig)=)[^&\s]+", re.IGNORECASE),
]


def _redact_secrets(message: str) -> str:
    """Remove secret values from log messages."""
    result = message
    for pattern in _SECRET_PATTERNS:
        result = pattern.sub(r"\1[REDACTED]", result)
    return result


# ---------------------------------------------------------------------------
# Structured JSON formatter
# ---------------------------------------------------------------------------
class StructuredJsonFormatter(logging.Formatter):
    """Formats log records as structured JSON objects.

    Every log entry includes: timestamp, level, service, context, correlationId.
    Error-level logs also include stackTrace.
    """

    LEVEL_MAP = {
        "DEBUG": "debug",
        "INFO": "info",
        "WARNING": "warn",
        "ERROR": "error",
        "CRITICAL": "fatal",
    }

    def __init__(self, service: str = ROOT_LOGGER_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        level = self.LEVEL_MAP.get(record.levelname, record.levelname.lower())

        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": level,
            "service": self.service,
            "context": record.name,
            "correlationId": get_correlation_id() or None,
            "message": _redact_secrets(record.getMessage()),
        }

        if record.exc_info and record.exc_info[1] is not None:
            entry["stackTrace"] = _redact_secrets(
                self.formatException(record.exc_info)
            )

        # Extra structured fields passed via `extra={"data": {...}}`
        if hasattr(record, "data") and isinstance(record.data, dict):
            entry["data"] = record.data

        return json.dumps(entry, default=str)


# ---------------------------------------------------------------------------
# Development formatter (human-readable)
# ---------------------------------------------------------------------------
class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for local development."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S"
        )
        cid = get_correlation_id()
        cid_str = f" [{cid[:8]}]" if cid else ""
        msg = _redact_secrets(record.getMessage())
        base = f"{record.levelname}:\t{ts}\t{record.name}{cid_str}\t{msg}"

        if record.exc_info and record.exc_info[1] is not None:
            base += "\n" + _redact_secrets(self.formatException(record.exc_info))

        return base


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------
LOG_DIR = Path(os.environ.get("LOG_DIR", "logs"))
LOG_RETENTION_HOURS = 48

_configured = False


def configure_logging(
    log_level: str = "INFO",
    service: str = ROOT_LOGGER_NAME,
    enable_file_logging: bool = False,
) -> None:
    """Configure the centralized logging system.

    Call once at application startup (in main.py).
    All subsequent get_logger() calls will inherit this config.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service: Service name included in every structured log entry.
        enable_file_logging: Whether to write logs to disk with 48h retention.
    """
    global _configured

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if is_production():
        formatter = StructuredJsonFormatter(service=service)
    else:
        formatter = DevelopmentFormatter()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    if enable_file_logging:
        try:
            LOG_DIR.mkdir(parents=True, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                LOG_DIR / "app.log",
                when="h",
                interval=24,
                backupCount=LOG_RETENTION_HOURS // 24,
                encoding="utf-8",
            )
            file_handler.setFormatter(StructuredJsonFormatter(service=service))
            root_logger.addHandler(file_handler)
        except OSError:
            root_logger.warning("Could not initialize file logging")

    root_logger.propagate = False
    _configured = True


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger that routes through the centralized configuration.

    All loggers are children of the 'pdf_api' root logger so they
    inherit its handlers and formatting.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Configured logging.Logger instance.
    """
    if not _configured:
        configure_logging()

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)

    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    logger.propagate = True
    return logger
