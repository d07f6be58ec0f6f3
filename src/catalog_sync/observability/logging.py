"""
Structured logging utilities for catalog-sync.

This module provides correlation ID tracking and structured log formatting
so every log line of one reconciliation, including the concurrent upsert
passes, can be tied together.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

from ..settings import Settings
from ..settings import settings as default_settings

# Context variable for tracking correlation IDs across async operations
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

STRUCTURED_FIELDS = (
    "service_name",
    "service_id",
    "operation",
    "item_kind",
    "item_key",
    "action",
    "duration",
    "error_type",
    "summary",
)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add correlation ID to the log record.

        Args:
            record: The log record to process

        Returns:
            True to allow the record to be processed
        """
        current_correlation_id = correlation_id.get()
        if not current_correlation_id:
            current_correlation_id = generate_correlation_id()
            correlation_id.set(current_correlation_id)

        record.correlation_id = current_correlation_id
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs with correlation ID support.

    Formats log records as structured JSON for better parsing and analysis
    in log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """Generate a short correlation ID."""
    return str(uuid.uuid4())[:8]


def set_correlation_id(corr_id: str) -> str:
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str:
    return correlation_id.get("")


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
) -> None:
    """
    Set up structured logging for catalog-sync.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
        correlation_id_enabled: Whether to enable correlation ID tracking
    """
    root_logger = logging.getLogger()

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter: logging.Formatter = StructuredFormatter()
    elif correlation_id_enabled:
        formatter = logging.Formatter(
            "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structured logging from settings."""
    settings = settings or default_settings
    setup_structured_logging(
        log_level=settings.log_level.upper(),
        enable_json_formatting=settings.json_logs,
        correlation_id_enabled=settings.correlation_ids,
    )


class ReconcileLogger:
    """
    Logger for reconciliation events with structured logging support.

    Provides convenient methods for logging the reconciliation lifecycle
    and per-item outcomes with correlation ID tracking.
    """

    def __init__(self, name: str, correlation_ids_enabled: bool = True):
        self.logger = logging.getLogger(name)
        self.correlation_ids_enabled = correlation_ids_enabled

    def log_reconciliation_start(
        self, service_name: str, correlation_id: str | None = None
    ) -> str:
        """
        Log the start of a reconciliation.

        Args:
            service_name: Name of the registration being reconciled
            correlation_id: Optional correlation ID (will generate if not provided)

        Returns:
            The correlation ID used for this reconciliation, or an empty
            string when correlation IDs are disabled
        """
        if not self.correlation_ids_enabled:
            correlation_id = ""
        else:
            if correlation_id is None:
                correlation_id = generate_correlation_id()
            set_correlation_id(correlation_id)

        self.logger.info(
            f"Starting reconciliation for service {service_name}",
            extra={"service_name": service_name, "operation": "reconcile_start"},
        )

        return correlation_id

    def log_reconciliation_success(
        self,
        service_name: str,
        service_id: str | None,
        duration: float,
        summary: dict[str, int],
    ) -> None:
        self.logger.info(
            f"Finished processing data for service {service_name}",
            extra={
                "service_name": service_name,
                "service_id": service_id,
                "operation": "reconcile_success",
                "duration": duration,
                "summary": summary,
            },
        )

    def log_reconciliation_rejected(
        self, service_name: str, error: Exception, duration: float
    ) -> None:
        """Log a registration that was abandoned before any change."""
        self.logger.warning(
            f"Skipping reconciliation for service {service_name}: {error}",
            extra={
                "service_name": service_name,
                "operation": "reconcile_rejected",
                "error_type": type(error).__name__,
                "duration": duration,
            },
        )

    def log_reconciliation_error(
        self, service_name: str, error: Exception, duration: float
    ) -> None:
        self.logger.error(
            f"Reconciliation failed for service {service_name}: {error}",
            extra={
                "service_name": service_name,
                "operation": "reconcile_error",
                "error_type": type(error).__name__,
                "duration": duration,
            },
            exc_info=True,
        )

    def log_item(
        self,
        level: int,
        message: str,
        service_name: str,
        item_kind: str,
        item_key: str,
        action: str,
        error: Exception | None = None,
    ) -> None:
        """Log the outcome of a single upsert item."""
        extra = {
            "service_name": service_name,
            "item_kind": item_kind,
            "item_key": item_key,
            "action": action,
        }
        if error is not None:
            extra["error_type"] = type(error).__name__
        self.logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with extra data."""
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with extra data."""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with extra data."""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message with extra data."""
        self.logger.error(message, exc_info=exc_info, extra=kwargs)
