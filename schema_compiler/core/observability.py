"""
Observability module for the schema compiler.

Provides:
- Structured logging with JSON format
- Logging setup driven by Settings (used by the CLI; the library itself
  never installs handlers)
- Prometheus metrics for conversions (opt-in)

Usage:
    from schema_compiler.core.observability import configure_logging, metrics

    configure_logging(settings)
"""

import json
import logging
from datetime import UTC, datetime

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

from schema_compiler.core.config import Settings

# Attributes every LogRecord carries; anything else came from logging.extra
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)

PLAIN_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ============================================================================
# Structured Logging Configuration
# ============================================================================


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - logger: Logger name
    - message: Log message
    - exception: Exception type and message (if any)
    - file, line, function: Call site
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python logging LogRecord

        Returns:
            JSON-formatted log string
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        log_entry["file"] = record.pathname
        log_entry["line"] = record.lineno
        log_entry["function"] = record.funcName

        # These come from logger.info("msg", extra={"key": "value"})
        extra_keys = {
            k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS
        }
        if extra_keys:
            log_entry["extra"] = extra_keys

        return json.dumps(log_entry, default=str)


def configure_structured_logging(level: str = "INFO") -> None:
    """
    Configure root logger with structured JSON formatting.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(handler)


def configure_logging(config: Settings) -> None:
    """
    Configure logging from settings.

    Structured JSON lines when config.structured_logs is set, a plain
    single-line format otherwise.
    """
    if config.structured_logs:
        configure_structured_logging(config.log_level)
        return

    logging.basicConfig(level=config.log_level, format=PLAIN_LOG_FORMAT, force=True)


# ============================================================================
# Prometheus Metrics
# ============================================================================

# Use a custom registry to avoid conflicts with other Prometheus metrics
_registry = CollectorRegistry()


class Metrics:
    """
    Conversion metrics.

    Only recorded when settings.metrics_enabled is set.
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        """Initialize all metrics with proper labels."""
        self.registry = registry

        # Conversion success/failure count
        self.conversions_total = Counter(
            "schema_compiler_conversions_total",
            "Total schema conversions",
            ["status"],
            registry=self.registry,
        )

        # Conversion duration
        self.conversion_duration_seconds = Histogram(
            "schema_compiler_conversion_duration_seconds",
            "Schema conversion duration in seconds",
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self.registry,
        )


# Global metrics instance
metrics = Metrics(_registry)


def render_metrics() -> bytes:
    """Return the metrics in Prometheus text format."""
    return generate_latest(_registry)
