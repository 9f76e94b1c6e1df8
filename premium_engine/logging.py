"""Structured logging configuration for premium-engine.

Engine code attaches the entities a message is about as logging extras,
e.g. ``logger.info(..., extra={"policy_id": pid, "payment_id": pay_id})``.
The JSON formatter emits those as top-level keys so payment commits can be
traced per policy; the standard formatter appends them to the line.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Record attributes promoted to structured fields when present
DOMAIN_FIELDS = ("client_id", "policy_id", "payment_id", "premium_mode", "next_due_date")


def domain_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the domain extras set on a log record."""
    fields = {name: getattr(record, name) for name in DOMAIN_FIELDS if getattr(record, name, None) is not None}
    # Free-form structured fields: extra={"extra": {...}}
    fields.update(getattr(record, "extra", None) or {})
    return fields


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Configure logging for premium-engine.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    format_type : str
        Format type: "standard" or "json".
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = StandardFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("premium_engine").setLevel(log_level)

    # Faker logs locale lookups at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


class StandardFormatter(logging.Formatter):
    """Plain-text formatter that appends domain fields as ``key=value``."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = domain_fields(record)
        if fields:
            line += " | " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(domain_fields(record))

        # Dates and Decimals from payment records
        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Parameters
    ----------
    name : str
        Logger name (usually __name__).

    Returns
    -------
    logging.Logger
        Configured logger.
    """
    return logging.getLogger(name)
