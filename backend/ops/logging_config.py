"""
Structured logging configuration.

Production writes JSON lines to stdout; debug mode writes a readable
console line. Posting, numbering-fallback and period events carry their
ledger context (company, entry number, rejection code) as top-level JSON
fields so degraded-mode warnings can be filtered per tenant.

Environment variables:
- LOG_FORMAT: "json" or "console" (default: json in production)
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
"""
import json
import logging
import os
from datetime import datetime, timezone

APP_LOGGERS = ("accounts", "accounting", "tax", "limits", "ops")

# Promoted to top-level JSON fields when present on a record.
CONTEXT_FIELDS = ("company", "entry_number", "entry_date", "reference", "code", "year", "period", "window")

_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def get_logging_config(debug: bool = False) -> dict:
    """Build Django LOGGING for the given debug flag."""
    log_level = os.environ.get("LOG_LEVEL", "INFO" if not debug else "DEBUG")
    log_format = os.environ.get("LOG_FORMAT", "console" if debug else "json")

    if log_format == "json":
        formatter = {"()": "ops.logging_config.JsonFormatter"}
    else:
        formatter = {"format": "[{asctime}] {levelname} {name} {message}", "style": "{"}

    app_logger = {"handlers": ["console"], "level": log_level, "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": log_level},
            "django": {"handlers": ["console"], "level": log_level, "propagate": False},
            "django.request": {
                "handlers": ["console"],
                "level": log_level if debug else "ERROR",
                "propagate": False,
            },
            **{name: dict(app_logger) for name in APP_LOGGERS},
        },
    }


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Ledger context from CONTEXT_FIELDS is lifted to the top level; any other
    `extra` values go under "extra".
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS:
                continue
            if key in CONTEXT_FIELDS:
                log_entry[key] = value
            else:
                extras[key] = value
        if extras:
            log_entry["extra"] = extras

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def get_logger(name: str) -> logging.Logger:
    """
    Usage:
        logger = get_logger(__name__)
        logger.info("Journal entry posted", extra={"entry_number": number, "company": company.slug})
    """
    return logging.getLogger(name)
