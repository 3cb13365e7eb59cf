import json
import logging
import os
import sys
from enum import Enum

# Every module logger hangs off this one
PARENT_LOGGER = "cost_tracker"


class LogFormat(str, Enum):
    text = "text"
    json = "json"


# --- Formatters ---
class JSONFormatter(logging.Formatter):
    """Outputs logs as JSON for the cluster's log collector."""

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.pathname}:{record.lineno}",
            "service": os.environ.get("SERVICE_NAME", "cost-tracker"),
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


class HumanReadableFormatter(logging.Formatter):
    """Outputs logs as clean text for CLI users."""

    def format(self, record):
        return f"[{record.levelname}] {record.getMessage()}"


# --- Internal Helper ---
def _configure_handler(logger_instance, fmt_type):
    """Clears existing handlers and adds the correct one."""
    for h in logger_instance.handlers[:]:
        logger_instance.removeHandler(h)

    # stdout is reserved for the report
    handler = logging.StreamHandler(sys.stderr)
    if fmt_type == LogFormat.text.value:
        handler.setFormatter(HumanReadableFormatter())
    else:
        handler.setFormatter(JSONFormatter())

    logger_instance.addHandler(handler)
    # Keep records away from the root logger
    logger_instance.propagate = False


# --- Public API ---
def get_logger(name: str):
    """
    Returns a logger for the specific module.
    Ensures the PARENT logger is configured once.
    """
    logger = logging.getLogger(name)

    parent_logger = logging.getLogger(PARENT_LOGGER)
    if not parent_logger.handlers:
        # Scheduled runs default to JSON; the CLI flag switches to text
        default_fmt = os.environ.get("LOG_FORMAT", LogFormat.json.value).lower()
        _configure_handler(parent_logger, default_fmt)
        parent_logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())

    return logger


def set_log_format(fmt_type: str):
    """
    Reconfigures ONLY the parent logger.
    Child loggers will naturally bubble up to this one.
    """
    fmt_type = fmt_type.lower()
    os.environ["LOG_FORMAT"] = fmt_type

    parent_logger = logging.getLogger(PARENT_LOGGER)
    _configure_handler(parent_logger, fmt_type)
    if parent_logger.level == logging.NOTSET:
        parent_logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
