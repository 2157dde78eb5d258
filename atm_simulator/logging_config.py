"""
Structured Logging Configuration Module

Every ATM event is one log line. In json mode the line is an object with
the timestamp, level, emitting module and message, plus whichever account
context the caller attached. PINs only ever reach the log masked.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Record attributes copied into the JSON object when present
CONTEXT_FIELDS = ("account", "operation", "target", "details")


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON object"""

    def format(self, record):
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(level: str = "INFO", logger_name: str = "atm", fmt: str = "json") -> logging.Logger:
    """
    Point the application logger at a single stream handler.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Name of the application logger; child loggers inherit the handler
        fmt: "json" for JSONFormatter output, "text" for a plain line format

    Returns:
        The configured logger. Calling again replaces the handler instead of adding one.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(TEXT_FORMAT) if fmt.lower() == "text" else JSONFormatter())

    logger = logging.getLogger(logger_name)
    logger.handlers[:] = [handler]
    logger.setLevel(level.upper())
    logger.propagate = False
    return logger


def get_logger(name: str = "atm") -> logging.Logger:
    return logging.getLogger(name)


def mask_pin(pin) -> str:
    """Render a PIN for logs, keeping only the last two digits"""
    text = str(pin)
    if len(text) <= 2:
        return "*" * len(text)
    return "*" * (len(text) - 2) + text[-2:]


def log_action(logger: logging.Logger, level: str, message: str,
               pin: Optional[int] = None, operation: Optional[str] = None,
               target: Optional[str] = None, details: Optional[dict] = None) -> None:
    """
    Log an ATM event with account context.

    The record is attributed to the caller's module, not this one.

    Args:
        logger: Logger instance
        level: Level name (info, warning, ...)
        message: Log message
        pin: PIN of the account involved; logged masked as "account"
        operation: register, login, deposit, withdraw, save, ...
        target: Where the operation landed, e.g. the data file path
        details: Amounts, balances and counts relevant to the event
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    context = {
        "account": mask_pin(pin) if pin is not None else None,
        "operation": operation,
        "target": target,
        "details": details,
    }
    logger.log(levelno, message, extra=context, stacklevel=2)
