"""Logging setup for the DebtPath command line.

Library modules only create named loggers; handlers are installed here,
once, by the CLI (or by an application embedding DebtPath).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import AppSettings

__all__ = ["JSONFormatter", "configure_logging"]

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def configure_logging(settings: Optional[AppSettings] = None) -> logging.Logger:
    """
    Attach a stream handler to the ``debtpath`` logger.

    Level comes from ``settings.effective_log_level``; ``settings.json_logs``
    selects the JSON formatter. Calling it again replaces the handler
    rather than stacking a second one.
    """
    settings = settings or AppSettings()
    logger = logging.getLogger("debtpath")
    logger.setLevel(settings.effective_log_level)

    for handler in list(logger.handlers):
        if getattr(handler, "_debtpath_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if settings.json_logs else logging.Formatter(PLAIN_FORMAT))
    handler._debtpath_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
