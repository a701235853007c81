"""
Logging setup for host applications embedding stubdriver.

The library itself only creates module loggers; this helper attaches a
handler to the "stubdriver" logger tree.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOGGER_ROOT = "stubdriver"


class StructuredFormatter(logging.Formatter):
    """Formatter that emits one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream=None,
    settings=None,
) -> logging.Logger:
    """
    Configure the stubdriver logger tree.

    Args:
        level: Level name; falls back to the "logging.level" setting, then INFO
        log_format: "text" or "json"; falls back to the "logging.format" setting
        stream: Output stream, stderr by default
        settings: Optional Settings supplying the defaults

    Returns:
        The configured root stubdriver logger
    """
    if settings is not None:
        level = level or settings.get("logging", "level")
        log_format = log_format or settings.get("logging", "format")
    log_format = log_format or "text"

    logger = logging.getLogger(LOGGER_ROOT)
    logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if log_format == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    logger.addHandler(handler)
    return logger
