"""
Logging setup for the journal service.

Production logs are one JSON object per line; ENVIRONMENT=development
switches to a plain single-line format. Both carry the request's
correlation ID, and anything passed through ``extra=`` is appended:

    logger = logging.getLogger("Journal.Service")
    logger.info("Entry created", extra={"entry_id": entry_id})

    {"timestamp": "...", "level": "INFO", "logger": "Journal.Service",
     "message": "Entry created", "service": "mood-journal-service",
     "correlation_id": "ab12cd34", "entry_id": "6f1c..."}

Entry text is personal, so only ``sanitize_for_logging`` previews of it
should ever reach a log line.
"""

import json
import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from journal_service.shared.correlation import get_correlation_id

NO_CORRELATION_ID = "-"

# Attributes every LogRecord has; anything else came from extra=
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "correlation_id",
}

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class CorrelationIdFilter(logging.Filter):
    """Stamps ``record.correlation_id`` from the current request context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "correlation_id", None) is None:
            record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class JSONFormatter(logging.Formatter):

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }
        correlation_id = getattr(record, "correlation_id", NO_CORRELATION_ID)
        if correlation_id != NO_CORRELATION_ID:
            payload["correlation_id"] = correlation_id
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        for key, value in _extras(record).items():
            payload[key] = value

        # default=str keeps sets, UUIDs and datetimes from breaking a log line
        return json.dumps(payload, default=str)


class HumanReadableFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        line = "{time} {level:<7} [{cid}] {name}: {message}".format(
            time=self.formatTime(record, "%H:%M:%S"),
            level=record.levelname,
            cid=getattr(record, "correlation_id", NO_CORRELATION_ID),
            name=record.name,
            message=record.getMessage(),
        )
        extras = _extras(record)
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in extras.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    service_name: str,
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> None:
    """
    Replace the root logger's handlers with one stdout handler.

    Args:
        service_name: Stamped on every JSON record
        level: Level name; defaults to LOG_LEVEL, then INFO
        json_output: Defaults to True unless ENVIRONMENT=development
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if json_output is None:
        json_output = os.getenv("ENVIRONMENT", "production").lower() != "development"

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(JSONFormatter(service_name) if json_output else HumanReadableFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for noisy in ("httpx", "httpcore", "urllib3", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def sanitize_for_logging(data: Any, max_len: int = 80) -> str:
    """Single-line preview of user text, cut at ``max_len`` characters."""
    if data is None:
        return "None"
    cleaned = _CONTROL_CHARS.sub(" ", str(data)).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "..."
    return cleaned
