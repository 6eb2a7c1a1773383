"""
Logging setup for the analyzer API.

LOG_LEVEL picks the level (default INFO), LOG_JSON=1 switches to one JSON
object per line, SERVICE_NAME tags every record. Portfolio amounts and fund
names are user data: log counts and scores, not the portfolio itself.
"""
import json
import logging
import os
import sys
from typing import Any, Dict

SERVICE_NAME = os.getenv("SERVICE_NAME") or "fund-overlap-analyzer"

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "google_genai")
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class RequestContextFilter(logging.Filter):
    """Guarantees `service` and `request_id` on every record so formats can use them."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = SERVICE_NAME
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "service": getattr(record, "service", SERVICE_NAME),
            "logger": record.name,
            "message": record.getMessage(),
        }
        # extra= fields ride along as top-level keys
        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS or key in payload or value in (None, "-"):
                continue
            payload[key] = value
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_handler(level: int, use_json: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s rid=%(request_id)s: %(message)s"
        ))
    return handler


def configure_logging() -> None:
    level = getattr(logging, (os.getenv("LOG_LEVEL") or "INFO").upper(), logging.INFO)
    use_json = os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")

    root = logging.getLogger()
    root.setLevel(level)
    # uvicorn --reload calls this again
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(_build_handler(level, use_json))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
