"""
Logging setup for the issue tracker.
Plain text for development, one JSON object per line when LOG_FORMAT=json.
"""

import logging
import os
import sys
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict
from contextvars import ContextVar

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

request_id_var: ContextVar[str] = ContextVar('request_id', default='')
username_var: ContextVar[str] = ContextVar('username', default='')


def get_request_id() -> str:
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_username() -> str:
    return username_var.get() or ''


def set_username(username: str) -> None:
    username_var.set(username)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = get_request_id()
        if request_id:
            log_data["request_id"] = request_id
        username = get_username()
        if username:
            log_data["user"] = username
        error = getattr(record, "error", None)
        if error:
            log_data["error"] = error
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """Adds request id and user to the record for the text format"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user = get_username() or '-'
        return super().format(record)


def setup_logging() -> logging.Logger:
    logger = logging.getLogger("issuetracker")
    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()
    # Keep our lines out of uvicorn's root handlers
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    if LOG_FORMAT == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user)s] | %(name)s | %(message)s"
        ))
    logger.addHandler(handler)
    return logger
