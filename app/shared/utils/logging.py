# 📄 File: app/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# This file sets up a logging system that records what happens in the app in a structured way,
# tagging every line with the request and user it belongs to so problems are easy to trace.

# 🧪 Purpose (Technical Summary):
# Root logger configuration with python-json-logger (JSON) or a plain text format, plus
# contextvars holding the request id and user id which a logging.Filter copies onto every
# record.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: Request context tracking

# 🔄 Connected Modules / Calls From:
# Used by: app.main (startup), request context middleware (request id),
# app.shared.core.dependencies (user id)

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from app.shared.config.settings import get_settings

# Set by the request middleware and the auth dependency
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

SERVICE_NAME = 'plant-care-api'
TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s'
JSON_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'

_logging_configured = False


class ContextFilter(logging.Filter):
    """Stamp request id, user id and service name onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get('')
        record.user_id = user_id_var.get('')
        record.service = SERVICE_NAME
        return True


def set_request_context(request_id: Optional[str] = None) -> str:
    """Bind a request id to the current context, generating one if needed."""
    request_id = request_id or str(uuid4())
    request_id_var.set(request_id)
    return request_id


def set_user_context(user_id: str) -> None:
    user_id_var.set(user_id)


@contextmanager
def log_context(request_id: Optional[str] = None, user_id: Optional[str] = None) -> Iterator[str]:
    """
    Temporary request and user binding for work done outside an HTTP request,
    such as the periodic sweeps.
    """
    request_id = request_id or str(uuid4())
    request_token = request_id_var.set(request_id)
    user_token = user_id_var.set(user_id or '')
    try:
        yield request_id
    finally:
        request_id_var.reset(request_token)
        user_id_var.reset(user_token)


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    force: bool = False
) -> logging.Logger:
    """
    Route all logging to stdout in the configured format.

    Idempotent unless ``force`` is set, so tests and the lifespan can both call it.

    Args:
        log_level: Overrides LOG_LEVEL
        log_format: 'json' or 'text', overrides LOG_FORMAT
        force: Reconfigure even if logging was already set up

    Returns:
        logging.Logger: The startup logger
    """
    global _logging_configured

    if _logging_configured and not force:
        return logging.getLogger("startup")

    settings = get_settings()
    log_level = log_level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format.lower() == 'json':
        formatter: logging.Formatter = JsonFormatter(
            JSON_FORMAT,
            rename_fields={'asctime': 'timestamp', 'levelname': 'level', 'name': 'logger'},
        )
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(ContextFilter())
    root_logger.addHandler(console_handler)

    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    _logging_configured = True
    return logging.getLogger("startup")
