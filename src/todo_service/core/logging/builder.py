# src/todo_service/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration.

    setup_logging(settings)

is called once by the app factory. `make_dict_config(settings)` is kept pure so
tests can inspect the mapping without installing it.

Active handlers:

| LOG_TO_STDOUT | LOG_DIR set | Handlers                         |
| ------------- | ----------- | -------------------------------- |
| true          | any         | console + error_console          |
| false         | no          | console + error_console          |
| false         | yes         | console + file + error_file      |
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config

from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

# Settings type only; settings are passed in, never loaded here
from ...config.settings import Settings


def _file_logging_enabled(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


# -----------------------
# dictConfig builder
# -----------------------
def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping for the given settings.

    Loggers configured: root, uvicorn.error, uvicorn.access, sqlalchemy.engine.
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": settings.APP_NAME,
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if _file_logging_enabled(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            # SQL statements may carry user data
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the logging configuration.

    Creates LOG_DIR when file logging is active, installs the dictConfig and
    adds a RequestIdFilter on the root logger so `%(request_id)s` is always
    resolvable, even for handlers added later (pytest's caplog, for instance).
    """
    if _file_logging_enabled(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    root = logging.getLogger()
    if not any(isinstance(f, RequestIdFilter) for f in root.filters):
        root.addFilter(RequestIdFilter())
