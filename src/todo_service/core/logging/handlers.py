# src/todo_service/core/logging/handlers.py
"""
Handler factories for logging.dictConfig.

Each function returns a plain handler dictionary; `builder.make_dict_config`
decides which of them are active. The formatter and filter names used here
("json", "standard", "request_id", "redact") are declared by the builder.
"""

from pathlib import Path

from ...config.settings import Settings


def _formatter_name(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    """
    Stream handler for every record at or above LOG_LEVEL.

    Writes to stderr (the StreamHandler default); add
    `"stream": "ext://sys.stdout"` to send it to stdout instead.
    """
    return {
        "class": "logging.StreamHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filters": ["request_id", "redact"],
    }


def get_file_handler(settings: Settings) -> dict:
    file_path = str(Path(settings.LOG_DIR) / "app.log")
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filename": file_path,
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": ["request_id", "redact"],
    }


# Errors go to their own rotating file, always structured
def get_error_file_handler(settings: Settings) -> dict:
    error_file_path = str(Path(settings.LOG_DIR) / "errors.log")
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "level": "ERROR",
        "filename": error_file_path,
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": ["request_id", "redact"],
    }


def get_error_console_handler(settings: Settings) -> dict:
    return {
        "class": "logging.StreamHandler",
        "formatter": "json",
        "level": "ERROR",
        "filters": ["request_id", "redact"],
    }
