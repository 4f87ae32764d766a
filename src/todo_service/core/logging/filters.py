# src/todo_service/core/logging/filters.py
"""
Logging filters.

`RequestIdFilter` stamps every LogRecord with a `request_id` attribute taken from
a contextvar, so formatters can reference `%(request_id)s` safely. The
contextvar is set per request by `RequestIDMiddleware` and survives awaits,
which `threading.local()` would not.

When no request is in flight (startup, background work, tests) the sentinel
"-" is used.

`RedactFilter` masks record attributes whose names look like credentials. It
only touches attributes passed through `extra={...}`; the message text is left
as is, so do not format secrets into messages.
"""

import logging
from logging import LogRecord
import contextvars

# Request id of the current execution context (None when no request is active)
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context and return the token to allow reset.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token):
    """
    Reset the contextvar to the value it had before set_request_id() returned `token`.
    """
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee that every LogRecord has a `request_id` attribute.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar,
    then "-". Always returns True; the filter annotates, it never drops.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


# Redact sensitive information
class RedactFilter(logging.Filter):
    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "authorization"}
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
