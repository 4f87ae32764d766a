"""
Record store exceptions.

The task service never raises or catches these; they describe *failures* of the
store (constraint violations, an unreachable database) and travel untouched up
to the HTTP layer, where `api.v1.error_handlers` renders them. "Not found" is
never an exception in this code base; it is an empty result.
"""

from typing import Iterable


class RepositoryError(Exception):
    """
    Base exception for record store failures.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['title'])
    - error_code: canonical short code (e.g., 'constraint_violation') used by clients
    """

    # Map canonical error_code -> HTTP status. Anything else is a server-side fault.
    ERROR_CODE_TO_STATUS = {
        "constraint_violation": 409,
    }
    DEFAULT_STATUS = 500

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.error_code = error_code

    def __str__(self) -> str:
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{self.message} ({'; '.join(parts)})"
        return self.message

    def to_payload(self) -> dict:
        """
        Return the extra, client-safe properties merged into the problem body:
            {"code": "constraint_violation", "fields": ["title"]}
        Raw driver messages are never included.
        """
        payload: dict = {}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, self.DEFAULT_STATUS)
        return self.DEFAULT_STATUS


class ConstraintViolationError(RepositoryError):
    """A write was rejected by a database constraint (NOT NULL, UNIQUE, ...)."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="constraint_violation")


__all__ = [
    "RepositoryError",
    "ConstraintViolationError",
]
