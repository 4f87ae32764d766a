import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import ConstraintViolationError, RepositoryError

logger = logging.getLogger(__name__)

# -----------------------
# Column extraction helpers
# -----------------------

_POSTGRES_NOT_NULL = re.compile(r'null value in column "(?P<col>[^"]+)"', re.IGNORECASE)
_POSTGRES_KEY = re.compile(r'key \((?P<cols>[^)]+)\)=', re.IGNORECASE)
_SQLITE_CONSTRAINT = re.compile(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', re.IGNORECASE)


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the driver message (Postgres, SQLite):
      - 'null value in column "title" violates not-null constraint'
      - 'DETAIL:  Key (id)=(...) already exists.'
      - 'NOT NULL constraint failed: tasks.title'
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)

    m = _POSTGRES_NOT_NULL.search(msg)
    if m:
        return [m.group("col")]

    m = _POSTGRES_KEY.search(msg)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    m = _SQLITE_CONSTRAINT.search(msg)
    if m:
        return [c.split(".")[-1].strip() for c in re.split(r",\s*", m.group("cols"))]

    return None


# -----------------------
# Async context manager to DRY error handling in repositories
# -----------------------
@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise ...

    Rolls the session back on a SQLAlchemy failure and re-raises it as a
    RepositoryError (ConstraintViolationError for integrity errors). Errors that
    do not come from SQLAlchemy pass through unchanged.
    """
    model_part = model_name or "Record"
    try:
        yield
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        columns = extract_columns_from_integrity(exc)
        # Expected client-level scenario; no stack trace
        logger.info(
            "mapper.constraint_violation",
            extra={"model": model_part, "fields": columns},
        )
        if columns:
            raise ConstraintViolationError(
                f"{model_part} violates a constraint on field(s): {', '.join(columns)}", fields=columns
            ) from exc
        raise ConstraintViolationError(f"{model_part} violates a database constraint") from exc
    except SQLAlchemyError as exc:
        await _safe_rollback(db, model_name)
        logger.exception("Unexpected DB error for %s", model_part, extra={"model": model_part})
        # Generic message; the driver text stays in the logs
        raise RepositoryError(f"Failed to operate on {model_part}") from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError:
        logger.exception("Failed to rollback session", extra={"model": model_name})
