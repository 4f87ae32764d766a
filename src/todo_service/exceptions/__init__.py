from .base import RepositoryError, ConstraintViolationError
from .mapper import db_error_handler

__all__ = ["RepositoryError", "ConstraintViolationError", "db_error_handler"]
