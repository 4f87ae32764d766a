"""
Centralized access to the database models, so `Base.metadata` sees every table
once this package is imported.
"""

from .task import Task

__all__ = [
    "Task",
]
