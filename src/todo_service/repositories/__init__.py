from .base_repository import BaseRepository
from .task_repository import TaskRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
]
