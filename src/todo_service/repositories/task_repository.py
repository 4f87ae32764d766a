from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.task import Task
from .base_repository import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Record store for tasks."""

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)

    async def delete_task_by_id(self, task_id: UUID) -> int:
        """
        Delete the task with the given id.

        Returns:
            1 when the task has been deleted, 0 when no task had that id.
        """
        return await self.delete_by_id(task_id)
