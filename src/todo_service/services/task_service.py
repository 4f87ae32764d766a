"""
Task business operations.

The service owns three rules:

- identity: `create` always lets the store assign the id; `update` always
  writes under the path id. An id carried by the DTO is never honoured.
- existence: `update` checks that the target exists before writing and does
  nothing (returns None) when it does not. The check and the write are two
  separate awaits; a concurrent delete landing between them lets the update
  re-insert the row. That window is accepted rather than closed with locking.
- delete result: the store reports a row count, the caller gets a bool.

"Not found" is always a return value (None / False), never an exception.
Store failures (RepositoryError and friends) are not caught here.
"""

import logging
from typing import AsyncIterator
from uuid import UUID

from ..mappers.task_mapper import TaskMapper
from ..repositories.task_repository import TaskRepository
from ..schemas.task import TaskDTO

logger = logging.getLogger(__name__)


class TaskService:
    """Default implementation of the task operations."""

    def __init__(self, task_mapper: TaskMapper, task_repository: TaskRepository):
        """
        Args:
            task_mapper: maps between Task and TaskDTO.
            task_repository: the record store for tasks.
        """
        self.task_mapper = task_mapper
        self.task_repository = task_repository

    async def find_by_id(self, task_id: UUID) -> TaskDTO | None:
        """Return the task with the given id, or None if there is none."""
        task = await self.task_repository.get_by_id(task_id)
        if task is None:
            return None
        return self.task_mapper.to_dto(task)

    async def find_all(self) -> AsyncIterator[TaskDTO]:
        """Yield every task in the order the store returns them."""
        for task in await self.task_repository.get_all():
            yield self.task_mapper.to_dto(task)

    async def create(self, task_dto: TaskDTO) -> TaskDTO:
        """
        Create a task with a new id. Any id present on `task_dto` is ignored.
        """
        task = self.task_mapper.to_entity_ignoring_id(task_dto)
        saved = await self.task_repository.save(task)
        return self.task_mapper.to_dto(saved)

    async def update(self, task_id: UUID, task_dto: TaskDTO) -> TaskDTO | None:
        """
        Replace title, description and start date of the task `task_id`.

        Returns None, without writing, when `task_id` does not exist. The id
        inside `task_dto` is ignored; the caller's DTO is not modified.
        """
        if not await self.task_repository.exists(task_id):
            logger.debug("task.update.missing", extra={"id": str(task_id)})
            return None

        task = self.task_mapper.to_entity(task_dto.model_copy(update={"id": task_id}))
        saved = await self.task_repository.save(task)
        return self.task_mapper.to_dto(saved)

    async def delete_by_id(self, task_id: UUID) -> bool:
        """Return True if a task was deleted, False if there was nothing to delete."""
        delete_count = await self.task_repository.delete_task_by_id(task_id)
        return delete_count > 0
