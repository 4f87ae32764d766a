from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.session import get_async_session
from ..mappers.task_mapper import TaskMapper
from ..repositories.task_repository import TaskRepository
from ..services.task_service import TaskService


def get_task_repository(
    db: AsyncSession = Depends(get_async_session, scope="function"),
) -> TaskRepository:
    # Function scope closes the session (and commits) before the response is sent
    return TaskRepository(db)


def get_task_service(repo: TaskRepository = Depends(get_task_repository)) -> TaskService:
    return TaskService(TaskMapper(), repo)
