"""
Task endpoints.

    GET    /tasks/{id}  200 task | 404 empty
    GET    /tasks       200 list (store order)
    POST   /tasks       201 created task
    PUT    /tasks/{id}  200 updated task | 404 empty
    DELETE /tasks/{id}  204 | 404 empty

Business "not found" is answered here with an empty 404. Validation, binding
and content-type failures become problem bodies in `error_handlers`.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ...core.dependencies import get_task_service
from ...schemas.problem import ProblemDetail
from ...schemas.task import TaskDTO
from ...services.task_service import TaskService

logger = logging.getLogger(__name__)


async def require_json_content(request: Request) -> None:
    """
    Reject request bodies that are not JSON with 415. A request without a
    Content-Type header is parsed as JSON.
    """
    content_type = request.headers.get("content-type")
    if content_type is None:
        return
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == "application/json" or media_type.endswith("+json"):
        return
    raise HTTPException(
        status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        detail=f"Content-Type '{content_type}' is not supported.",
    )


router = APIRouter(
    prefix="/tasks",
    tags=["Tasks operations"],
)

_PROBLEM_RESPONSE = {"model": ProblemDetail, "description": "Invalid request"}


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskDTO,
    response_model_exclude_none=True,
    summary="Get a task",
    responses={
        200: {"description": "Task found"},
        400: _PROBLEM_RESPONSE,
        404: {"description": "Task not found"},
    },
)
async def get_task_by_id(task_id: UUID, service: TaskService = Depends(get_task_service)):
    """
    Retrieve a single task by its id.
    """
    task = await service.find_by_id(task_id)
    if task is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return task


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=list[TaskDTO],
    response_model_exclude_none=True,
    summary="Get all tasks",
)
async def get_all_tasks(service: TaskService = Depends(get_task_service)):
    return [task async for task in service.find_all()]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskDTO,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
    description="Create a task and return it with its generated id. An id in the body is ignored.",
    dependencies=[Depends(require_json_content)],
    responses={
        201: {"description": "Task created"},
        400: _PROBLEM_RESPONSE,
        415: {"model": ProblemDetail, "description": "Unsupported content type"},
    },
)
async def create_task(task_dto: TaskDTO, service: TaskService = Depends(get_task_service)):
    logger.info("Creating a new task ...")
    created = await service.create(task_dto)
    logger.info("Task %s created successfully", created.id)
    return created


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskDTO,
    response_model_exclude_none=True,
    summary="Update a task",
    description=(
        "Replace title, description and start date of an existing task. "
        "The id in the path wins over any id in the body."
    ),
    dependencies=[Depends(require_json_content)],
    responses={
        200: {"description": "Task updated"},
        400: _PROBLEM_RESPONSE,
        404: {"description": "Task not found"},
        415: {"model": ProblemDetail, "description": "Unsupported content type"},
    },
)
async def update_task(task_id: UUID, task_dto: TaskDTO, service: TaskService = Depends(get_task_service)):
    logger.info("Updating the task %s ...", task_id)
    updated = await service.update(task_id, task_dto)
    if updated is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    logger.info("Task %s updated successfully", task_id)
    return updated


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses={
        204: {"description": "Task deleted"},
        400: _PROBLEM_RESPONSE,
        404: {"description": "Task not found"},
    },
)
async def delete_task_by_id(task_id: UUID, service: TaskService = Depends(get_task_service)) -> Response:
    """
    Delete a task. Returns 204 on success, 404 if there was no such task.
    """
    logger.info("Deleting the task %s ...", task_id)
    deleted = await service.delete_by_id(task_id)
    if not deleted:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    logger.info("Task %s deleted successfully", task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
