"""
Task mapper for converting between the wire DTO and the ORM entity.
"""

from ..models.task import Task
from ..schemas.task import TaskDTO


class TaskMapper:
    """Maps between TaskDTO (wire) and Task (storage). Stateless, no I/O."""

    def to_dto(self, task: Task) -> TaskDTO:
        """Copy every field of the entity into a TaskDTO."""
        return TaskDTO(
            id=task.id,
            title=task.title,
            description=task.description,
            start_date_time=task.start_date_time,
        )

    def to_entity(self, dto: TaskDTO) -> Task:
        """Copy every field of the DTO, id included, into a Task."""
        task = self.to_entity_ignoring_id(dto)
        if dto.id is not None:
            task.id = dto.id
        return task

    def to_entity_ignoring_id(self, dto: TaskDTO) -> Task:
        """Copy the DTO into a Task whose id is left for the store to assign."""
        return Task(
            title=dto.title,
            description=dto.description,
            start_date_time=dto.start_date_time,
        )
