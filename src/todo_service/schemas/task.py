from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TITLE_MANDATORY_MESSAGE = "The title of the task is mandatory"
# Matches the width of the tasks.title column
TITLE_MAX_LENGTH = 255


# PUBLIC_INTERFACE
class TaskDTO(BaseModel):
    """
    Wire representation of a task.

    Field names are camelCase on the wire (`startDateTime`) and snake_case in
    Python. `id` is advisory: the service ignores it on create and replaces it
    with the path id on update. `title` is the only enforced field.

    `startDateTime` is a wall-clock value without offset. An input carrying an
    offset is converted to UTC and stored without it, so every backend returns
    the same value.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f2b8e0c-5d7a-4c1e-9a57-2d1f6c0b9e41",
                "title": "Prepare sprint review",
                "description": "Collect demo notes from the team",
                "startDateTime": "2024-05-06T09:30:00",
            }
        },
    )

    id: UUID | None = Field(default=None, description="The id of the task")
    # Optional at the type level so a missing title reports the same message as a blank one
    title: str | None = Field(
        default=None,
        validate_default=True,
        max_length=TITLE_MAX_LENGTH,
        description="The title of the task, must not be blank",
    )
    description: str | None = Field(default=None, description="The description of the task")
    start_date_time: datetime | None = Field(default=None, description="The start date of the task")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """
        Reject a missing, empty or whitespace-only title.
        """
        if v is None or not v.strip():
            raise ValueError(TITLE_MANDATORY_MESSAGE)
        return v

    @field_validator("start_date_time")
    @classmethod
    def to_naive_utc(cls, v: datetime | None) -> datetime | None:
        if v is None or v.tzinfo is None:
            return v
        return v.astimezone(timezone.utc).replace(tzinfo=None)
