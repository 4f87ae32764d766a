from sqlalchemy import String, Text, DateTime, UUID
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from ..database.base import Base
from ..schemas.task import TITLE_MAX_LENGTH
import uuid


class Task(Base):
    """
    SQLAlchemy model for Task (storage representation).

    The primary key is assigned by the store on first flush and never changes
    afterwards; everything else is replaced wholesale on update.
    """
    __tablename__ = "tasks"

    # Unique identifier for the task (primary key), generated on insert
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True
    )

    start_date_time: Mapped[datetime | None] = mapped_column(
        DateTime(),
        nullable=True
    )

    def __repr__(self) -> str:
        # Helpful for debugging/logging
        return f"<Task(id={self.id!r}, title={self.title!r})>"
