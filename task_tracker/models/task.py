"""Task model."""

import enum
from datetime import date

from sqlalchemy import Date, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class TaskStatus(str, enum.Enum):
    """Task status enum."""

    PENDING = "pending"
    COMPLETED = "completed"

    def toggled(self) -> "TaskStatus":
        """Return the other status (pending <-> completed)."""
        return TaskStatus.PENDING if self is TaskStatus.COMPLETED else TaskStatus.COMPLETED


class Task(Base, TimestampMixin):
    """To-do item with optional schedule, location and description."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Stored as the enum value ("pending"), not the member name
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(
            TaskStatus,
            native_enum=False,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=TaskStatus.PENDING,
        nullable=False,
    )

    # Tags relationship (many-to-many)
    tags: Mapped[list["Tag"]] = relationship("Tag", secondary="task_tags", back_populates="tasks")

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status.value})>"
