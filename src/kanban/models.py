import uuid
from typing import Optional

from sqlalchemy import Enum, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..auth.models import User
from ..core.db import Base, CommonFieldsMixin
from .constants import TaskPriority


class Board(Base, CommonFieldsMixin):
    __tablename__ = "board"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(nullable=False)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner: Mapped["User"] = relationship(foreign_keys=[owner_id])

    # Ties in "order" fall back to creation time
    columns: Mapped[list["Column"]] = relationship(
        back_populates="board",
        order_by="Column.order, Column.created_at",
        cascade="all, delete-orphan",
    )


class Column(Base, CommonFieldsMixin):
    __tablename__ = "column"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(nullable=False)
    order: Mapped[int] = mapped_column(nullable=False, default=0)

    board_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("board.id", ondelete="CASCADE"), nullable=False, index=True
    )
    board: Mapped["Board"] = relationship(back_populates="columns")

    tasks: Mapped[list["Task"]] = relationship(
        back_populates="column",
        order_by="Task.order, Task.created_at",
        cascade="all, delete-orphan",
    )


class Task(Base, CommonFieldsMixin):
    __tablename__ = "task"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(
            TaskPriority,
            name="task_priority",
            native_enum=False,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    order: Mapped[int] = mapped_column(nullable=False, default=0)

    creator_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    creator: Mapped["User"] = relationship(foreign_keys=[creator_id])

    column_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("column.id", ondelete="CASCADE"), nullable=False, index=True
    )
    column: Mapped["Column"] = relationship(
        foreign_keys=[column_id],
        back_populates="tasks",
    )

    comments: Mapped[list["Comment"]] = relationship(
        back_populates="task",
        order_by="Comment.created_at",
        cascade="all, delete-orphan",
    )


class Comment(Base, CommonFieldsMixin):
    __tablename__ = "comment"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    task_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True
    )
    task: Mapped["Task"] = relationship(back_populates="comments")

    # Shared reference, comments are attributed to an author but owned by the task
    author_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    author: Mapped["User"] = relationship(foreign_keys=[author_id])
