from typing import Any

from pydantic import BaseModel, Field, UUID4, field_validator, model_validator

from ..auth.dto import UserResponseFlat
from ..core import exceptions
from ..core.dto import UTCDatetime
from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, TaskPriority
from .query_params import TaskSort


def validate_at_least_one_field_present(
    data: Any, fields: list[str], clearable_fields: tuple[str, ...] = ()
) -> Any:
    if not isinstance(data, dict):
        # Let pydantic report the type error
        return data

    # An explicit null counts for fields that can be cleared
    present = any(data.get(field) is not None for field in fields)
    if not present and not any(field in data for field in clearable_fields):
        raise exceptions.ValidationException(f"At least one of {fields} needs to be present")

    return data


# Board
class CreateBoardPayload(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class BoardResponseFlat(BaseModel):
    id: UUID4
    owner_id: UUID4
    name: str
    created_at: UTCDatetime
    updated_at: UTCDatetime
    columns_count: int


class BoardResponse(BaseModel):
    id: UUID4
    owner_id: UUID4
    name: str
    created_at: UTCDatetime
    updated_at: UTCDatetime

    columns: list["ColumnResponseFlat"]


# Column
class CreateColumnPayload(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class PartialUpdateColumnPayload(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    order: int | None = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def validate_at_least_one_field_present(cls, data: Any) -> Any:
        return validate_at_least_one_field_present(data, ["name", "order"])


class ColumnResponseFlat(BaseModel):
    id: UUID4
    board_id: UUID4
    name: str
    order: int
    created_at: UTCDatetime
    updated_at: UTCDatetime
    tasks_count: int


class ColumnSummary(BaseModel):
    id: UUID4
    board_id: UUID4
    name: str


# Task
class CreateTaskPayload(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    priority: TaskPriority = TaskPriority.MEDIUM


class PartialUpdateTaskPayload(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    priority: TaskPriority | None = None
    # column_id and/or order describe a move
    column_id: UUID4 | None = None
    order: int | None = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def validate_at_least_one_field_present(cls, data: Any) -> Any:
        return validate_at_least_one_field_present(
            data,
            ["title", "description", "priority", "column_id", "order"],
            clearable_fields=("description",),
        )

    @property
    def is_move(self) -> bool:
        return self.column_id is not None or self.order is not None


class TaskQuery(BaseModel):
    search: str | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort: TaskSort = TaskSort.CREATED_AT


class TaskResponseFlat(BaseModel):
    id: UUID4
    column_id: UUID4
    creator_id: UUID4
    title: str
    description: str | None
    priority: TaskPriority
    order: int
    created_at: UTCDatetime
    updated_at: UTCDatetime
    comments_count: int


class TaskResponse(TaskResponseFlat):
    creator: UserResponseFlat
    column: ColumnSummary


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class TaskListResponse(BaseModel):
    tasks: list[TaskResponseFlat]
    pagination: Pagination


# Comment
class CreateCommentPayload(BaseModel):
    content: str = Field(min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def validate_content_not_blank(cls, content: str) -> str:
        content = content.strip()
        if not content:
            raise ValueError("Comment content cannot be empty")
        return content


class CommentResponse(BaseModel):
    id: UUID4
    task_id: UUID4
    content: str
    created_at: UTCDatetime
    updated_at: UTCDatetime

    author: UserResponseFlat


BoardResponse.model_rebuild()
