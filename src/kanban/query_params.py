from enum import StrEnum

from sqlalchemy import case
from sqlalchemy.sql.elements import ColumnElement

from .constants import PRIORITY_RANK
from .models import Task


class TaskSort(StrEnum):
    CREATED_AT = "created_at"
    PRIORITY = "priority"
    ORDER = "order"

    @property
    def order_by_params(self) -> list[ColumnElement]:
        if self == TaskSort.CREATED_AT:
            return [Task.created_at.desc()]
        elif self == TaskSort.PRIORITY:
            priority_rank = case(
                *[(Task.priority == priority, rank) for priority, rank in PRIORITY_RANK.items()],
                else_=len(PRIORITY_RANK),
            )
            return [priority_rank, Task.order, Task.created_at]
        elif self == TaskSort.ORDER:
            return [Task.order, Task.created_at]

        raise ValueError(f"TaskSort {self=} had an unexpected value.")
