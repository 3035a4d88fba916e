from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ColumnView:
    id: str
    name: str
    order: int
    created_at: str = ""

    @classmethod
    def from_json(cls, data: dict) -> "ColumnView":
        return cls(
            id=data["id"],
            name=data["name"],
            order=data["order"],
            created_at=data.get("created_at", ""),
        )


@dataclass(frozen=True)
class TaskView:
    id: str
    column_id: str
    title: str
    order: int
    description: str | None = None
    priority: str = "medium"
    created_at: str = ""

    @classmethod
    def from_json(cls, data: dict) -> "TaskView":
        return cls(
            id=data["id"],
            column_id=data["column_id"],
            title=data["title"],
            order=data["order"],
            description=data.get("description"),
            priority=data.get("priority", "medium"),
            created_at=data.get("created_at", ""),
        )

    def matches(self, search: str) -> bool:
        search = search.lower()
        return search in self.title.lower() or search in (self.description or "").lower()


class BoardViewStore:
    """Client-side copy of one board, keyed by entity id.

    Only two operations mutate it: ``reconcile_from_server`` replaces everything with
    authoritative data, ``apply_optimistic_move`` relabels a task's column locally.
    """

    def __init__(self) -> None:
        self._columns: dict[str, ColumnView] = {}
        self._tasks: dict[str, TaskView] = {}

    def reconcile_from_server(self, columns: list[dict], tasks: list[dict]) -> None:
        self._columns = {column["id"]: ColumnView.from_json(column) for column in columns}
        self._tasks = {task["id"]: TaskView.from_json(task) for task in tasks}

    def reconcile_tasks_from_server(self, tasks: list[dict]) -> None:
        self._tasks = {task["id"]: TaskView.from_json(task) for task in tasks}

    def apply_optimistic_move(self, task_id: str, column_id: str) -> bool:
        task = self._tasks.get(task_id)
        if task is None or column_id not in self._columns or task.column_id == column_id:
            return False
        # Order is left alone, the server decides it on drop
        self._tasks[task_id] = replace(task, column_id=column_id)
        return True

    def get_task(self, task_id: str) -> TaskView | None:
        return self._tasks.get(task_id)

    def get_column(self, column_id: str) -> ColumnView | None:
        return self._columns.get(column_id)

    def columns(self) -> list[ColumnView]:
        return sorted(self._columns.values(), key=lambda column: (column.order, column.created_at))

    def tasks_for_column(self, column_id: str, search: str | None = None) -> list[TaskView]:
        tasks = [task for task in self._tasks.values() if task.column_id == column_id]
        if search:
            tasks = [task for task in tasks if task.matches(search)]
        return sorted(tasks, key=lambda task: (task.order, task.created_at))

    def resolve_column_id(self, over_id: str) -> str | None:
        """The column an id points into: the column itself, or the column holding that task."""
        if over_id in self._columns:
            return over_id
        task = self._tasks.get(over_id)
        return task.column_id if task else None
