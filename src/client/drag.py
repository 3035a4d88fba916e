"""Drag-and-drop of tasks between columns, with optimistic local updates.

A gesture is ``drag_start`` -> any number of ``drag_over`` -> ``drop`` (or ``cancel``). Hovering
only relabels the task's column in the local store. The drop sends exactly one move request.
When it fails the local state is left as the hover left it until the next refresh.
"""
import logging
from dataclasses import dataclass

import httpx

from .api import ApiError, KanbanClient
from .store import BoardViewStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveRequest:
    task_id: str
    column_id: str
    order: int


@dataclass(frozen=True)
class MoveResult:
    request: MoveRequest
    ok: bool
    task: dict | None = None
    error: Exception | None = None


class TaskDragController:
    def __init__(
        self,
        store: BoardViewStore,
        client: KanbanClient,
        board_id: str,
        search: str | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.board_id = board_id
        # Active filter, indexes are computed against what the user actually sees
        self.search = search
        self.active_task_id: str | None = None

    @property
    def active(self) -> bool:
        return self.active_task_id is not None

    def refresh(self) -> None:
        board = self.client.get_board(self.board_id)
        tasks = self.client.list_board_tasks(self.board_id)
        self.store.reconcile_from_server(board["columns"], tasks)

    def drag_start(self, task_id: str) -> bool:
        if self.store.get_task(task_id) is None:
            return False
        self.active_task_id = task_id
        return True

    def drag_over(self, over_id: str | None) -> bool:
        if not self.active or over_id is None:
            return False

        column_id = self.store.resolve_column_id(over_id)
        if column_id is None:
            return False
        return self.store.apply_optimistic_move(self.active_task_id, column_id)

    def cancel(self) -> None:
        self.active_task_id = None

    def drop(self, over_id: str | None) -> MoveResult | None:
        # The gesture ends here whatever happens next, so a second drop can't send anything
        task_id, self.active_task_id = self.active_task_id, None

        request = self.create_move_request(task_id, over_id)
        if request is None:
            return None

        try:
            task = self.client.move_task(request.task_id, request.column_id, request.order)
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Moving task %s failed, keeping local state: %s", task_id, e)
            return MoveResult(request=request, ok=False, error=e)

        self.store.reconcile_tasks_from_server(self.client.list_board_tasks(self.board_id))
        return MoveResult(request=request, ok=True, task=task)

    def create_move_request(self, task_id: str | None, over_id: str | None) -> MoveRequest | None:
        if task_id is None or over_id is None or task_id == over_id:
            return None
        if self.store.get_task(task_id) is None:
            return None

        column_id = self.store.resolve_column_id(over_id)
        if column_id is None:
            return None

        siblings = [task.id for task in self.store.tasks_for_column(column_id, self.search)]
        if over_id in siblings:
            order = siblings.index(over_id)
        else:
            # Dropped on the column itself, past the last task
            order = len(siblings)

        return MoveRequest(task_id=task_id, column_id=column_id, order=order)
