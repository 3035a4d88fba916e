from .api import ApiError, KanbanClient
from .drag import MoveRequest, MoveResult, TaskDragController
from .store import BoardViewStore, ColumnView, TaskView
