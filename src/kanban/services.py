import logging
import math
import uuid

from fastapi import Depends
from fastapi.params import Depends as DependsType

from ..auth.services import UserService
from ..core import exceptions
from .constants import DEFAULT_COLUMNS
from .dto import (
    BoardResponse,
    BoardResponseFlat,
    ColumnResponseFlat,
    ColumnSummary,
    CommentResponse,
    CreateBoardPayload,
    CreateColumnPayload,
    CreateCommentPayload,
    CreateTaskPayload,
    Pagination,
    PartialUpdateColumnPayload,
    PartialUpdateTaskPayload,
    TaskListResponse,
    TaskQuery,
    TaskResponse,
    TaskResponseFlat,
)
from .models import Board, Column, Comment, Task
from .ordering import next_order, resolve_move
from .repositories import (
    BoardRepository,
    ColumnRepository,
    CommentRepository,
    TaskRepository,
    get_board_repository,
    get_column_repository,
    get_comment_repository,
    get_task_repository,
)

logger = logging.getLogger(__name__)


class BoardService:
    def __init__(self, repository: BoardRepository = Depends(get_board_repository)) -> None:
        if isinstance(repository, DependsType):
            repository = repository.dependency()
        self.repository = repository

    def create_board(
        self,
        payload: CreateBoardPayload,
        token: str,
        column_service: "ColumnService",
        user_service: UserService,
    ) -> BoardResponse:
        my_id = user_service.get_current_user_id(token)
        board = self.repository.create_board_with_columns(
            self.create_domain_board_instance(payload, my_id), DEFAULT_COLUMNS
        )
        logger.info("Created board %s with default columns", board.id)

        columns = [
            column_service.create_column_response_flat(column, tasks_count=0)
            for column in board.columns
        ]
        return self.create_board_response(board, columns)

    def list_boards(self, token: str, user_service: UserService) -> list[BoardResponseFlat]:
        my_id = user_service.get_current_user_id(token)
        return [
            self.create_board_response_flat(board, columns_count)
            for board, columns_count in self.repository.list_boards_for_owner(my_id)
        ]

    def get_board_by_id(
        self,
        board_id: uuid.UUID,
        token: str,
        column_service: "ColumnService",
        user_service: UserService,
    ) -> BoardResponse:
        my_id = user_service.get_current_user_id(token)
        board = self.repository.get_board_for_owner(board_id, my_id, with_columns=True)
        return self.create_board_response(board, column_service.create_column_responses(board.columns))

    def delete_board(self, board_id: uuid.UUID, token: str, user_service: UserService) -> None:
        my_id = user_service.get_current_user_id(token)
        self.repository.delete_board(board_id, my_id)
        logger.info("Deleted board %s", board_id)

    # Validation
    def validate_user_owns_board(self, user_id: uuid.UUID, board_id: uuid.UUID) -> Board:
        # Raises BoardNotFound
        return self.repository.get_board_for_owner(board_id, user_id)

    # Domain object manipulation
    def create_domain_board_instance(self, payload: CreateBoardPayload, owner_id: uuid.UUID) -> Board:
        return Board(name=payload.name, owner_id=owner_id)

    # Serialization
    def create_board_response_flat(self, board: Board, columns_count: int) -> BoardResponseFlat:
        return BoardResponseFlat(
            id=board.id,
            owner_id=board.owner_id,
            name=board.name,
            created_at=board.created_at,
            updated_at=board.updated_at,
            columns_count=columns_count,
        )

    def create_board_response(
        self,
        board: Board,
        columns: list[ColumnResponseFlat],
    ) -> BoardResponse:
        return BoardResponse(
            id=board.id,
            owner_id=board.owner_id,
            name=board.name,
            created_at=board.created_at,
            updated_at=board.updated_at,
            columns=columns,
        )


class ColumnService:
    def __init__(self, repository: ColumnRepository = Depends(get_column_repository)) -> None:
        if isinstance(repository, DependsType):
            repository = repository.dependency()
        self.repository = repository

    def create_column(
        self,
        payload: CreateColumnPayload,
        board_id: uuid.UUID,
        token: str,
        board_service: BoardService,
        user_service: UserService,
    ) -> ColumnResponseFlat:
        my_id = user_service.get_current_user_id(token)
        board_service.validate_user_owns_board(my_id, board_id)

        # Not isolated: two overlapping appends can read the same max and share an order
        order = next_order(self.repository.get_max_order_for_board(board_id))
        column = self.repository.create(self.create_domain_column_instance(board_id, payload, order))
        logger.info("Created column %s in board %s at order %s", column.id, board_id, order)

        return self.create_column_response_flat(column, tasks_count=0)

    def list_columns_for_board(
        self,
        board_id: uuid.UUID,
        token: str,
        board_service: BoardService,
        user_service: UserService,
    ) -> list[ColumnResponseFlat]:
        my_id = user_service.get_current_user_id(token)
        board_service.validate_user_owns_board(my_id, board_id)
        return self.create_column_responses(self.repository.list_columns_for_board(board_id))

    def partial_update_column(
        self,
        payload: PartialUpdateColumnPayload,
        column_id: uuid.UUID,
        token: str,
        user_service: UserService,
    ) -> ColumnResponseFlat:
        my_id = user_service.get_current_user_id(token)
        # A direct overwrite, no other column is touched
        column = self.repository.partial_update_column(
            column_id=column_id,
            owner_id=my_id,
            name=payload.name,
            order=payload.order,
        )
        return self.create_column_responses([column])[0]

    def delete_column(self, column_id: uuid.UUID, token: str, user_service: UserService) -> None:
        my_id = user_service.get_current_user_id(token)
        self.repository.delete_column(column_id, my_id)
        logger.info("Deleted column %s", column_id)

    # Validation
    def validate_user_owns_column(
        self,
        user_id: uuid.UUID,
        column_id: uuid.UUID,
        not_found: exceptions.NotFoundException = exceptions.ColumnNotFound,
    ) -> Column:
        return self.repository.get_column_for_owner(column_id, user_id, not_found)

    # Domain object manipulation
    def create_domain_column_instance(
        self,
        board_id: uuid.UUID,
        payload: CreateColumnPayload,
        order: int,
    ) -> Column:
        return Column(board_id=board_id, name=payload.name, order=order)

    # Serialization
    def create_column_responses(self, columns: list[Column]) -> list[ColumnResponseFlat]:
        tasks_count = self.repository.get_tasks_count_by_column_id([column.id for column in columns])
        return [
            self.create_column_response_flat(column, tasks_count.get(column.id, 0))
            for column in columns
        ]

    def create_column_response_flat(self, column: Column, tasks_count: int) -> ColumnResponseFlat:
        return ColumnResponseFlat(
            id=column.id,
            board_id=column.board_id,
            name=column.name,
            order=column.order,
            created_at=column.created_at,
            updated_at=column.updated_at,
            tasks_count=tasks_count,
        )

    def create_column_summary(self, column: Column) -> ColumnSummary:
        return ColumnSummary(id=column.id, board_id=column.board_id, name=column.name)


class TaskService:
    def __init__(self, repository: TaskRepository = Depends(get_task_repository)) -> None:
        if isinstance(repository, DependsType):
            repository = repository.dependency()
        self.repository = repository

    def create_task_in_column(
        self,
        payload: CreateTaskPayload,
        column_id: uuid.UUID,
        token: str,
        column_service: ColumnService,
        user_service: UserService,
    ) -> TaskResponseFlat:
        my_id = user_service.get_current_user_id(token)
        column_service.validate_user_owns_column(my_id, column_id)

        # Not isolated: two overlapping appends can read the same max and share an order
        order = next_order(self.repository.get_max_order_for_column(column_id))
        task = self.repository.create(
            self.create_domain_task_instance(column_id, my_id, payload, order)
        )
        logger.info("Created task %s in column %s at order %s", task.id, column_id, order)

        return self.create_task_response_flat(task, comments_count=0)

    def list_tasks_for_column(
        self,
        column_id: uuid.UUID,
        query: TaskQuery,
        token: str,
        column_service: ColumnService,
        user_service: UserService,
    ) -> TaskListResponse:
        my_id = user_service.get_current_user_id(token)
        column_service.validate_user_owns_column(my_id, column_id)

        tasks, total = self.repository.list_tasks_for_column(column_id, query)
        return TaskListResponse(
            tasks=self.create_task_responses_flat(tasks),
            pagination=Pagination(
                page=query.page,
                limit=query.limit,
                total=total,
                total_pages=math.ceil(total / query.limit),
            ),
        )

    def list_tasks_for_board(
        self,
        board_id: uuid.UUID,
        token: str,
        board_service: BoardService,
        user_service: UserService,
    ) -> list[TaskResponseFlat]:
        my_id = user_service.get_current_user_id(token)
        board_service.validate_user_owns_board(my_id, board_id)
        return self.create_task_responses_flat(self.repository.list_tasks_for_board(board_id))

    def get_task_by_id(
        self,
        task_id: uuid.UUID,
        token: str,
        column_service: ColumnService,
        user_service: UserService,
    ) -> TaskResponse:
        my_id = user_service.get_current_user_id(token)
        task = self.repository.get_task_for_owner(task_id, my_id, with_details=True)
        return self.create_task_response(task, column_service, user_service)

    def partial_update_task(
        self,
        payload: PartialUpdateTaskPayload,
        task_id: uuid.UUID,
        token: str,
        column_service: ColumnService,
        user_service: UserService,
    ) -> TaskResponse:
        my_id = user_service.get_current_user_id(token)
        task = self.repository.get_task_for_owner(task_id, my_id)

        updates = self.resolve_field_updates(payload)
        if payload.is_move:
            updates.update(self.resolve_move(task, payload, my_id, column_service))

        task = self.repository.partial_update_task(task_id, my_id, updates)
        if payload.is_move:
            logger.info("Moved task %s to column %s at order %s", task.id, task.column_id, task.order)

        return self.create_task_response(task, column_service, user_service)

    def resolve_move(
        self,
        task: Task,
        payload: PartialUpdateTaskPayload,
        user_id: uuid.UUID,
        column_service: ColumnService,
    ) -> dict:
        if payload.column_id is not None and payload.column_id != task.column_id:
            # The destination has to be visible to the same owner, otherwise nothing is written
            column_service.validate_user_owns_column(
                user_id, payload.column_id, not_found=exceptions.TargetColumnNotFound
            )

        return resolve_move(
            current_column_id=task.column_id,
            destination_column_id=payload.column_id,
            destination_order=payload.order,
            append_order=lambda column_id: next_order(
                self.repository.get_max_order_for_column(column_id)
            ),
        )

    def resolve_field_updates(self, payload: PartialUpdateTaskPayload) -> dict:
        updates = {}
        if payload.title is not None:
            updates["title"] = payload.title
        if "description" in payload.model_fields_set:
            # null clears it
            updates["description"] = payload.description
        if payload.priority is not None:
            updates["priority"] = payload.priority
        return updates

    def delete_task(self, task_id: uuid.UUID, token: str, user_service: UserService) -> None:
        my_id = user_service.get_current_user_id(token)
        self.repository.delete_task(task_id, my_id)
        logger.info("Deleted task %s", task_id)

    # Validation
    def validate_user_owns_task(self, user_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        # Raises TaskNotFound
        return self.repository.get_task_for_owner(task_id, user_id)

    # Domain object manipulation
    def create_domain_task_instance(
        self,
        column_id: uuid.UUID,
        creator_id: uuid.UUID,
        payload: CreateTaskPayload,
        order: int,
    ) -> Task:
        return Task(
            column_id=column_id,
            creator_id=creator_id,
            title=payload.title,
            description=payload.description,
            priority=payload.priority,
            order=order,
        )

    # Serialization
    def create_task_responses_flat(self, tasks: list[Task]) -> list[TaskResponseFlat]:
        comments_count = self.repository.get_comments_count_by_task_id([task.id for task in tasks])
        return [
            self.create_task_response_flat(task, comments_count.get(task.id, 0)) for task in tasks
        ]

    def create_task_response_flat(self, task: Task, comments_count: int) -> TaskResponseFlat:
        return TaskResponseFlat(
            id=task.id,
            column_id=task.column_id,
            creator_id=task.creator_id,
            title=task.title,
            description=task.description,
            priority=task.priority,
            order=task.order,
            created_at=task.created_at,
            updated_at=task.updated_at,
            comments_count=comments_count,
        )

    def create_task_response(
        self,
        task: Task,
        column_service: ColumnService,
        user_service: UserService,
    ) -> TaskResponse:
        flat = self.create_task_responses_flat([task])[0]
        return TaskResponse(
            **flat.model_dump(),
            creator=user_service.create_user_response_flat(task.creator),
            column=column_service.create_column_summary(task.column),
        )


class CommentService:
    def __init__(self, repository: CommentRepository = Depends(get_comment_repository)) -> None:
        if isinstance(repository, DependsType):
            repository = repository.dependency()
        self.repository = repository

    def create_comment(
        self,
        payload: CreateCommentPayload,
        task_id: uuid.UUID,
        token: str,
        task_service: TaskService,
        user_service: UserService,
    ) -> CommentResponse:
        my_id = user_service.get_current_user_id(token)
        task_service.validate_user_owns_task(my_id, task_id)

        comment = self.repository.create_comment(
            Comment(content=payload.content, task_id=task_id, author_id=my_id)
        )
        logger.info("Created comment %s on task %s", comment.id, task_id)
        return self.create_comment_response(comment, user_service)

    def list_comments_for_task(
        self,
        task_id: uuid.UUID,
        token: str,
        task_service: TaskService,
        user_service: UserService,
    ) -> list[CommentResponse]:
        my_id = user_service.get_current_user_id(token)
        task_service.validate_user_owns_task(my_id, task_id)
        return [
            self.create_comment_response(comment, user_service)
            for comment in self.repository.list_comments_for_task(task_id)
        ]

    def delete_comment(self, comment_id: uuid.UUID, token: str, user_service: UserService) -> None:
        my_id = user_service.get_current_user_id(token)
        self.repository.delete_comment(comment_id, my_id)
        logger.info("Deleted comment %s", comment_id)

    # Serialization
    def create_comment_response(
        self,
        comment: Comment,
        user_service: UserService,
    ) -> CommentResponse:
        return CommentResponse(
            id=comment.id,
            task_id=comment.task_id,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            author=user_service.create_user_response_flat(comment.author),
        )
