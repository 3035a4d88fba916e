import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from ..auth.services import UserService
from ..core.auth import oauth2_scheme
from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .dto import (
    BoardResponse,
    BoardResponseFlat,
    ColumnResponseFlat,
    CommentResponse,
    CreateBoardPayload,
    CreateColumnPayload,
    CreateCommentPayload,
    CreateTaskPayload,
    PartialUpdateColumnPayload,
    PartialUpdateTaskPayload,
    TaskListResponse,
    TaskQuery,
    TaskResponse,
    TaskResponseFlat,
)
from .query_params import TaskSort
from .services import BoardService, ColumnService, CommentService, TaskService

board_router = APIRouter(prefix="/boards", tags=["boards"])
column_router = APIRouter(prefix="/columns", tags=["columns"])
task_router = APIRouter(prefix="/tasks", tags=["tasks"])
comment_router = APIRouter(prefix="/comments", tags=["comments"])

routers = [board_router, column_router, task_router, comment_router]


# Boards
@board_router.post("", status_code=status.HTTP_201_CREATED, response_model=BoardResponse)
async def board_create(
    payload: CreateBoardPayload,
    token: str = Depends(oauth2_scheme),
    service: BoardService = Depends(BoardService),
    column_service: ColumnService = Depends(ColumnService),
    user_service: UserService = Depends(UserService),
):
    return service.create_board(payload, token, column_service, user_service)


@board_router.get("", response_model=list[BoardResponseFlat])
async def board_list(
    token: str = Depends(oauth2_scheme),
    service: BoardService = Depends(BoardService),
    user_service: UserService = Depends(UserService),
):
    return service.list_boards(token, user_service)


@board_router.get("/{board_id}", response_model=BoardResponse)
async def board_details(
    board_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: BoardService = Depends(BoardService),
    column_service: ColumnService = Depends(ColumnService),
    user_service: UserService = Depends(UserService),
):
    return service.get_board_by_id(board_id, token, column_service, user_service)


@board_router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def board_delete(
    board_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: BoardService = Depends(BoardService),
    user_service: UserService = Depends(UserService),
):
    service.delete_board(board_id, token, user_service)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@board_router.get("/{board_id}/columns", tags=["columns"], response_model=list[ColumnResponseFlat])
async def board_column_list(
    board_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: ColumnService = Depends(ColumnService),
    board_service: BoardService = Depends(BoardService),
    user_service: UserService = Depends(UserService),
):
    return service.list_columns_for_board(board_id, token, board_service, user_service)


@board_router.post(
    "/{board_id}/columns",
    tags=["columns"],
    status_code=status.HTTP_201_CREATED,
    response_model=ColumnResponseFlat,
)
async def column_create(
    payload: CreateColumnPayload,
    board_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: ColumnService = Depends(ColumnService),
    board_service: BoardService = Depends(BoardService),
    user_service: UserService = Depends(UserService),
):
    return service.create_column(payload, board_id, token, board_service, user_service)


@board_router.get("/{board_id}/tasks", tags=["tasks"], response_model=list[TaskResponseFlat])
async def board_task_list(
    board_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: TaskService = Depends(TaskService),
    board_service: BoardService = Depends(BoardService),
    user_service: UserService = Depends(UserService),
):
    return service.list_tasks_for_board(board_id, token, board_service, user_service)


# Columns
@column_router.patch("/{column_id}", response_model=ColumnResponseFlat)
async def column_partial_update(
    payload: PartialUpdateColumnPayload,
    column_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: ColumnService = Depends(ColumnService),
    user_service: UserService = Depends(UserService),
):
    return service.partial_update_column(payload, column_id, token, user_service)


@column_router.delete("/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
async def column_delete(
    column_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: ColumnService = Depends(ColumnService),
    user_service: UserService = Depends(UserService),
):
    service.delete_column(column_id, token, user_service)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@column_router.get("/{column_id}/tasks", tags=["tasks"], response_model=TaskListResponse)
async def column_task_list(
    column_id: uuid.UUID,
    search: Annotated[str | None, Query(max_length=200)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    sort: TaskSort = TaskSort.CREATED_AT,
    token: str = Depends(oauth2_scheme),
    service: TaskService = Depends(TaskService),
    column_service: ColumnService = Depends(ColumnService),
    user_service: UserService = Depends(UserService),
):
    query = TaskQuery(search=search, page=page, limit=limit, sort=sort)
    return service.list_tasks_for_column(column_id, query, token, column_service, user_service)


@column_router.post(
    "/{column_id}/tasks",
    tags=["tasks"],
    status_code=status.HTTP_201_CREATED,
    response_model=TaskResponseFlat,
)
async def task_create(
    payload: CreateTaskPayload,
    column_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: TaskService = Depends(TaskService),
    column_service: ColumnService = Depends(ColumnService),
    user_service: UserService = Depends(UserService),
):
    return service.create_task_in_column(payload, column_id, token, column_service, user_service)


# Tasks
@task_router.get("/{task_id}", response_model=TaskResponse)
async def task_details(
    task_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: TaskService = Depends(TaskService),
    column_service: ColumnService = Depends(ColumnService),
    user_service: UserService = Depends(UserService),
):
    return service.get_task_by_id(task_id, token, column_service, user_service)


@task_router.patch("/{task_id}", response_model=TaskResponse)
async def task_partial_update(
    payload: PartialUpdateTaskPayload,
    task_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: TaskService = Depends(TaskService),
    column_service: ColumnService = Depends(ColumnService),
    user_service: UserService = Depends(UserService),
):
    return service.partial_update_task(payload, task_id, token, column_service, user_service)


@task_router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def task_delete(
    task_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: TaskService = Depends(TaskService),
    user_service: UserService = Depends(UserService),
):
    service.delete_task(task_id, token, user_service)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@task_router.get("/{task_id}/comments", tags=["comments"], response_model=list[CommentResponse])
async def comment_list(
    task_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: CommentService = Depends(CommentService),
    task_service: TaskService = Depends(TaskService),
    user_service: UserService = Depends(UserService),
):
    return service.list_comments_for_task(task_id, token, task_service, user_service)


@task_router.post(
    "/{task_id}/comments",
    tags=["comments"],
    status_code=status.HTTP_201_CREATED,
    response_model=CommentResponse,
)
async def comment_create(
    payload: CreateCommentPayload,
    task_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: CommentService = Depends(CommentService),
    task_service: TaskService = Depends(TaskService),
    user_service: UserService = Depends(UserService),
):
    return service.create_comment(payload, task_id, token, task_service, user_service)


# Comments
@comment_router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def comment_delete(
    comment_id: uuid.UUID,
    token: str = Depends(oauth2_scheme),
    service: CommentService = Depends(CommentService),
    user_service: UserService = Depends(UserService),
):
    service.delete_comment(comment_id, token, user_service)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
