from fastapi.testclient import TestClient
from pytest import fixture
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.auth.models import User
from src.auth.repositories import UserRepository
from src.auth.services import JWTService, UserService
from src.core.db import Base
from src.kanban.constants import TaskPriority
from src.kanban.models import Board, Column, Comment, Task
from src.kanban.repositories import (
    BoardRepository,
    ColumnRepository,
    CommentRepository,
    TaskRepository,
)
from src.kanban.services import BoardService, ColumnService, CommentService, TaskService
from src.main import app


TEST_PASSWORD = "password"


# Every test gets its own in-memory database, so there is nothing to truncate afterwards
@fixture(scope="function")
def TestSession() -> sessionmaker:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)

    yield sessionmaker(engine)

    Base.metadata.drop_all(engine)
    engine.dispose()


# Repositories
@fixture(scope="function")
def test_user_repository(TestSession) -> UserRepository:
    return UserRepository(TestSession)


@fixture(scope="function")
def test_board_repository(TestSession) -> BoardRepository:
    return BoardRepository(TestSession)


@fixture(scope="function")
def test_column_repository(TestSession) -> ColumnRepository:
    return ColumnRepository(TestSession)


@fixture(scope="function")
def test_task_repository(TestSession) -> TaskRepository:
    return TaskRepository(TestSession)


@fixture(scope="function")
def test_comment_repository(TestSession) -> CommentRepository:
    return CommentRepository(TestSession)


# Services
@fixture(scope="function")
def test_user_service(test_user_repository) -> UserService:
    return UserService(repository=test_user_repository)


@fixture(scope="function")
def test_board_service(test_board_repository) -> BoardService:
    return BoardService(repository=test_board_repository)


@fixture(scope="function")
def test_column_service(test_column_repository) -> ColumnService:
    return ColumnService(repository=test_column_repository)


@fixture(scope="function")
def test_task_service(test_task_repository) -> TaskService:
    return TaskService(repository=test_task_repository)


@fixture(scope="function")
def test_comment_service(test_comment_repository) -> CommentService:
    return CommentService(repository=test_comment_repository)


@fixture(scope="function")
def client(
    test_user_service,
    test_board_service,
    test_column_service,
    test_task_service,
    test_comment_service,
) -> TestClient:
    app.dependency_overrides[UserService] = lambda: test_user_service
    app.dependency_overrides[BoardService] = lambda: test_board_service
    app.dependency_overrides[ColumnService] = lambda: test_column_service
    app.dependency_overrides[TaskService] = lambda: test_task_service
    app.dependency_overrides[CommentService] = lambda: test_comment_service

    yield TestClient(app)

    app.dependency_overrides.clear()


# Helpers
def generate_jwt(user: User) -> str:
    return JWTService.create_jwt({"sub": str(user.id)}).access_token


def generate_auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {generate_jwt(user)}"}


def save(TestSession: sessionmaker, instance):
    with TestSession() as session:
        session.add(instance)
        session.commit()
        session.refresh(instance)

    return instance


def create_test_user(
    TestSession: sessionmaker,
    email: str,
    name: str = "Test User",
    password: str = TEST_PASSWORD,
) -> User:
    user = User(email=email, name=name, password_hash=JWTService.hash_password(password))
    return save(TestSession, user)


def create_test_board(TestSession: sessionmaker, owner_id, name: str = "Test board") -> Board:
    return save(TestSession, Board(name=name, owner_id=owner_id))


def create_test_column(TestSession: sessionmaker, board_id, name: str, order: int) -> Column:
    return save(TestSession, Column(board_id=board_id, name=name, order=order))


def create_test_task(
    TestSession: sessionmaker,
    column_id,
    creator_id,
    title: str,
    order: int,
    description: str | None = None,
    priority: TaskPriority = TaskPriority.MEDIUM,
) -> Task:
    task = Task(
        column_id=column_id,
        creator_id=creator_id,
        title=title,
        description=description,
        priority=priority,
        order=order,
    )
    return save(TestSession, task)


def create_test_comment(TestSession: sessionmaker, task_id, author_id, content: str) -> Comment:
    return save(TestSession, Comment(task_id=task_id, author_id=author_id, content=content))


def get_task(TestSession: sessionmaker, task_id) -> Task:
    with TestSession() as session:
        return session.get(Task, task_id)


# Fixtures built from the helpers
@fixture(scope="function")
def test_user(TestSession) -> User:
    return create_test_user(TestSession, "test_user@test.com", name="Test User")


@fixture(scope="function")
def other_user(TestSession) -> User:
    return create_test_user(TestSession, "other_user@test.com", name="Other User")


@fixture(scope="function")
def test_board(TestSession, test_user) -> Board:
    return create_test_board(TestSession, test_user.id)


@fixture(scope="function")
def test_columns(TestSession, test_board) -> list[Column]:
    return [
        create_test_column(TestSession, test_board.id, name, order)
        for order, name in enumerate(["To Do", "In Progress", "Done"])
    ]


@fixture(scope="function")
def test_tasks(TestSession, test_user, test_columns) -> list[Task]:
    # Three tasks in "To Do", orders 0, 1, 2
    return [
        create_test_task(TestSession, test_columns[0].id, test_user.id, title, order)
        for order, title in enumerate(["Write docs", "Fix login bug", "Release"])
    ]


@fixture(scope="function")
def other_board(TestSession, other_user) -> Board:
    return create_test_board(TestSession, other_user.id, name="Other board")


@fixture(scope="function")
def other_column(TestSession, other_board) -> Column:
    return create_test_column(TestSession, other_board.id, "Backlog", 0)


@fixture(scope="function")
def other_task(TestSession, other_user, other_column) -> Task:
    return create_test_task(TestSession, other_column.id, other_user.id, "Someone else's", 0)
