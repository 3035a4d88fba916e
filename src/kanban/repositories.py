import uuid

from sqlalchemy import func
from sqlalchemy.orm import joinedload, selectinload
from sqlalchemy.orm.session import Session as SessionType
from sqlalchemy.sql import or_, select

from ..core import BaseRepository, exceptions
from ..core.exceptions import NotFoundException
from .dto import TaskQuery
from .models import Board, Column, Comment, Task


class BoardRepository(BaseRepository):
    model = Board

    def create_board_with_columns(self, board: Board, column_names: list[str]) -> Board:
        with self.sessionmaker() as session:
            try:
                board.columns = [
                    Column(name=name, order=order) for order, name in enumerate(column_names)
                ]
                session.add(board)
                session.commit()
            except Exception as e:  # Intentional catch-all - we want a rollback for ALL exceptions
                session.rollback()
                raise e
            return self.session_get_board_for_owner(
                session, board.id, board.owner_id, with_columns=True
            )

    def list_boards_for_owner(self, owner_id: uuid.UUID) -> list[tuple[Board, int]]:
        columns_count = (
            select(func.count(Column.id))
            .where(Column.board_id == self.model.id)
            .correlate(self.model)
            .scalar_subquery()
        )
        with self.sessionmaker() as session:
            rows = session.execute(
                select(self.model, columns_count)
                .where(self.model.owner_id == owner_id)
                .order_by(self.model.created_at.desc())
            ).all()
            return [(board, count) for board, count in rows]

    def get_board_for_owner(
        self,
        board_id: uuid.UUID,
        owner_id: uuid.UUID,
        with_columns: bool = False,
    ) -> Board:
        with self.sessionmaker() as session:
            return self.session_get_board_for_owner(session, board_id, owner_id, with_columns)

    def session_get_board_for_owner(
        self,
        session: SessionType,
        board_id: uuid.UUID,
        owner_id: uuid.UUID,
        with_columns: bool = False,
    ) -> Board:
        query = select(self.model).where(
            self.model.id == board_id,
            self.model.owner_id == owner_id,
        )
        if with_columns:
            query = query.options(selectinload(self.model.columns))

        board = session.scalar(query)
        # Someone else's board looks exactly like a missing one
        if not board:
            raise exceptions.BoardNotFound
        return board

    def delete_board(self, board_id: uuid.UUID, owner_id: uuid.UUID) -> None:
        with self.sessionmaker() as session:
            board = self.session_get_board_for_owner(session, board_id, owner_id)
            # Columns, tasks and comments go with it (ORM cascade)
            session.delete(board)
            session.commit()


class ColumnRepository(BaseRepository):
    model = Column

    def get_max_order_for_board(self, board_id: uuid.UUID) -> int | None:
        with self.sessionmaker() as session:
            return session.scalar(
                select(func.max(self.model.order)).where(self.model.board_id == board_id)
            )

    def list_columns_for_board(self, board_id: uuid.UUID) -> list[Column]:
        with self.sessionmaker() as session:
            return session.scalars(
                select(self.model)
                .where(self.model.board_id == board_id)
                .order_by(self.model.order, self.model.created_at)
            ).all()

    def get_tasks_count_by_column_id(self, column_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
        if not column_ids:
            return {}
        with self.sessionmaker() as session:
            rows = session.execute(
                select(Task.column_id, func.count(Task.id))
                .where(Task.column_id.in_(column_ids))
                .group_by(Task.column_id)
            ).all()
        return {column_id: count for column_id, count in rows}

    def get_column_for_owner(
        self,
        column_id: uuid.UUID,
        owner_id: uuid.UUID,
        not_found: NotFoundException = exceptions.ColumnNotFound,
    ) -> Column:
        with self.sessionmaker() as session:
            return self.session_get_column_for_owner(session, column_id, owner_id, not_found)

    def session_get_column_for_owner(
        self,
        session: SessionType,
        column_id: uuid.UUID,
        owner_id: uuid.UUID,
        not_found: NotFoundException = exceptions.ColumnNotFound,
    ) -> Column:
        column = session.scalar(
            select(self.model)
            .join(self.model.board)
            .where(self.model.id == column_id, Board.owner_id == owner_id)
        )
        if not column:
            raise not_found
        return column

    def partial_update_column(
        self,
        column_id: uuid.UUID,
        owner_id: uuid.UUID,
        name: str | None,
        order: int | None,
    ) -> Column:
        with self.sessionmaker() as session:
            column = self.session_get_column_for_owner(session, column_id, owner_id)

            if name is not None:
                column.name = name
            if order is not None:
                column.order = order

            session.add(column)
            session.commit()
            session.refresh(column)

        return column

    def delete_column(self, column_id: uuid.UUID, owner_id: uuid.UUID) -> None:
        with self.sessionmaker() as session:
            column = self.session_get_column_for_owner(session, column_id, owner_id)
            session.delete(column)
            session.commit()


class TaskRepository(BaseRepository):
    model = Task

    def get_max_order_for_column(self, column_id: uuid.UUID) -> int | None:
        with self.sessionmaker() as session:
            return session.scalar(
                select(func.max(self.model.order)).where(self.model.column_id == column_id)
            )

    def get_comments_count_by_task_id(self, task_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
        if not task_ids:
            return {}
        with self.sessionmaker() as session:
            rows = session.execute(
                select(Comment.task_id, func.count(Comment.id))
                .where(Comment.task_id.in_(task_ids))
                .group_by(Comment.task_id)
            ).all()
        return {task_id: count for task_id, count in rows}

    def list_tasks_for_column(
        self,
        column_id: uuid.UUID,
        query: TaskQuery,
    ) -> tuple[list[Task], int]:
        filters = [self.model.column_id == column_id]
        if query.search:
            # % and _ in the search text match literally
            filters.append(
                or_(
                    self.model.title.icontains(query.search, autoescape=True),
                    self.model.description.icontains(query.search, autoescape=True),
                )
            )

        with self.sessionmaker() as session:
            total = session.scalar(select(func.count(self.model.id)).where(*filters))
            tasks = session.scalars(
                select(self.model)
                .where(*filters)
                .order_by(*query.sort.order_by_params)
                .offset((query.page - 1) * query.limit)
                .limit(query.limit)
            ).all()

        return tasks, total

    def list_tasks_for_board(self, board_id: uuid.UUID) -> list[Task]:
        with self.sessionmaker() as session:
            return session.scalars(
                select(self.model)
                .join(self.model.column)
                .where(Column.board_id == board_id)
                .order_by(self.model.order, self.model.created_at)
            ).all()

    def get_task_for_owner(
        self,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        with_details: bool = False,
    ) -> Task:
        with self.sessionmaker() as session:
            return self.session_get_task_for_owner(session, task_id, owner_id, with_details)

    def session_get_task_for_owner(
        self,
        session: SessionType,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        with_details: bool = False,
    ) -> Task:
        query = (
            select(self.model)
            .join(self.model.column)
            .join(Column.board)
            .where(self.model.id == task_id, Board.owner_id == owner_id)
        )
        if with_details:
            query = query.options(
                joinedload(self.model.creator),
                joinedload(self.model.column),
            )

        task = session.scalar(query)
        if not task:
            raise exceptions.TaskNotFound
        return task

    def partial_update_task(
        self,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        updates: dict,
    ) -> Task:
        # Only the task itself is written, siblings keep their order values
        with self.sessionmaker() as session:
            task = self.session_get_task_for_owner(session, task_id, owner_id)

            for field, value in updates.items():
                setattr(task, field, value)

            session.add(task)
            session.commit()

            return self.session_get_task_for_owner(session, task_id, owner_id, with_details=True)

    def delete_task(self, task_id: uuid.UUID, owner_id: uuid.UUID) -> None:
        with self.sessionmaker() as session:
            task = self.session_get_task_for_owner(session, task_id, owner_id)
            session.delete(task)
            session.commit()


class CommentRepository(BaseRepository):
    model = Comment

    def create_comment(self, comment: Comment) -> Comment:
        with self.sessionmaker() as session:
            try:
                session.add(comment)
                session.commit()
            except Exception as e:  # Intentional catch-all - we want a rollback for ALL exceptions
                session.rollback()
                raise e
            return session.scalar(
                select(self.model)
                .options(joinedload(self.model.author))
                .where(self.model.id == comment.id)
            )

    def list_comments_for_task(self, task_id: uuid.UUID) -> list[Comment]:
        with self.sessionmaker() as session:
            return session.scalars(
                select(self.model)
                .options(joinedload(self.model.author))
                .where(self.model.task_id == task_id)
                .order_by(self.model.created_at)
            ).all()

    def delete_comment(self, comment_id: uuid.UUID, author_id: uuid.UUID) -> None:
        with self.sessionmaker() as session:
            comment = session.scalar(
                select(self.model).where(
                    self.model.id == comment_id,
                    self.model.author_id == author_id,
                )
            )
            # Only the author may delete; anyone else gets the same answer as for a missing comment
            if not comment:
                raise exceptions.CommentNotFound
            session.delete(comment)
            session.commit()


def get_board_repository() -> BoardRepository:
    return BoardRepository()


def get_column_repository() -> ColumnRepository:
    return ColumnRepository()


def get_task_repository() -> TaskRepository:
    return TaskRepository()


def get_comment_repository() -> CommentRepository:
    return CommentRepository()
