import uuid
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    sessionmaker,
)
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import exists, func

from .config import settings


def build_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url)

    # sqlite connections get shared between the test thread and the app's event loop thread
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # a single connection, otherwise every checkout would see a fresh empty database
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = build_engine(settings.db_conn_url)
Session = sessionmaker(engine)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    ...


class CommonFieldsMixin:
    # Python-side defaults keep sub-second precision, CURRENT_TIMESTAMP in sqlite does not
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.CURRENT_TIMESTAMP(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.CURRENT_TIMESTAMP(),
        onupdate=utcnow,
    )


class BaseRepository:
    model = None

    def __init__(self, sessionmaker: sessionmaker = Session):
        if not self.model:
            raise NotImplementedError(
                "Repositories are model specific and should have model as a class variable."
            )
        self.sessionmaker = sessionmaker

    def create(self, model_instance: Base, attribute_names: list[str] | None = None) -> Base:
        # Assumes data from model_data has already been validated
        with self.sessionmaker() as session:
            try:
                session.add(model_instance)
                session.commit()
                session.refresh(model_instance, attribute_names=attribute_names)
            except Exception as e:  # Intentional catch-all - we want a rollback for ALL exceptions
                session.rollback()
                raise e
        return model_instance

    def exists_with_id(self, id: uuid.UUID) -> bool:
        with self.sessionmaker() as session:
            return session.scalar(exists().where(self.model.id == id).select())

    def get_all(self) -> list[Base]:
        with self.sessionmaker() as session:
            return session.query(self.model).all()

    def get_count(self) -> int:
        with self.sessionmaker() as session:
            return session.query(self.model).count()

    def get_by_id(self, id: uuid.UUID) -> Base | None:
        with self.sessionmaker() as session:
            return session.get(self.model, id)

    def get_all_by_id(self, ids: list[uuid.UUID]) -> list[Base]:
        with self.sessionmaker() as session:
            return session.query(self.model).filter(self.model.id.in_(ids)).all()
