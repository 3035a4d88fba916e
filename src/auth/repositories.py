from sqlalchemy.sql import exists, select

from ..core import BaseRepository
from .models import User


class UserRepository(BaseRepository):
    model = User

    def check_email_unique(self, email: str) -> bool:
        with self.sessionmaker() as session:
            # https://stackoverflow.com/a/75900879
            return not session.scalar(exists().where(self.model.email == email).select())

    def get_user_by_email(self, email: str) -> User | None:
        with self.sessionmaker() as session:
            return session.scalar(select(self.model).where(self.model.email == email))


def get_user_repository() -> UserRepository:
    return UserRepository()
