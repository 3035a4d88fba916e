import uuid

from sqlalchemy.orm import Mapped, mapped_column

from ..core.db import Base, CommonFieldsMixin


class User(Base, CommonFieldsMixin):
    __tablename__ = "user"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(unique=True, nullable=False)
    name: Mapped[str] = mapped_column(nullable=False)
    password_hash: Mapped[str] = mapped_column(nullable=False)

    def __repr__(self):
        return f"<src.auth.models.User: {self.email}>"
