"""AdminAccount model - back-office login."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from showroom.models.base import Base, IdMixin, TimestampMixin


class AdminAccount(Base, IdMixin, TimestampMixin):
    """Admin account.

    ``password_hash`` holds either a legacy SHA-256 hex digest or a bcrypt
    hash; see ``showroom.core.passwords``.
    """

    __tablename__ = "admin_accounts"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<AdminAccount(id={self.id}, username='{self.username}')>"
