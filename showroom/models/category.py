"""Category model - product grouping managed by admins."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from showroom.models.base import Base, IdMixin, TimestampMixin


class Category(Base, IdMixin, TimestampMixin):
    """Product category.

    ``productCount`` is not stored; it is counted from referencing products.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
