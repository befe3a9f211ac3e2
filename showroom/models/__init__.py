"""SQLAlchemy models for the showroom catalog."""

from showroom.models.admin_account import AdminAccount
from showroom.models.base import Base, IdMixin, TimestampMixin
from showroom.models.category import Category
from showroom.models.product import Product

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "AdminAccount",
    "Category",
    "Product",
]
