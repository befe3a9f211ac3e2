"""Product model - localized catalog entry."""

from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from showroom.core.slug import derive_slug
from showroom.models.base import Base, IdMixin, JSONType, TimestampMixin

if TYPE_CHECKING:
    from showroom.models.category import Category


class Product(Base, IdMixin, TimestampMixin):
    """Furniture product shown in the public catalog.

    Localized and specification fields are stored as JSON exactly as the
    admin submitted them; their shapes vary between records.
    """

    __tablename__ = "products"

    item_no: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    category_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # Localized content: {"en": ..., "vi": ...}
    name: Mapped[dict[str, str]] = mapped_column(JSONType, nullable=False)
    description: Mapped[Any | None] = mapped_column(JSONType, nullable=True)

    # Semi-structured specifications
    material: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    dimensions: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    set_components: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    packing_size: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    packaging_type: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    remark: Mapped[Any | None] = mapped_column(JSONType, nullable=True)

    # [{"url": ..., "isMain": bool, "displayOrder": int}, ...]
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)

    # Logistics metadata (language independent)
    prices: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    moq: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    inner_pack: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    container_capacity: Mapped[Any | None] = mapped_column(JSONType, nullable=True)
    carton_cbm: Mapped[Any | None] = mapped_column(JSONType, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    # Relationships
    category_ref: Mapped["Category | None"] = relationship(
        "Category",
        lazy="selectin",
    )

    @property
    def slug(self) -> str:
        """SEO slug derived from the English name and item number."""
        return derive_slug((self.name or {}).get("en", ""), self.item_no)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, item_no='{self.item_no}')>"
