"""Product schemas for public and admin endpoints."""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import Field, StringConstraints, field_validator, model_validator

from showroom.schemas.common import CamelModel

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class LocalizedText(CamelModel):
    """Text with both English and Vietnamese variants."""

    en: NonEmptyStr
    vi: NonEmptyStr


class LocalizedTextUpdate(CamelModel):
    """Partial localized text; omitted languages keep their value."""

    en: NonEmptyStr | None = None
    vi: NonEmptyStr | None = None


class ProductImage(CamelModel):
    """Image descriptor."""

    url: NonEmptyStr
    is_main: bool = Field(default=False)
    display_order: int = Field(default=1, ge=0)


def _check_single_main(images: list[ProductImage] | None) -> list[ProductImage] | None:
    if images and sum(1 for image in images if image.is_main) > 1:
        raise ValueError("At most one image can be marked as main")
    return images


class ProductCreate(CamelModel):
    """Admin payload for a new product."""

    item_no: NonEmptyStr
    name: LocalizedText
    category: NonEmptyStr | None = None
    category_id: str | None = None

    description: Any | None = None
    material: Any | None = None
    dimensions: Any | None = None
    set_components: Any | None = None
    packing_size: Any | None = None
    packaging_type: Any | None = None
    remark: Any | None = None
    images: list[ProductImage] = Field(default_factory=list)

    prices: Any | None = None
    moq: Any | None = None
    inner_pack: Any | None = None
    container_capacity: Any | None = None
    carton_cbm: Any | None = Field(default=None, alias="cartonCBM")

    is_active: bool = True

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: list[ProductImage]) -> list[ProductImage]:
        """Allow at most one main image."""
        return _check_single_main(v)

    @model_validator(mode="after")
    def require_category(self) -> "ProductCreate":
        """A category label or a category reference is required."""
        if not self.category and not self.category_id:
            raise ValueError("category or categoryId is required")
        return self


class ProductUpdate(CamelModel):
    """Admin partial update; only supplied fields change."""

    item_no: NonEmptyStr | None = None
    name: LocalizedTextUpdate | None = None
    category: NonEmptyStr | None = None
    category_id: str | None = None

    description: Any | None = None
    material: Any | None = None
    dimensions: Any | None = None
    set_components: Any | None = None
    packing_size: Any | None = None
    packaging_type: Any | None = None
    remark: Any | None = None
    images: list[ProductImage] | None = None

    prices: Any | None = None
    moq: Any | None = None
    inner_pack: Any | None = None
    container_capacity: Any | None = None
    carton_cbm: Any | None = Field(default=None, alias="cartonCBM")

    is_active: bool | None = None

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: list[ProductImage] | None) -> list[ProductImage] | None:
        """Allow at most one main image."""
        return _check_single_main(v)


class ProductResponse(CamelModel):
    """Product as returned by the API."""

    id: str
    slug: str
    item_no: str
    category: str
    category_id: str | None = None
    name: dict[str, str]

    description: Any | None = None
    material: Any | None = None
    dimensions: Any | None = None
    set_components: Any | None = None
    packing_size: Any | None = None
    packaging_type: Any | None = None
    remark: Any | None = None
    images: list[ProductImage] = Field(default_factory=list)

    prices: Any | None = None
    moq: Any | None = None
    inner_pack: Any | None = None
    container_capacity: Any | None = None
    carton_cbm: Any | None = Field(default=None, alias="cartonCBM")

    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductView(CamelModel):
    """Product projected onto a single language for page rendering."""

    id: str
    slug: str
    language: Literal["en", "vi"]
    item_no: str
    category: str
    name: str
    description: list[str] = Field(default_factory=list)
    main_image: str
    images: list[str] = Field(default_factory=list)
    specifications: dict[str, Any] = Field(
        default_factory=dict,
        description="Rendered specifications keyed by camelCase field name",
    )
    prices: Any | None = None
    moq: Any | None = None
    inner_pack: Any | None = None
    container_capacity: Any | None = None
    carton_cbm: Any | None = Field(default=None, alias="cartonCBM")
