"""Category schemas."""

from datetime import datetime

from pydantic import Field

from showroom.schemas.common import CamelModel


class CategoryWrite(CamelModel):
    """Create or rename payload; the name is validated by the service."""

    name: str = Field(default="", max_length=100)


class CategoryResponse(CamelModel):
    """Category with its computed product count."""

    id: str
    name: str
    product_count: int = Field(default=0, description="Products referencing this category")
    created_at: datetime | None = None
    updated_at: datetime | None = None
