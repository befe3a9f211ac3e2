"""Public catalog endpoints.

Only active products are visible here; lookups go through the derived
slug, never the internal id.
"""

from typing import Literal

from fastapi import APIRouter, Query

from showroom.api.deps import DbSession
from showroom.schemas.product import ProductResponse, ProductView
from showroom.services.catalog_service import CatalogService

router = APIRouter()


@router.get("/products", response_model=list[ProductResponse])
async def list_products(
    db: DbSession,
    category: str | None = Query(default=None, description="Category label"),
    q: str | None = Query(default=None, description="Search in names and item number"),
) -> list[ProductResponse]:
    """List active products, newest first."""
    products = await CatalogService(db).list_active(category=category, q=q)
    return [ProductResponse.model_validate(product) for product in products]


@router.get("/products/{slug}", response_model=ProductResponse)
async def get_product(slug: str, db: DbSession) -> ProductResponse:
    """Get an active product by slug (404 if none matches)."""
    product = await CatalogService(db).get_by_slug(slug)
    return ProductResponse.model_validate(product)


@router.get("/products/{slug}/view", response_model=ProductView)
async def get_product_view(
    slug: str,
    db: DbSession,
    lang: Literal["en", "vi"] = Query(default="en"),
) -> ProductView:
    """Get a product rendered for a single language."""
    return await CatalogService(db).view(slug, lang)


@router.get("/categories", response_model=list[str])
async def list_public_categories(db: DbSession) -> list[str]:
    """Category labels that have at least one active product."""
    return await CatalogService(db).list_public_categories()
