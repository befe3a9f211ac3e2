"""Admin product endpoints.

All routes require an admin session. Inactive products are included.
"""

from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from showroom.api.deps import AdminSession, DbSession, Storage
from showroom.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from showroom.services.catalog_service import CatalogService

router = APIRouter()


@router.get("", response_model=list[ProductResponse])
async def list_products(admin: AdminSession, db: DbSession) -> list[ProductResponse]:
    """List all products, newest first."""
    products = await CatalogService(db).list_all()
    return [ProductResponse.model_validate(product) for product in products]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    admin: AdminSession,
    db: DbSession,
) -> ProductResponse:
    """Create a product."""
    product = await CatalogService(db).create(body)
    return ProductResponse.model_validate(product)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, admin: AdminSession, db: DbSession) -> ProductResponse:
    """Get a product by id."""
    product = await CatalogService(db).get(product_id)
    return ProductResponse.model_validate(product)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: ProductUpdate,
    admin: AdminSession,
    db: DbSession,
) -> ProductResponse:
    """Update only the supplied fields."""
    product = await CatalogService(db).update(product_id, body)
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", response_model=ProductResponse)
async def deactivate_product(
    product_id: str,
    admin: AdminSession,
    db: DbSession,
) -> ProductResponse:
    """Deactivate a product. Products are never hard-deleted."""
    product = await CatalogService(db).deactivate(product_id)
    return ProductResponse.model_validate(product)


@router.post(
    "/{product_id}/images",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_image(
    product_id: str,
    admin: AdminSession,
    db: DbSession,
    storage: Storage,
    file: Annotated[UploadFile, File(description="JPEG, PNG or WebP image")],
    is_main: Annotated[bool, Form(alias="isMain")] = False,
) -> ProductResponse:
    """Upload an image and attach it to the product."""
    data = await file.read()
    product = await CatalogService(db, storage).add_image(
        product_id,
        data,
        file.content_type or "",
        is_main=is_main,
    )
    return ProductResponse.model_validate(product)
