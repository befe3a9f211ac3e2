"""Admin category endpoints."""

from fastapi import APIRouter, status

from showroom.api.deps import AdminSession, DbSession
from showroom.schemas.category import CategoryResponse, CategoryWrite
from showroom.schemas.common import SuccessResponse
from showroom.services.category_service import CategoryService

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
async def list_categories(admin: AdminSession, db: DbSession) -> list[CategoryResponse]:
    """List categories with product counts."""
    return await CategoryService(db).list_all()


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryWrite,
    admin: AdminSession,
    db: DbSession,
) -> CategoryResponse:
    """Create a category (409 if the name is taken)."""
    return await CategoryService(db).create(body.name)


@router.put("/{category_id}", response_model=CategoryResponse)
async def rename_category(
    category_id: str,
    body: CategoryWrite,
    admin: AdminSession,
    db: DbSession,
) -> CategoryResponse:
    """Rename a category."""
    return await CategoryService(db).rename(category_id, body.name)


@router.delete("/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: str,
    admin: AdminSession,
    db: DbSession,
) -> SuccessResponse:
    """Delete a category that no product references (409 otherwise)."""
    await CategoryService(db).delete(category_id)
    return SuccessResponse()
