"""Category Service - admin category management.

A product references a category either through ``category_id`` or, for
rows imported before categories existed, by its ``category`` label.
Both count towards ``product_count`` and both block deletion.
"""

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.core.errors import ConflictError, NotFoundError, ValidationError
from showroom.infra.logging import get_logger
from showroom.models import Category, Product
from showroom.schemas.category import CategoryResponse

logger = get_logger(__name__)

DUPLICATE_NAME_MESSAGE = "A category with this name already exists"


class CategoryService:
    """Category CRUD with reference counting."""

    def __init__(self, db_session: AsyncSession) -> None:
        self.db = db_session

    async def list_all(self) -> list[CategoryResponse]:
        """All categories ordered by name, with their product counts."""
        result = await self.db.execute(select(Category).order_by(Category.name))
        categories = result.scalars().all()

        responses = []
        for category in categories:
            response = CategoryResponse.model_validate(category)
            response.product_count = await self.product_count(category)
            responses.append(response)
        return responses

    async def get(self, category_id: str) -> Category:
        category = await self.db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found", detail={"id": category_id})
        return category

    async def product_count(self, category: Category) -> int:
        """Count products referencing a category."""
        stmt = select(func.count(Product.id)).where(
            or_(
                Product.category_id == category.id,
                and_(Product.category_id.is_(None), Product.category == category.name),
            )
        )
        return (await self.db.execute(stmt)).scalar_one()

    async def create(self, name: str) -> CategoryResponse:
        """Create a category.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If the name is taken
        """
        cleaned = _clean_name(name)
        await self._ensure_name_free(cleaned)

        category = Category(name=cleaned)
        self.db.add(category)
        await self._flush_unique()
        await self.db.refresh(category)

        logger.info("Category created", category_id=category.id, name=category.name)
        return CategoryResponse.model_validate(category)

    async def rename(self, category_id: str, name: str) -> CategoryResponse:
        """Rename a category.

        Products linked by ``category_id`` take the new label. Label-only
        products carrying the old name are relabelled and linked as well.

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: If the name is blank
            ConflictError: If the name is taken
        """
        category = await self.get(category_id)
        cleaned = _clean_name(name)
        if cleaned == category.name:
            response = CategoryResponse.model_validate(category)
            response.product_count = await self.product_count(category)
            return response

        await self._ensure_name_free(cleaned, exclude_id=category.id)

        old_name = category.name
        category.name = cleaned
        await self._flush_unique()

        linked = await self.db.execute(
            select(Product).where(
                or_(
                    Product.category_id == category.id,
                    and_(Product.category_id.is_(None), Product.category == old_name),
                )
            )
        )
        for product in linked.scalars().all():
            product.category = cleaned
            product.category_id = category.id
        await self.db.flush()
        await self.db.refresh(category)

        logger.info(
            "Category renamed",
            category_id=category.id,
            old_name=old_name,
            new_name=cleaned,
        )
        response = CategoryResponse.model_validate(category)
        response.product_count = await self.product_count(category)
        return response

    async def delete(self, category_id: str) -> None:
        """Delete an unreferenced category.

        Raises:
            NotFoundError: If the category does not exist
            ConflictError: If any product still references it
        """
        category = await self.get(category_id)
        count = await self.product_count(category)
        if count > 0:
            logger.warning(
                "Category delete blocked",
                category_id=category.id,
                product_count=count,
            )
            raise ConflictError(
                f"Cannot delete: {count} product(s) still belong to this category. "
                "Reassign them first.",
                detail={"productCount": count},
            )

        await self.db.delete(category)
        await self.db.flush()
        logger.info("Category deleted", category_id=category_id, name=category.name)

    async def _ensure_name_free(self, name: str, exclude_id: str | None = None) -> None:
        stmt = select(Category.id).where(Category.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        if (await self.db.execute(stmt)).first() is not None:
            raise ConflictError(DUPLICATE_NAME_MESSAGE, detail={"name": name})

    async def _flush_unique(self) -> None:
        # Concurrent writers can still race past _ensure_name_free
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(DUPLICATE_NAME_MESSAGE) from e


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Category name is required")
    return cleaned
