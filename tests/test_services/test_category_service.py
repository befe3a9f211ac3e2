"""Tests for CategoryService."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.core.errors import ConflictError, NotFoundError, ValidationError
from showroom.models import Category
from showroom.services.category_service import CategoryService


class TestCategoryService:
    """Tests for category CRUD and reference counting."""

    @pytest.mark.asyncio
    async def test_create_trims_name(self, db_session: AsyncSession):
        created = await CategoryService(db_session).create("  Sofas ")

        assert created.name == "Sofas"
        assert created.product_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_create_blank_name(self, db_session: AsyncSession, name):
        with pytest.raises(ValidationError, match="Category name is required"):
            await CategoryService(db_session).create(name)

    @pytest.mark.asyncio
    async def test_create_duplicate(self, db_session: AsyncSession, category: Category):
        with pytest.raises(ConflictError, match="already exists"):
            await CategoryService(db_session).create(category.name)

    @pytest.mark.asyncio
    async def test_list_counts_by_id_and_label(
        self, db_session: AsyncSession, category: Category, make_product
    ):
        await make_product(item_no="1", category=category.name, category_id=category.id)
        await make_product(item_no="2", category=category.name)
        await make_product(item_no="3", category="Tables")
        service = CategoryService(db_session)
        await service.create("Armchairs")

        listed = await service.list_all()

        assert [(c.name, c.product_count) for c in listed] == [("Armchairs", 0), ("Benches", 2)]

    @pytest.mark.asyncio
    async def test_rename_updates_linked_products(
        self, db_session: AsyncSession, category: Category, make_product
    ):
        product = await make_product(category=category.name, category_id=category.id)

        renamed = await CategoryService(db_session).rename(category.id, "Long Benches")

        assert renamed.name == "Long Benches"
        assert renamed.product_count == 1
        assert product.category == "Long Benches"

    @pytest.mark.asyncio
    async def test_rename_adopts_label_only_products(
        self, db_session: AsyncSession, category: Category, make_product
    ):
        product = await make_product(category=category.name, category_id=None)
        service = CategoryService(db_session)

        renamed = await service.rename(category.id, "Seating")

        assert renamed.product_count == 1
        assert product.category == "Seating"
        assert product.category_id == category.id
        with pytest.raises(ConflictError):
            await service.delete(category.id)

    @pytest.mark.asyncio
    async def test_rename_unknown(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await CategoryService(db_session).rename("missing", "Anything")

    @pytest.mark.asyncio
    async def test_rename_to_existing_name(self, db_session: AsyncSession, category: Category):
        service = CategoryService(db_session)
        other = await service.create("Tables")

        with pytest.raises(ConflictError):
            await service.rename(other.id, category.name)

    @pytest.mark.asyncio
    async def test_delete_unreferenced(self, db_session: AsyncSession, category: Category):
        await CategoryService(db_session).delete(category.id)

        assert await db_session.get(Category, category.id) is None

    @pytest.mark.asyncio
    async def test_delete_blocked_while_referenced(
        self, db_session: AsyncSession, category: Category, make_product
    ):
        await make_product(item_no="1", category_id=category.id)
        await make_product(item_no="2", category=category.name)

        with pytest.raises(ConflictError) as exc_info:
            await CategoryService(db_session).delete(category.id)

        assert exc_info.value.detail == {"productCount": 2}
        assert "2 product(s)" in exc_info.value.message
        count = await db_session.execute(select(func.count(Category.id)))
        assert count.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_delete_unknown(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await CategoryService(db_session).delete("missing")
