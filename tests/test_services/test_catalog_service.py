"""Tests for CatalogService."""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.config import settings
from showroom.core.errors import NotFoundError, ValidationError
from showroom.infra.storage import StorageClient
from showroom.schemas.product import ProductCreate, ProductUpdate
from showroom.services import catalog_service
from showroom.services.catalog_service import CatalogService, select_main_image

BENCH_SLUG = "minimalist-gold-leg-bench-vwf22a1091lx-9c"


class TestSelectMainImage:
    """Tests for select_main_image."""

    def test_flagged_image_wins(self):
        images = [
            {"url": "first.jpg", "isMain": False, "displayOrder": 1},
            {"url": "main.jpg", "isMain": True, "displayOrder": 5},
        ]
        assert select_main_image(images, "placeholder.jpg") == "main.jpg"

    def test_falls_back_to_lowest_display_order(self):
        images = [
            {"url": "b.jpg", "isMain": False, "displayOrder": 3},
            {"url": "a.jpg", "isMain": False, "displayOrder": 2},
        ]
        assert select_main_image(images, "placeholder.jpg") == "a.jpg"

    @pytest.mark.parametrize("images", [None, [], [{"isMain": True}]])
    def test_placeholder(self, images):
        assert select_main_image(images, "placeholder.jpg") == "placeholder.jpg"


class TestPublicReads:
    """Tests for list_active, resolve and view."""

    @pytest.mark.asyncio
    async def test_list_active_newest_first_and_hides_inactive(
        self, db_session: AsyncSession, make_product
    ):
        old = await make_product(item_no="OLD-1", created_at=datetime(2024, 1, 1))
        new = await make_product(item_no="NEW-1", created_at=datetime(2024, 6, 1))
        await make_product(item_no="OFF-1", is_active=False)

        products = await CatalogService(db_session).list_active()

        assert [p.id for p in products] == [new.id, old.id]

    @pytest.mark.asyncio
    async def test_list_active_filters(self, db_session: AsyncSession, make_product):
        bench = await make_product(item_no="B-1", category="Benches")
        ottoman = await make_product(
            item_no="O-1",
            name_en="Storage Ottoman",
            name_vi="Ghế đôn lưu trữ",
            category="Ottomans",
        )
        service = CatalogService(db_session)

        assert [p.id for p in await service.list_active(category="Ottomans")] == [ottoman.id]
        assert [p.id for p in await service.list_active(q="ĐÔN")] == [ottoman.id]
        assert [p.id for p in await service.list_active(q="b-1")] == [bench.id]
        assert await service.list_active(q="sofa") == []

    @pytest.mark.asyncio
    async def test_resolve_oldest_wins_on_collision(self, db_session: AsyncSession, make_product):
        older = await make_product(created_at=datetime(2024, 1, 1))
        await make_product(created_at=datetime(2024, 2, 1))

        product = await CatalogService(db_session).resolve(BENCH_SLUG)

        assert product.id == older.id

    @pytest.mark.asyncio
    async def test_resolve_ignores_inactive(self, db_session: AsyncSession, make_product):
        await make_product(is_active=False)

        assert await CatalogService(db_session).resolve(BENCH_SLUG) is None

    @pytest.mark.asyncio
    async def test_resolve_empty_catalog(self, db_session: AsyncSession):
        assert await CatalogService(db_session).resolve("anything") is None

    @pytest.mark.asyncio
    async def test_get_by_slug_not_found(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await CatalogService(db_session).get_by_slug("missing-x1")

    @pytest.mark.asyncio
    async def test_view_vietnamese(self, db_session: AsyncSession, make_product):
        await make_product(
            description={"en": ["Solid oak"], "vi": ["Gỗ sồi nguyên khối"]},
            material={"khung": {"en": "Oak", "vi": "Sồi"}},
            set_components=[{"en": "Bench", "vi": "Ghế"}, {"en": "Cushion", "vi": "Đệm"}],
            images=[
                {"url": "view-2.jpg", "isMain": False, "displayOrder": 2},
                {"url": "main.jpg", "isMain": True, "displayOrder": 1},
            ],
            moq=50,
        )

        view = await CatalogService(db_session).view(BENCH_SLUG, "vi")

        assert view.language == "vi"
        assert view.name == "Ghế băng chân vàng tối giản"
        assert view.description == ["Gỗ sồi nguyên khối"]
        assert view.main_image == "main.jpg"
        assert view.images == ["main.jpg", "view-2.jpg"]
        assert view.specifications["material"] == [{"label": "Khung", "value": "Sồi"}]
        assert view.specifications["setComponents"] == "Ghế, Đệm"
        assert "dimensions" not in view.specifications
        assert view.moq == 50

    @pytest.mark.asyncio
    async def test_view_placeholder_without_images(self, db_session: AsyncSession, make_product):
        await make_product()

        view = await CatalogService(db_session).view(BENCH_SLUG, "en")

        assert view.main_image == settings.placeholder_image_url
        assert view.images == []

    @pytest.mark.asyncio
    async def test_public_categories(self, db_session: AsyncSession, make_product):
        await make_product(item_no="1", category="Tables")
        await make_product(item_no="2", category="Benches")
        await make_product(item_no="3", category="Benches")
        await make_product(item_no="4", category="Hidden", is_active=False)

        assert await CatalogService(db_session).list_public_categories() == ["Benches", "Tables"]


class TestAdminWrites:
    """Tests for create, update, deactivate and add_image."""

    @pytest.fixture
    def payload(self) -> ProductCreate:
        return ProductCreate(
            item_no="VWF24A2064CG-18",
            name={"en": "S/2 Storage Ottoman", "vi": "Bộ 2 ghế đôn"},
            category="Ottomans",
            dimensions={"dai": 40, "rong": 40, "cao": 42},
        )

    @pytest.mark.asyncio
    async def test_create(self, db_session: AsyncSession, payload: ProductCreate):
        product = await CatalogService(db_session).create(payload)

        assert product.id
        assert product.slug == "s-2-storage-ottoman-vwf24a2064cg-18"
        assert product.category == "Ottomans"
        assert product.category_id is None
        assert product.dimensions == {"dai": 40, "rong": 40, "cao": 42}
        assert product.is_active is True
        assert product.created_at is not None

    @pytest.mark.asyncio
    async def test_create_links_category_by_label(
        self, db_session: AsyncSession, payload: ProductCreate, category
    ):
        payload.category = category.name

        product = await CatalogService(db_session).create(payload)

        assert product.category_id == category.id

    @pytest.mark.asyncio
    async def test_create_with_category_id_copies_label(
        self, db_session: AsyncSession, payload: ProductCreate, category
    ):
        payload.category = None
        payload.category_id = category.id

        product = await CatalogService(db_session).create(payload)

        assert product.category == category.name
        assert product.category_id == category.id

    @pytest.mark.asyncio
    async def test_create_unknown_category_id(self, db_session: AsyncSession, payload: ProductCreate):
        payload.category_id = "does-not-exist"

        with pytest.raises(ValidationError):
            await CatalogService(db_session).create(payload)

    @pytest.mark.asyncio
    async def test_create_warns_on_slug_collision(
        self, db_session: AsyncSession, payload: ProductCreate, make_product
    ):
        existing = await make_product(item_no=payload.item_no, name_en=payload.name.en)

        with patch.object(catalog_service, "logger") as mock_logger:
            await CatalogService(db_session).create(payload)

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["colliding_ids"] == [existing.id]

    @pytest.mark.asyncio
    async def test_update_is_partial(self, db_session: AsyncSession, make_product):
        product = await make_product(moq=10, remark={"en": "Note", "vi": "Ghi chú"})

        updated = await CatalogService(db_session).update(
            product.id,
            ProductUpdate(name={"vi": "Tên mới"}, moq=20),
        )

        assert updated.name == {"en": "Minimalist Gold-Leg Bench", "vi": "Tên mới"}
        assert updated.moq == 20
        assert updated.remark == {"en": "Note", "vi": "Ghi chú"}
        assert updated.item_no == "VWF22A1091LX-9C"

    @pytest.mark.asyncio
    async def test_update_unknown(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await CatalogService(db_session).update("missing", ProductUpdate(moq=1))

    @pytest.mark.asyncio
    async def test_deactivate(self, db_session: AsyncSession, make_product):
        product = await make_product()
        service = CatalogService(db_session)

        await service.deactivate(product.id)

        assert product.is_active is False
        assert await service.list_active() == []
        assert [p.id for p in await service.list_all()] == [product.id]

    @pytest.mark.asyncio
    async def test_add_image_main_replaces_flag(
        self, db_session: AsyncSession, make_product, storage: StorageClient, tmp_path: Path
    ):
        product = await make_product(
            images=[{"url": "old-main.jpg", "isMain": True, "displayOrder": 1}],
        )
        service = CatalogService(db_session, storage)

        updated = await service.add_image(product.id, b"jpeg-bytes", "image/jpeg", is_main=True)

        assert (tmp_path / "VWF22A1091LX-9C" / "main.jpg").read_bytes() == b"jpeg-bytes"
        mains = [image for image in updated.images if image["isMain"]]
        assert len(mains) == 1
        assert mains[0]["url"].endswith("VWF22A1091LX-9C/main.jpg")

    @pytest.mark.asyncio
    async def test_add_image_main_new_extension_removes_old_blob(
        self, db_session: AsyncSession, make_product, storage: StorageClient, tmp_path: Path
    ):
        product = await make_product(
            images=[{"url": "https://cdn.example/legacy.jpg", "isMain": False, "displayOrder": 2}],
        )
        service = CatalogService(db_session, storage)
        await service.add_image(product.id, b"png-bytes", "image/png", is_main=True)

        updated = await service.add_image(product.id, b"jpeg-bytes", "image/jpeg", is_main=True)

        folder = tmp_path / "VWF22A1091LX-9C"
        assert not (folder / "main.png").exists()
        assert (folder / "main.jpg").read_bytes() == b"jpeg-bytes"
        urls = [image["url"] for image in updated.images]
        assert urls == ["https://cdn.example/legacy.jpg", (folder / "main.jpg").as_posix()]

    @pytest.mark.asyncio
    async def test_add_image_view_numbering(
        self, db_session: AsyncSession, make_product, storage: StorageClient, tmp_path: Path
    ):
        product = await make_product(
            images=[{"url": "main.jpg", "isMain": True, "displayOrder": 1}],
        )

        updated = await CatalogService(db_session, storage).add_image(
            product.id, b"png-bytes", "image/png"
        )

        assert (tmp_path / "VWF22A1091LX-9C" / "view-2.png").exists()
        assert updated.images[-1]["displayOrder"] == 2
        assert updated.images[-1]["isMain"] is False

    @pytest.mark.asyncio
    async def test_add_image_rejects_content_type(
        self, db_session: AsyncSession, make_product, storage: StorageClient
    ):
        product = await make_product()

        with pytest.raises(ValidationError):
            await CatalogService(db_session, storage).add_image(product.id, b"gif", "image/gif")
