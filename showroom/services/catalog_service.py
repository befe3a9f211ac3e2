"""Catalog Service - product reads and admin writes.

Public reads only ever see active products. Admin writes keep the
``category`` label and the optional ``category_id`` reference in step:
when a reference is supplied the label is copied from the category.
"""

from collections.abc import Sequence
from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.config import settings
from showroom.core.errors import NotFoundError, ValidationError
from showroom.core.slug import find_slug_collisions, resolve_slug
from showroom.core.specs import Language, localized_lines, localized_text, render_spec
from showroom.infra.logging import get_logger
from showroom.infra.storage import StorageClient, StoragePathError
from showroom.models import Category, Product
from showroom.schemas.product import ProductCreate, ProductUpdate, ProductView

logger = get_logger(__name__)

# Fields rendered per language in the localized view
VIEW_SPEC_FIELDS = ("dimensions", "material", "set_components", "packing_size", "packaging_type")

# Copied verbatim from the payload on create/update
_PLAIN_FIELDS = (
    "item_no",
    "description",
    "material",
    "dimensions",
    "set_components",
    "packing_size",
    "packaging_type",
    "remark",
    "prices",
    "moq",
    "inner_pack",
    "container_capacity",
    "carton_cbm",
)


def ordered_images(images: Sequence[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Images with a URL, sorted by displayOrder."""
    return sorted(
        (image for image in images or [] if image.get("url")),
        key=lambda image: image.get("displayOrder", 0),
    )


def select_main_image(images: Sequence[dict[str, Any]] | None, placeholder: str) -> str:
    """Pick the main image URL.

    The flagged image wins, then the first by displayOrder, then the
    placeholder. Never raises.
    """
    candidates = ordered_images(images)
    for image in candidates:
        if image.get("isMain"):
            return image["url"]
    if candidates:
        return candidates[0]["url"]
    return placeholder


class CatalogService:
    """Product catalog operations."""

    def __init__(
        self,
        db_session: AsyncSession,
        storage_client: StorageClient | None = None,
    ) -> None:
        """Initialize catalog service.

        Args:
            db_session: Async SQLAlchemy session
            storage_client: Image storage, required only by add_image
        """
        self.db = db_session
        self.storage = storage_client

    # =========================================================================
    # Public reads
    # =========================================================================

    async def list_active(
        self,
        category: str | None = None,
        q: str | None = None,
    ) -> list[Product]:
        """List active products, newest first.

        Args:
            category: Only products with this category label
            q: Case-insensitive match on English name, Vietnamese name or item number
        """
        stmt = select(Product).where(Product.is_active.is_(True))
        if category:
            stmt = stmt.where(Product.category == category)
        stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc())

        products = list((await self.db.execute(stmt)).scalars().all())

        if q and q.strip():
            needle = q.strip().casefold()
            products = [p for p in products if _matches(p, needle)]

        return products

    async def resolve(self, slug: str) -> Product | None:
        """Resolve a slug against the active catalog.

        Products are scanned oldest first, so the oldest product wins
        when two derive the same slug.
        """
        stmt = (
            select(Product)
            .where(Product.is_active.is_(True))
            .order_by(Product.created_at.asc(), Product.id.asc())
        )
        products = (await self.db.execute(stmt)).scalars().all()
        return resolve_slug(products, slug)

    async def get_by_slug(self, slug: str) -> Product:
        """Resolve a slug or fail with 404."""
        product = await self.resolve(slug)
        if product is None:
            raise NotFoundError("Product not found", detail={"slug": slug})
        return product

    async def view(self, slug: str, lang: Language) -> ProductView:
        """Project a product onto a single language."""
        product = await self.get_by_slug(slug)

        specifications: dict[str, Any] = {}
        for field in VIEW_SPEC_FIELDS:
            value = getattr(product, field)
            if value is not None:
                specifications[to_camel(field)] = render_spec(value, lang)

        return ProductView(
            id=product.id,
            slug=product.slug,
            language=lang,
            item_no=product.item_no,
            category=product.category,
            name=localized_text(product.name, lang),
            description=localized_lines(product.description, lang),
            main_image=select_main_image(product.images, settings.placeholder_image_url),
            images=[image["url"] for image in ordered_images(product.images)],
            specifications=specifications,
            prices=product.prices,
            moq=product.moq,
            inner_pack=product.inner_pack,
            container_capacity=product.container_capacity,
            carton_cbm=product.carton_cbm,
        )

    async def list_public_categories(self) -> list[str]:
        """Distinct category labels of active products, sorted."""
        stmt = (
            select(Product.category)
            .where(Product.is_active.is_(True))
            .distinct()
            .order_by(Product.category)
        )
        return list((await self.db.execute(stmt)).scalars().all())

    # =========================================================================
    # Admin
    # =========================================================================

    async def list_all(self) -> list[Product]:
        """List every product, including inactive ones, newest first."""
        stmt = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
        return list((await self.db.execute(stmt)).scalars().all())

    async def get(self, product_id: str) -> Product:
        """Get a product by id.

        Raises:
            NotFoundError: If no product has this id
        """
        product = await self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product not found", detail={"id": product_id})
        return product

    async def create(self, payload: ProductCreate) -> Product:
        """Create a product.

        Raises:
            ValidationError: If categoryId does not reference a category
        """
        label, category_id = await self._resolve_category(payload.category, payload.category_id)

        product = Product(
            category=label,
            category_id=category_id,
            name=payload.name.model_dump(),
            images=[image.model_dump(by_alias=True) for image in payload.images],
            is_active=payload.is_active,
        )
        for field in _PLAIN_FIELDS:
            setattr(product, field, getattr(payload, field))

        self.db.add(product)
        await self.db.flush()
        await self.db.refresh(product)

        logger.info(
            "Product created",
            product_id=product.id,
            item_no=product.item_no,
            category=product.category,
        )
        await self._warn_on_slug_collision(product)
        return product

    async def update(self, product_id: str, payload: ProductUpdate) -> Product:
        """Apply a partial update; fields not supplied keep their value.

        Raises:
            NotFoundError: If no product has this id
            ValidationError: If categoryId does not reference a category
        """
        product = await self.get(product_id)
        changes = payload.model_dump(exclude_unset=True)

        if payload.name is not None:
            merged = dict(product.name or {})
            merged.update(payload.name.model_dump(exclude_none=True))
            product.name = merged

        if payload.images is not None:
            product.images = [image.model_dump(by_alias=True) for image in payload.images]

        if payload.category_id or payload.category:
            product.category, product.category_id = await self._resolve_category(
                payload.category, payload.category_id
            )

        if payload.is_active is not None:
            product.is_active = payload.is_active

        for field in _PLAIN_FIELDS:
            if field not in changes:
                continue
            if field == "item_no" and payload.item_no is None:
                continue
            setattr(product, field, changes[field])

        await self.db.flush()
        await self.db.refresh(product)

        logger.info(
            "Product updated",
            product_id=product.id,
            fields=sorted(changes),
        )
        if "name" in changes or "item_no" in changes:
            await self._warn_on_slug_collision(product)
        return product

    async def deactivate(self, product_id: str) -> Product:
        """Hide a product from the public catalog."""
        product = await self.get(product_id)
        product.is_active = False
        await self.db.flush()
        await self.db.refresh(product)

        logger.info("Product deactivated", product_id=product.id, item_no=product.item_no)
        return product

    async def add_image(
        self,
        product_id: str,
        data: bytes,
        content_type: str,
        is_main: bool = False,
    ) -> Product:
        """Store an image and append it to the product.

        Stored as ``{itemNo}/main.{ext}`` or ``{itemNo}/view-{n}.{ext}``.
        A new main image takes the main flag from the previous one. An earlier
        stored main upload under another extension is dropped from the list
        and its blob deleted.

        Raises:
            NotFoundError: If no product has this id
            ValidationError: If the file is empty or not an accepted image type
        """
        if self.storage is None:
            raise RuntimeError("CatalogService.add_image requires a storage client")

        product = await self.get(product_id)
        if not data:
            raise ValidationError("Image file is empty")

        images = [dict(image) for image in product.images or []]
        if is_main:
            image_type = "main"
            display_order = 1
        else:
            display_order = max((image.get("displayOrder", 0) for image in images), default=1) + 1
            image_type = f"view-{display_order}"

        try:
            blob_path = self.storage.build_image_path(product.item_no, image_type, content_type)
        except StoragePathError as e:
            raise ValidationError(str(e), detail={"itemNo": product.item_no}) from e
        except ValueError as e:
            raise ValidationError(str(e), detail={"contentType": content_type}) from e

        url = await self.storage.upload_bytes(data, blob_path, content_type)

        superseded: list[str] = []
        if is_main:
            superseded = self._stored_main_paths(images, blob_path)
            for image in images:
                image["isMain"] = False
        images = [
            image
            for image in images
            if image.get("url") != url
            and self.storage.blob_path_for_url(image.get("url", "")) not in superseded
        ]
        images.append({"url": url, "isMain": is_main, "displayOrder": display_order})
        product.images = images

        await self.db.flush()
        await self.db.refresh(product)

        for stale_path in superseded:
            await self.storage.delete(stale_path)

        logger.info(
            "Product image added",
            product_id=product.id,
            blob_path=blob_path,
            is_main=is_main,
        )
        return product

    # =========================================================================
    # Helpers
    # =========================================================================

    def _stored_main_paths(self, images: list[dict], new_path: str) -> list[str]:
        """Blob paths of earlier main uploads that ``new_path`` replaces.

        A main image re-uploaded with another extension lands on a new path;
        the old ``main.<ext>`` blob would otherwise stay in the bucket.
        """
        main_prefix = new_path.rsplit(".", 1)[0] + "."
        paths = []
        for image in images:
            path = self.storage.blob_path_for_url(image.get("url", ""))
            if path and path != new_path and path.startswith(main_prefix):
                paths.append(path)
        return paths

    async def _resolve_category(
        self,
        label: str | None,
        category_id: str | None,
    ) -> tuple[str, str | None]:
        """Return the (label, category_id) pair to store."""
        if category_id:
            category = await self.db.get(Category, category_id)
            if category is None:
                raise ValidationError(
                    "Category not found",
                    detail={"categoryId": category_id},
                )
            return category.name, category.id

        result = await self.db.execute(select(Category).where(Category.name == label))
        category = result.scalar_one_or_none()
        return label or "", category.id if category else None

    async def _warn_on_slug_collision(self, product: Product) -> None:
        if not product.is_active:
            return
        stmt = select(Product).where(Product.is_active.is_(True), Product.id != product.id)
        others = (await self.db.execute(stmt)).scalars().all()
        collisions = find_slug_collisions(others, product.slug)
        if collisions:
            logger.warning(
                "Slug collision",
                slug=product.slug,
                product_id=product.id,
                colliding_ids=[other.id for other in collisions],
            )


def _matches(product: Product, needle: str) -> bool:
    name = product.name or {}
    haystacks = (str(name.get("en", "")), str(name.get("vi", "")), product.item_no)
    return any(needle in value.casefold() for value in haystacks)
