"""Shared fixtures.

Service and API tests run against an in-memory SQLite database; the app's
database, storage and mail dependencies are overridden per test.
"""

from collections.abc import Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from showroom.api.deps import get_db, get_mailer, get_storage
from showroom.config import settings
from showroom.core.passwords import hash_password, legacy_digest
from showroom.core.session import SessionPayload, issue_session
from showroom.infra.mailer import ConsoleMailTransport
from showroom.infra.storage import StorageClient
from showroom.main import app
from showroom.models import AdminAccount, Base, Category, Product

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse"

AdminFactory = Callable[..., Awaitable[AdminAccount]]
ProductFactory = Callable[..., Awaitable[Product]]


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the minimum bcrypt work factor."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncSession:
    factory = async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mailer() -> ConsoleMailTransport:
    return ConsoleMailTransport(sender="noreply@test.local")


@pytest.fixture
def storage(tmp_path: Path) -> StorageClient:
    return StorageClient(bucket_name="test-bucket", use_local=True, local_root=tmp_path)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    mailer: ConsoleMailTransport,
    storage: StorageClient,
) -> AsyncClient:
    """HTTP client bound to the app with test dependencies."""

    async def override_db():
        yield db_session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_storage] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_admin(db_session: AsyncSession) -> AdminFactory:
    """Factory creating admin accounts with a bcrypt or legacy hash."""

    async def _make(
        username: str = ADMIN_USERNAME,
        password: str = ADMIN_PASSWORD,
        legacy: bool = False,
    ) -> AdminAccount:
        password_hash = legacy_digest(password) if legacy else hash_password(password)
        account = AdminAccount(username=username, password_hash=password_hash)
        db_session.add(account)
        await db_session.flush()
        await db_session.refresh(account)
        return account

    return _make


@pytest_asyncio.fixture
async def admin(make_admin: AdminFactory) -> AdminAccount:
    return await make_admin()


@pytest_asyncio.fixture
async def admin_client(client: AsyncClient, admin: AdminAccount) -> AsyncClient:
    """Client carrying a valid session cookie for ``admin``."""
    token = issue_session(SessionPayload(id=admin.id, username=admin.username))
    client.cookies.set(settings.session_cookie_name, token)
    return client


@pytest.fixture
def make_product(db_session: AsyncSession) -> ProductFactory:
    """Factory inserting products directly, bypassing the service."""

    async def _make(
        item_no: str = "VWF22A1091LX-9C",
        name_en: str = "Minimalist Gold-Leg Bench",
        name_vi: str = "Ghế băng chân vàng tối giản",
        category: str = "Benches",
        category_id: str | None = None,
        is_active: bool = True,
        **fields,
    ) -> Product:
        product = Product(
            item_no=item_no,
            name={"en": name_en, "vi": name_vi},
            category=category,
            category_id=category_id,
            is_active=is_active,
            images=fields.pop("images", []),
            **fields,
        )
        db_session.add(product)
        await db_session.flush()
        await db_session.refresh(product)
        return product

    return _make


@pytest_asyncio.fixture
async def category(db_session: AsyncSession) -> Category:
    category = Category(name="Benches")
    db_session.add(category)
    await db_session.flush()
    await db_session.refresh(category)
    return category
