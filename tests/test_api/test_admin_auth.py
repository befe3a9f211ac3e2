"""Tests for admin authentication endpoints."""

import pytest
from httpx import AsyncClient

from showroom.config import settings
from showroom.core.passwords import BcryptHash, parse_stored_hash
from showroom.core.session import read_session

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse"


class TestLogin:
    """Tests for POST /admin/auth/login."""

    @pytest.mark.asyncio
    async def test_login_sets_session_cookie(self, client: AsyncClient, admin):
        response = await client.post(
            "/admin/auth/login",
            json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "admin": {"id": admin.id, "username": ADMIN_USERNAME},
        }
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.session_cookie_name}=")
        assert "HttpOnly" in set_cookie

        session = read_session(response.cookies[settings.session_cookie_name])
        assert session is not None
        assert session.id == admin.id

    @pytest.mark.asyncio
    async def test_login_migrates_legacy_hash(self, client: AsyncClient, make_admin):
        account = await make_admin(legacy=True)

        response = await client.post(
            "/admin/auth/login",
            json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        assert isinstance(parse_stored_hash(account.password_hash), BcryptHash)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{}, {"username": ADMIN_USERNAME}, {"username": "", "password": ADMIN_PASSWORD}],
    )
    async def test_missing_credentials(self, client: AsyncClient, body):
        response = await client.post("/admin/auth/login", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Username and password are required"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [(ADMIN_USERNAME, "wrong"), ("ghost", ADMIN_PASSWORD)])
    async def test_invalid_credentials(self, client: AsyncClient, admin, username, password):
        response = await client.post(
            "/admin/auth/login",
            json={"username": username, "password": password},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"
        assert "set-cookie" not in response.headers


class TestSession:
    """Tests for session, logout and change-password."""

    @pytest.mark.asyncio
    async def test_session_authenticated(self, admin_client: AsyncClient, admin):
        response = await admin_client.get("/admin/auth/session")

        assert response.status_code == 200
        assert response.json() == {
            "authenticated": True,
            "admin": {"id": admin.id, "username": admin.username},
        }

    @pytest.mark.asyncio
    async def test_session_without_cookie(self, client: AsyncClient):
        response = await client.get("/admin/auth/session")

        assert response.status_code == 401
        assert response.json() == {"authenticated": False, "admin": None}

    @pytest.mark.asyncio
    async def test_session_with_tampered_cookie(self, client: AsyncClient):
        client.cookies.set(settings.session_cookie_name, "forged.token")

        response = await client.get("/admin/auth/session")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, admin_client: AsyncClient):
        response = await admin_client.post("/admin/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f'{settings.session_cookie_name}=""') or set_cookie.startswith(
            f"{settings.session_cookie_name}=;"
        )
        assert "Max-Age=0" in set_cookie

    @pytest.mark.asyncio
    async def test_change_password(self, admin_client: AsyncClient, admin):
        response = await admin_client.post(
            "/admin/auth/change-password",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "new-secret"},
        )

        assert response.status_code == 200
        assert isinstance(parse_stored_hash(admin.password_hash), BcryptHash)

        login = await admin_client.post(
            "/admin/auth/login",
            json={"username": ADMIN_USERNAME, "password": "new-secret"},
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_change_password_too_short(self, admin_client: AsyncClient):
        response = await admin_client.post(
            "/admin/auth/change-password",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "short"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "New password must be at least 6 characters"

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(self, admin_client: AsyncClient):
        response = await admin_client.post(
            "/admin/auth/change-password",
            json={"currentPassword": "wrong", "newPassword": "new-secret"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Current password is incorrect"

    @pytest.mark.asyncio
    async def test_change_password_requires_session(self, client: AsyncClient):
        response = await client.post(
            "/admin/auth/change-password",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "new-secret"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"
