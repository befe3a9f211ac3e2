"""Admin session cookies.

The session is not stored server-side. ``{id, username, exp}`` is
serialized to JSON, base64url-encoded and signed with HMAC-SHA256 using
``settings.session_secret``:

    <base64url(payload)>.<base64url(signature)>

A token that fails to decode, fails the signature check, lacks ``id`` or
``username``, or is past ``exp`` reads as "no session".
"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from typing import Any

from starlette.responses import Response

from showroom.config import settings
from showroom.core.errors import AuthorizationError


@dataclass(frozen=True)
class SessionPayload:
    """Authenticated admin identity carried by the cookie."""

    id: str
    username: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "username": self.username}


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _sign(data: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), data, hashlib.sha256).digest()


def issue_session(
    admin: SessionPayload,
    *,
    secret: str | None = None,
    max_age: int | None = None,
    now: float | None = None,
) -> str:
    """Create a signed session token for an authenticated admin."""
    issued_at = int(now if now is not None else time.time())
    lifetime = max_age if max_age is not None else settings.session_max_age_seconds
    payload = {
        "id": admin.id,
        "username": admin.username,
        "exp": issued_at + lifetime,
    }
    data = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    signature = _sign(data, secret or settings.session_secret)
    return f"{_b64encode(data)}.{_b64encode(signature)}"


def read_session(
    token: str | None,
    *,
    secret: str | None = None,
    now: float | None = None,
) -> SessionPayload | None:
    """Decode and verify a session token.

    Returns:
        SessionPayload, or None for any invalid, tampered or expired token
    """
    if not token:
        return None

    try:
        data_b64, signature_b64 = token.split(".")
        data = _b64decode(data_b64)
        signature = _b64decode(signature_b64)
    except (ValueError, binascii.Error):
        return None

    expected = _sign(data, secret or settings.session_secret)
    if not hmac.compare_digest(signature, expected):
        return None

    try:
        payload: Any = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None

    if not isinstance(payload, dict):
        return None

    admin_id = payload.get("id")
    username = payload.get("username")
    expires_at = payload.get("exp")
    if not admin_id or not isinstance(username, str) or not username:
        return None
    if not isinstance(expires_at, (int, float)):
        return None
    if (now if now is not None else time.time()) >= expires_at:
        return None

    return SessionPayload(id=str(admin_id), username=username)


def require_session(token: str | None) -> SessionPayload:
    """Read a session or fail with an authorization error."""
    session = read_session(token)
    if session is None:
        raise AuthorizationError("Unauthorized")
    return session


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session cookie to a response."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        secure=settings.environment != "dev",
        samesite="lax",
    )


def clear_session(response: Response) -> None:
    """Overwrite the session cookie with an empty, already-expired value."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.environment != "dev",
        samesite="lax",
    )
