"""Admin authentication schemas.

Credential fields default to empty strings so that missing values are
reported by the service with a specific message.
"""

from pydantic import Field

from showroom.schemas.common import CamelModel


class AdminIdentity(CamelModel):
    """Public part of an admin account."""

    id: str
    username: str


class LoginRequest(CamelModel):
    username: str = Field(default="", max_length=100)
    password: str = Field(default="", max_length=200)


class LoginResponse(CamelModel):
    success: bool = True
    admin: AdminIdentity


class SessionResponse(CamelModel):
    authenticated: bool
    admin: AdminIdentity | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(default="", max_length=200)
    new_password: str = Field(default="", max_length=200)
