"""Admin authentication endpoints.

Login issues a signed ``admin_session`` cookie; every other admin route
requires it. Logout always succeeds and clears the cookie.
"""

from typing import Annotated

from fastapi import APIRouter, Cookie, Response, status
from fastapi.responses import JSONResponse

from showroom.api.deps import AdminSession, DbSession
from showroom.config import settings
from showroom.core.errors import AuthorizationError, ValidationError
from showroom.core.session import (
    SessionPayload,
    clear_session,
    issue_session,
    read_session,
    set_session_cookie,
)
from showroom.infra.logging import get_logger
from showroom.schemas.auth import (
    AdminIdentity,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    SessionResponse,
)
from showroom.schemas.common import SuccessResponse
from showroom.services.auth_service import AuthService

router = APIRouter()
logger = get_logger(__name__)


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, response: Response, db: DbSession) -> LoginResponse:
    """Verify credentials and start a session."""
    if not body.username or not body.password:
        raise ValidationError("Username and password are required")

    account = await AuthService(db).verify(body.username, body.password)
    if account is None:
        raise AuthorizationError("Invalid credentials")

    payload = SessionPayload(id=account.id, username=account.username)
    set_session_cookie(response, issue_session(payload))

    logger.info("Admin logged in", admin_id=account.id)
    return LoginResponse(admin=AdminIdentity(id=account.id, username=account.username))


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    """End the session."""
    clear_session(response)
    return SuccessResponse()


@router.get(
    "/session",
    response_model=SessionResponse,
    responses={status.HTTP_401_UNAUTHORIZED: {"model": SessionResponse}},
)
async def get_session(
    admin_session: Annotated[str | None, Cookie(alias=settings.session_cookie_name)] = None,
):
    """Report whether the caller holds a valid session."""
    session = read_session(admin_session)
    if session is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=SessionResponse(authenticated=False).model_dump(by_alias=True),
        )
    return SessionResponse(
        authenticated=True,
        admin=AdminIdentity(id=session.id, username=session.username),
    )


@router.post("/change-password", response_model=SuccessResponse)
async def change_password(
    body: ChangePasswordRequest,
    admin: AdminSession,
    db: DbSession,
) -> SuccessResponse:
    """Change the signed-in admin's password."""
    await AuthService(db).change_password(
        admin.username,
        body.current_password,
        body.new_password,
    )
    return SuccessResponse()
