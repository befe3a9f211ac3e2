"""FastAPI dependencies for dependency injection.

Provides:
- Database session (committed when the request succeeds)
- Storage client and mail transport
- Admin session check
"""

from typing import Annotated, AsyncGenerator

from fastapi import Cookie, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.config import settings
from showroom.core.session import SessionPayload, require_session
from showroom.infra.database import get_db_session
from showroom.infra.logging import get_logger
from showroom.infra.mailer import MailTransport
from showroom.infra.storage import StorageClient, get_storage_client

logger = get_logger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for the request.

    Yields:
        AsyncSession, committed after the handler returns
    """
    async with get_db_session() as session:
        yield session


async def get_storage() -> StorageClient:
    """Get storage client dependency."""
    return get_storage_client()


async def get_mailer(request: Request) -> MailTransport:
    """Get the mail transport created at startup."""
    return request.app.state.mailer


async def require_admin(
    admin_session: Annotated[str | None, Cookie(alias=settings.session_cookie_name)] = None,
) -> SessionPayload:
    """Require a valid admin session cookie.

    Raises:
        AuthorizationError: 401 if the cookie is missing, tampered or expired
    """
    return require_session(admin_session)


# Type aliases for cleaner annotations
DbSession = Annotated[AsyncSession, Depends(get_db)]
Storage = Annotated[StorageClient, Depends(get_storage)]
Mailer = Annotated[MailTransport, Depends(get_mailer)]
AdminSession = Annotated[SessionPayload, Depends(require_admin)]
