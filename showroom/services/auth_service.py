"""Auth Service - admin credential verification and password change.

Accounts still holding a legacy SHA-256 digest are upgraded to bcrypt
the first time the correct password is presented.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.config import settings
from showroom.core.errors import AuthorizationError, ValidationError
from showroom.core.passwords import (
    check_password,
    hash_password,
    needs_rehash,
    parse_stored_hash,
)
from showroom.infra.logging import get_logger
from showroom.models import AdminAccount

logger = get_logger(__name__)


class AuthService:
    """Admin credential operations."""

    def __init__(self, db_session: AsyncSession, bcrypt_rounds: int | None = None) -> None:
        """Initialize auth service.

        Args:
            db_session: Async SQLAlchemy session
            bcrypt_rounds: Work factor for new hashes (defaults to settings)
        """
        self.db = db_session
        self.bcrypt_rounds = bcrypt_rounds

    async def get_by_username(self, username: str) -> AdminAccount | None:
        result = await self.db.execute(
            select(AdminAccount).where(AdminAccount.username == username)
        )
        return result.scalar_one_or_none()

    async def verify(self, username: str, password: str) -> AdminAccount | None:
        """Verify credentials, upgrading a legacy hash on success.

        Unknown usernames and wrong passwords are indistinguishable to
        the caller.

        Args:
            username: Admin username
            password: Plain text password

        Returns:
            The account, or None when the credentials do not match
        """
        account = await self.get_by_username(username)
        if account is None:
            logger.info("Login rejected", reason="unknown_user")
            return None

        stored = parse_stored_hash(account.password_hash)
        if not check_password(password, stored):
            logger.info("Login rejected", reason="bad_password", admin_id=account.id)
            return None

        if needs_rehash(stored):
            await self._migrate_legacy_hash(account, password)

        return account

    async def change_password(
        self,
        username: str,
        current_password: str,
        new_password: str,
    ) -> AdminAccount:
        """Replace an admin's password with a bcrypt hash of the new one.

        Raises:
            ValidationError: If a field is missing or the new password is too short
            AuthorizationError: If the current password is wrong
        """
        if not current_password or not new_password:
            raise ValidationError("All fields are required")
        if len(new_password) < settings.password_min_length:
            raise ValidationError(
                f"New password must be at least {settings.password_min_length} characters"
            )

        account = await self.verify(username, current_password)
        if account is None:
            raise AuthorizationError("Current password is incorrect")

        try:
            account.password_hash = hash_password(new_password, self.bcrypt_rounds)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        await self.db.flush()

        logger.info("Admin password changed", admin_id=account.id)
        return account

    async def _migrate_legacy_hash(self, account: AdminAccount, password: str) -> None:
        try:
            account.password_hash = hash_password(password, self.bcrypt_rounds)
        except ValueError as e:
            # Password too long for bcrypt; keep the legacy digest
            logger.warning("Legacy hash not migrated", admin_id=account.id, error=str(e))
            return

        await self.db.flush()
        logger.info("Legacy password hash migrated to bcrypt", admin_id=account.id)
