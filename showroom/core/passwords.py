"""Admin password hashing.

Stored hashes come in two schemes:

- legacy: unsalted SHA-256 hex digest (64 chars), from the first revision
- bcrypt: adaptive salted hash, self-describing ``$2b$<rounds>$...`` string

New hashes are always bcrypt. Legacy hashes are upgraded after a
successful login (see ``showroom.services.auth_service``).
"""

import hashlib
import hmac
from dataclasses import dataclass

import bcrypt

from showroom.config import settings

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")

# bcrypt only looks at the first 72 bytes; longer inputs are rejected
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class LegacyHash:
    """Unsalted SHA-256 hex digest."""

    digest: str


@dataclass(frozen=True)
class BcryptHash:
    """bcrypt hash string."""

    value: str


StoredHash = LegacyHash | BcryptHash


def parse_stored_hash(stored: str) -> StoredHash:
    """Classify a stored hash string by its prefix."""
    if stored.startswith(BCRYPT_PREFIXES):
        return BcryptHash(stored)
    return LegacyHash(stored)


def legacy_digest(password: str) -> str:
    """SHA-256 hex digest used by the legacy scheme."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plain text password
        rounds: Work factor, defaults to settings.bcrypt_rounds

    Raises:
        ValueError: If the password is longer than 72 bytes
    """
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def check_password(password: str, stored: StoredHash) -> bool:
    """Check a password against a parsed stored hash."""
    match stored:
        case BcryptHash():
            try:
                return bcrypt.checkpw(password.encode("utf-8"), stored.value.encode("utf-8"))
            except ValueError:
                # Malformed hash, or a password bcrypt refuses
                return False
        case LegacyHash():
            return hmac.compare_digest(
                legacy_digest(password).encode("utf-8"),
                stored.digest.encode("utf-8"),
            )
    return False


def needs_rehash(stored: StoredHash) -> bool:
    """True when the stored hash should be replaced with bcrypt."""
    return isinstance(stored, LegacyHash)
