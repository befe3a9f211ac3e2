#!/usr/bin/env python
"""Create or reset an admin account.

Admin accounts are never created through the API. This script writes one
directly, hashing the password with bcrypt (or, with ``--legacy``, with
the unsalted SHA-256 scheme used by the first revision, to exercise the
upgrade-on-login path).

Usage:
    # Create an admin (fails if the username exists)
    python scripts/seed_admin.py --username admin --password s3cret!

    # Reset the password of an existing admin
    python scripts/seed_admin.py --username admin --password n3w-pass --reset

    # Create tables first (local development)
    python scripts/seed_admin.py --username admin --password s3cret! --create-tables
"""

import argparse
import asyncio
import sys

from sqlalchemy import select

from showroom.core.passwords import hash_password, legacy_digest
from showroom.infra.database import close_db_engine, create_tables, get_db_session
from showroom.infra.logging import get_logger, setup_logging
from showroom.models import AdminAccount

setup_logging()
logger = get_logger(__name__)


async def seed_admin(username: str, password: str, reset: bool = False, legacy: bool = False) -> bool:
    """Create an admin, or reset its password when ``reset`` is set.

    Returns:
        True if the account was written
    """
    password_hash = legacy_digest(password) if legacy else hash_password(password)

    async with get_db_session() as session:
        result = await session.execute(
            select(AdminAccount).where(AdminAccount.username == username)
        )
        account = result.scalar_one_or_none()

        if account is not None and not reset:
            logger.error("Admin already exists", username=username)
            return False
        if account is None and reset:
            logger.error("Admin not found", username=username)
            return False

        if account is None:
            session.add(AdminAccount(username=username, password_hash=password_hash))
            logger.info("Admin created", username=username, legacy=legacy)
        else:
            account.password_hash = password_hash
            logger.info("Admin password reset", username=username, legacy=legacy)

    return True


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Create or reset a showroom admin account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--username", required=True, help="Admin username")
    parser.add_argument("--password", required=True, help="Admin password")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Reset the password of an existing admin",
    )
    parser.add_argument(
        "--legacy",
        action="store_true",
        help="Store an unsalted SHA-256 digest instead of bcrypt",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )

    return parser.parse_args()


async def main() -> int:
    """Main entry point."""
    args = parse_args()

    if len(args.password) < 6:
        print("Error: password must be at least 6 characters")
        return 1

    try:
        if args.create_tables:
            await create_tables()
        ok = await seed_admin(args.username, args.password, reset=args.reset, legacy=args.legacy)
    finally:
        await close_db_engine()

    if ok:
        print(f"Admin '{args.username}' {'reset' if args.reset else 'created'}")
        return 0
    print("Failed to write admin account (see logs)")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
