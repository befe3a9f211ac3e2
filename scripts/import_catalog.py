#!/usr/bin/env python
"""Load products from a JSON file.

The file holds a list of products in the admin API's camelCase shape:

    [
      {
        "itemNo": "VWF22A1091LX-9C",
        "category": "Benches",
        "name": {"en": "Minimalist Gold-Leg Bench", "vi": "Ghế băng chân vàng"},
        "dimensions": {"dai": 120, "rong": 40, "cao": 45},
        "images": [{"url": "https://...", "isMain": true, "displayOrder": 1}]
      }
    ]

Products whose item number already exists are skipped.

Usage:
    python scripts/import_catalog.py catalog.json
    python scripts/import_catalog.py catalog.json --dry-run
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select

from showroom.core.errors import ShowroomError
from showroom.infra.database import close_db_engine, create_tables, get_db_session
from showroom.infra.logging import get_logger, setup_logging
from showroom.models import Product
from showroom.schemas.product import ProductCreate
from showroom.services.catalog_service import CatalogService

setup_logging()
logger = get_logger(__name__)


def load_payloads(path: Path) -> list[ProductCreate]:
    """Read and validate every product in the file.

    Raises:
        ValueError: If the file is not a JSON list or an entry is invalid
    """
    raw: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("Catalog file must contain a JSON list of products")

    payloads = []
    for index, entry in enumerate(raw):
        try:
            payloads.append(ProductCreate.model_validate(entry))
        except PydanticValidationError as e:
            raise ValueError(f"Entry {index} is invalid: {e}") from e
    return payloads


async def import_products(payloads: list[ProductCreate]) -> tuple[int, int]:
    """Create products that are not in the catalog yet.

    Returns:
        (created, skipped) counts
    """
    created = skipped = 0

    async with get_db_session() as session:
        existing = set((await session.execute(select(Product.item_no))).scalars().all())
        service = CatalogService(session)

        for payload in payloads:
            if payload.item_no in existing:
                logger.info("Skipping existing product", item_no=payload.item_no)
                skipped += 1
                continue
            try:
                await service.create(payload)
            except ShowroomError as e:
                logger.error("Import failed", item_no=payload.item_no, error=e.message)
                raise
            existing.add(payload.item_no)
            created += 1

    return created, skipped


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Import products from a JSON file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("path", type=Path, help="JSON file with a list of products")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the file without writing to the database",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before importing",
    )

    return parser.parse_args()


async def main() -> int:
    """Main entry point."""
    args = parse_args()

    try:
        payloads = load_payloads(args.path)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Validated {len(payloads)} products from {args.path}")
    if args.dry_run:
        return 0

    try:
        if args.create_tables:
            await create_tables()
        created, skipped = await import_products(payloads)
    except ShowroomError as e:
        print(f"Import aborted: {e.message}")
        return 1
    finally:
        await close_db_engine()

    print(f"Created: {created}")
    print(f"Skipped (already present): {skipped}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
