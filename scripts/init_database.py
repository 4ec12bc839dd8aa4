#!/usr/bin/env python3
"""
Initialize database tables.

Usage:
    python scripts/init_database.py              # Create tables
    python scripts/init_database.py --seed-demo  # Create tables and a demo partner chain

Production schemas are managed by alembic; this script is for local
SQLite databases and fresh environments.
"""

import argparse
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.database import create_engine, create_session_maker
from commission_engine.models import Base
from commission_engine.repositories.partner_repository import PartnerRepository
from commission_engine.repositories.partner_tier_repository import (
    PartnerTierRepository,
)
from commission_engine.repositories.tenant_repository import TenantRepository
from commission_engine.utils.db_decorators import with_auto_commit

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO", format="{time:HH:mm:ss} | {level} | {message}")

DEMO_TIERS = (
    # code, name, order, rate, max depth
    ("bronze", "Bronze", 1, Decimal("0.0500"), 2),
    ("silver", "Silver", 2, Decimal("0.1000"), 3),
    ("gold", "Gold", 3, Decimal("0.0800"), 1),
)


@with_auto_commit
async def seed_demo_data(session: AsyncSession) -> None:
    """Create a demo tenant with a three-partner chain S -> A -> B."""
    tenant_repo = TenantRepository(session)
    if await tenant_repo.get_by_slug("demo"):
        logger.info("Demo tenant already present, skipping seed")
        return

    tenant = await tenant_repo.create(slug="demo", name="Demo Tenant")

    tier_repo = PartnerTierRepository(session)
    tiers = {}
    for code, name, order, rate, depth in DEMO_TIERS:
        tiers[code] = await tier_repo.create(
            tenant_id=tenant.id,
            code=code,
            name=name,
            level_order=order,
            min_commission_rate=Decimal("0"),
            default_commission_rate=rate,
            max_commission_rate=Decimal("0.2500"),
            max_referral_depth=depth,
        )

    partner_repo = PartnerRepository(session)
    top = await partner_repo.create(
        tenant_id=tenant.id, code="B", tier_id=tiers["gold"].id
    )
    middle = await partner_repo.create(
        tenant_id=tenant.id, code="A", tier_id=tiers["silver"].id, sponsor_id=top.id
    )
    source = await partner_repo.create(
        tenant_id=tenant.id, code="S", tier_id=tiers["bronze"].id, sponsor_id=middle.id
    )

    logger.info(f"Demo tenant id: {tenant.id}")
    logger.info(f"Demo source partner S id: {source.id}")


async def init_database(seed_demo: bool = False) -> None:
    """Create all database tables."""
    logger.info("Connecting to database...")
    engine = create_engine(echo=False)

    try:
        async with engine.begin() as conn:
            logger.info("Creating tables (checkfirst=True)...")
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)

        if seed_demo:
            session_maker = create_session_maker(engine)
            async with session_maker() as session:
                await seed_demo_data(session)
    finally:
        await engine.dispose()

    logger.success("Database tables created successfully!")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create commission engine tables")
    parser.add_argument(
        "--seed-demo",
        action="store_true",
        help="Also create a demo tenant with a small partner chain",
    )
    args = parser.parse_args()
    asyncio.run(init_database(seed_demo=args.seed_demo))


if __name__ == "__main__":
    main()
