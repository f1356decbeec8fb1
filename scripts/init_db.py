#!/usr/bin/env python3
"""
Database initialisation script.

Creates the users / campaigns tables and optionally seeds an admin account
plus a demo advertiser with a couple of campaigns.

Usage:
    python scripts/init_db.py [--drop-existing] [--seed] [--admin-email EMAIL --admin-password PASSWORD]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from admedia.common.config import get_settings
from admedia.common.database import db, create_tables, drop_tables
from admedia.common.logger import get_logger
from admedia.common.security import hash_password
from admedia.models import Campaign, CampaignStatus, CampaignType, User, UserRole

logger = get_logger(__name__)


async def ensure_admin(email: str, password: str) -> None:
    """Create the admin account unless it already exists."""
    async with db.session() as session:
        result = await session.execute(select(User).where(User.email == email.lower()))
        if result.scalar_one_or_none():
            logger.info("Admin already exists, skipping", email=email)
            return

        session.add(User(
            full_name="Administrator",
            company_name="AdMedia",
            email=email.lower(),
            password_hash=hash_password(password),
            role=UserRole.ADMIN.value,
        ))
    logger.info("Admin account created", email=email)


async def seed_data() -> None:
    """Seed a demo advertiser and campaigns for development."""
    async with db.session() as session:
        result = await session.execute(select(Campaign).limit(1))
        if result.scalar():
            logger.info("Data already exists, skipping seed")
            return

        advertiser = User(
            full_name="Demo Advertiser",
            company_name="Demo Brands",
            email="advertiser@example.com",
            password_hash=hash_password("advertiser123"),
            role=UserRole.ADVERTISER.value,
        )
        session.add(advertiser)
        await session.flush()

        campaigns = [
            ("Spring Sale", CampaignType.BANNER, CampaignStatus.ACTIVE, 1200, 84),
            ("New Collection", CampaignType.FEATURED, CampaignStatus.ACTIVE, 560, 21),
            ("Quiz Giveaway", CampaignType.INTERACTIVE, CampaignStatus.PAUSED, 90, 12),
        ]
        for name, campaign_type, status, impressions, clicks in campaigns:
            session.add(Campaign(
                advertiser_id=advertiser.id,
                campaign_name=name,
                campaign_description=f"{name} demo campaign",
                campaign_type=campaign_type.value,
                headline=name,
                body=f"Don't miss the {name.lower()}.",
                call_to_action="Shop now",
                image_url="https://res.cloudinary.com/demo/image/upload/sample.jpg",
                status=status.value,
                impressions=impressions,
                clicks=clicks,
            ))

    logger.info("Database seeding completed", campaigns=len(campaigns))


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Initialize AdMedia database")
    parser.add_argument(
        "--drop-existing",
        action="store_true",
        help="Drop existing tables before creating",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed demo advertiser and campaigns",
    )
    parser.add_argument("--admin-email", help="Create an admin account with this email")
    parser.add_argument("--admin-password", help="Password for the admin account")

    args = parser.parse_args()
    if bool(args.admin_email) != bool(args.admin_password):
        parser.error("--admin-email and --admin-password must be given together")

    settings = get_settings()
    logger.info("Initializing database", host=settings.database.host, port=settings.database.port)

    await db.init()
    try:
        if args.drop_existing:
            logger.warning("Dropping existing tables...")
            await drop_tables()
        await create_tables()

        if args.admin_email:
            await ensure_admin(args.admin_email, args.admin_password)
        if args.seed:
            await seed_data()
    finally:
        await db.close()

    logger.info("Database initialization complete!")


if __name__ == "__main__":
    asyncio.run(main())
