#!/usr/bin/env python3
"""
Database management script.
Creates, drops, seeds and resets the listings schema.
"""

import asyncio
import sys
import argparse
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.config import settings
from app.database import engine, Base
from app.repositories.listing import ListingRepository
from app.schemas.listing import ListingCreate
from app.services.listing import ListingService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


SEED_LISTINGS: List[Dict[str, Any]] = [
    {
        "title": "Luxury 2BR Apartment with Marina View",
        "description": "A premium 2-bedroom apartment located in Dubai Marina with full sea views.",
        "price": 1850000,
        "currency": "AED",
        "propertyType": "apartment",
        "purpose": "sale",
        "sizeSqFt": 1240,
        "bedrooms": 2,
        "bathrooms": 3,
        "parkingSpots": 1,
        "location": {
            "emirate": "Dubai",
            "city": "Dubai Marina",
            "community": "Marina Gate",
            "coordinates": {"lat": 25.0805, "lng": 55.1403}
        },
        "amenities": ["Pool", "Gym", "Concierge"],
        "completionStatus": "ready",
        "ownership": "freehold",
        "status": "published",
        "isPublished": True,
        "agent": {"name": "Sara Khan", "phone": "+971501234567", "email": "sara@example.com"}
    },
    {
        "title": "Townhouse near Yas Mall",
        "description": "Three bedroom end-unit townhouse, family community, yearly rent.",
        "price": 185000,
        "currency": "AED",
        "propertyType": "townhouse",
        "purpose": "rent",
        "sizeSqFt": 2300,
        "bedrooms": 3,
        "bathrooms": 4,
        "location": {"emirate": "Abu Dhabi", "city": "Yas Island", "community": "Yas Acres"},
        "status": "draft",
        "isPublished": False
    },
    {
        "title": "Off-plan Villa, Palm Jebel Ali",
        "description": "Beachfront villa with a 60/40 payment plan, handover 2027.",
        "price": 18500000,
        "currency": "AED",
        "propertyType": "villa",
        "purpose": "sale",
        "sizeSqFt": 7400,
        "bedrooms": 5,
        "bathrooms": 6,
        "location": {"emirate": "Dubai", "city": "Palm Jebel Ali"},
        "developer": "Nakheel",
        "completionStatus": "off-plan",
        "paymentPlan": {"available": True},
        "status": "draft",
        "isPublished": False
    },
]


class MigrationManager:
    """Manages the listings schema and sample data."""

    def __init__(self, db_engine: Optional[AsyncEngine] = None):
        self.engine = db_engine or engine
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema created")

    async def drop_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Schema dropped")

    async def seed_database(self) -> int:
        """
        Insert the sample listings into an empty table.

        Returns:
            Number of listings inserted
        """
        async with self.session_factory() as session:
            if await ListingRepository(session).count() > 0:
                logger.info("Listings already present, skipping seed")
                return 0

            service = ListingService(session)
            for payload in SEED_LISTINGS:
                await service.create_listing(ListingCreate.model_validate(payload))

        logger.info(f"Database seeded with {len(SEED_LISTINGS)} listings")
        return len(SEED_LISTINGS)

    async def reset_database(self) -> None:
        """Drop and recreate the schema, then seed it."""
        logger.warning("Resetting database - all data will be lost!")
        await self.drop_schema()
        await self.create_schema()
        await self.seed_database()


def main():
    """Main CLI interface."""
    parser = argparse.ArgumentParser(description="Listings database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create tables")
    subparsers.add_parser("drop", help="Drop tables")
    subparsers.add_parser("seed", help="Seed database with sample listings")

    reset_parser = subparsers.add_parser("reset", help="Reset database (drop, create, seed)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    manager = MigrationManager()
    logger.info(f"Using database {settings.database_url.split('@')[-1]}")

    async def run(coro):
        try:
            await coro
        finally:
            await manager.engine.dispose()

    try:
        if args.command == "create":
            asyncio.run(run(manager.create_schema()))
        elif args.command == "drop":
            asyncio.run(run(manager.drop_schema()))
        elif args.command == "seed":
            asyncio.run(run(manager.seed_database()))
        elif args.command == "reset":
            if not args.confirm:
                logger.error("Database reset requires --confirm flag")
                sys.exit(1)
            asyncio.run(run(manager.reset_database()))
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
