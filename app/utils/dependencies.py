"""
FastAPI dependency injection utilities.
Provides service instances bound to the request's database session.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.services.listing import ListingService


async def get_listing_service(db: AsyncSession = Depends(get_db)) -> ListingService:
    """
    Get listing service instance.

    Args:
        db: Database session

    Returns:
        ListingService instance
    """
    return ListingService(db)
