"""
Repository layer for data access operations.
Provides database operations with proper error handling.
"""

from app.repositories.base import BaseRepository
from app.repositories.listing import ListingRepository, ListingSearchFilters

__all__ = [
    "BaseRepository",
    "ListingRepository",
    "ListingSearchFilters"
]
