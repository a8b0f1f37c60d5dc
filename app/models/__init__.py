"""
Database models for the UAE Listings API.
"""

from app.models.listing import (
    Listing,
    PropertyType,
    Purpose,
    ListingStatus,
    CompletionStatus,
    Ownership,
)

__all__ = [
    "Listing",
    "PropertyType",
    "Purpose",
    "ListingStatus",
    "CompletionStatus",
    "Ownership",
]
