"""
Pydantic schemas for request/response validation.
"""

# Listing schemas
from .listing import (
    Coordinates,
    Location,
    PaymentPlan,
    AgentContact,
    ListingBase,
    ListingWrite,
    ListingCreate,
    ListingUpdate,
    ListingResponse,
    DeleteResponse,
    PublishedListing,
)

# Error schemas
from .error import (
    ErrorDetail,
    ErrorResponse,
    APIErrorResponse,
)

__all__ = [
    # Listing
    "Coordinates",
    "Location",
    "PaymentPlan",
    "AgentContact",
    "ListingBase",
    "ListingWrite",
    "ListingCreate",
    "ListingUpdate",
    "ListingResponse",
    "DeleteResponse",
    "PublishedListing",

    # Error
    "ErrorDetail",
    "ErrorResponse",
    "APIErrorResponse",
]
