"""
Utility modules for the UAE Listings API.
"""

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    BadRequestError,
    ServiceUnavailableError,
    ListingNotFoundError,
    InvalidListingIdError,
    PublicationStatusConflictError,
)
from .validators import ValidationUtils, handle_pydantic_validation_error

__all__ = [
    "APIException",
    "ValidationError",
    "NotFoundError",
    "BadRequestError",
    "ServiceUnavailableError",
    "ListingNotFoundError",
    "InvalidListingIdError",
    "PublicationStatusConflictError",
    "ValidationUtils",
    "handle_pydantic_validation_error",
]
