"""
Service layer for business logic implementation.
Contains services for listing management and error handling.
"""

from .listing import ListingService
from .error_handler import ErrorHandlerService

__all__ = [
    "ListingService",
    "ErrorHandlerService"
]
