"""
API route handlers for the UAE Listings API.
"""

from .listings import router as listings_router

__all__ = ["listings_router"]
