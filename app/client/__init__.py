"""
Client-side components talking to the listings API over HTTP.
"""

from .api import ListingsAPIClient, ListingsAPIError, ListingNotFound
from .form import ListingFormController, FormState, ListingLockedError, default_draft
from .browser import ListingBrowser, ListingFilters
from .viewer import ListingViewer

__all__ = [
    "ListingsAPIClient",
    "ListingsAPIError",
    "ListingNotFound",
    "ListingFormController",
    "FormState",
    "ListingLockedError",
    "default_draft",
    "ListingBrowser",
    "ListingFilters",
    "ListingViewer",
]
