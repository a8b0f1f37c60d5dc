"""
Read-only view of a single listing.
"""

from typing import Any, Dict, Optional
import logging

from app.client.api import ListingsAPIClient, ListingsAPIError, ListingNotFound

logger = logging.getLogger(__name__)


class ListingViewer:
    """Fetches one listing once and renders it as text."""

    def __init__(self, client: ListingsAPIClient, listing_id: str):
        self.client = client
        self.listing_id = listing_id
        self.listing: Optional[Dict[str, Any]] = None
        self.not_found = False
        self.loaded = False

    async def load(self) -> Optional[Dict[str, Any]]:
        """
        Fetch the listing. Only the first call hits the API.

        Any failure leaves ``listing`` unset and ``not_found`` true.
        """
        if self.loaded:
            return self.listing

        try:
            self.listing = await self.client.get(self.listing_id)
        except ListingNotFound:
            logger.info(f"Listing {self.listing_id} not found")
            self.not_found = True
        except ListingsAPIError as e:
            if e.status_code == 400:
                logger.info(f"Invalid listing id {self.listing_id!r}")
            else:
                logger.error(f"Error fetching listing {self.listing_id}: {e}")
            self.not_found = True
        finally:
            self.loaded = True

        return self.listing

    def summary(self) -> str:
        if self.listing is None:
            return "Listing not found"

        listing = self.listing
        location = listing.get("location") or {}
        lines = [
            listing.get("title") or "(untitled)",
            _format_price(listing.get("price"), listing.get("currency") or "AED", listing.get("purpose")),
            " / ".join(str(v).capitalize() for v in (listing.get("propertyType"), listing.get("purpose")) if v),
        ]

        place = ", ".join(
            location[key] for key in ("buildingName", "community", "city", "emirate") if location.get(key)
        )
        if place:
            lines.append(place)

        lines.append(
            f"{listing.get('bedrooms', 0) or 0} bed | {listing.get('bathrooms', 0) or 0} bath | "
            f"{_format_number(listing.get('sizeSqFt'))} sq ft"
        )
        lines.append("Published" if listing.get("isPublished") else "Draft")
        return "\n".join(line for line in lines if line)


def _format_number(value: Any) -> str:
    if value is None:
        return "0"
    return f"{float(value):,.0f}"


def _format_price(price: Any, currency: str, purpose: Optional[str]) -> str:
    if price is None:
        return ""
    text = f"{currency} {_format_number(price)}"
    if purpose == "rent":
        text += " / year"
    return text
