"""
Listing browser: filter criteria plus the matching result list.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
import logging

from app.client.api import ListingsAPIClient, ListingsAPIError

logger = logging.getLogger(__name__)


class ListingFilters(BaseModel):
    """Browse criteria; unset or blank criteria are not sent."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid"
    )

    emirate: Optional[str] = None
    city: Optional[str] = None
    community: Optional[str] = None
    property_type: Optional[str] = None
    purpose: Optional[str] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    is_published: Optional[bool] = None

    @field_validator("emirate", "city", "community", "property_type", "purpose", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("bedrooms", "bathrooms", "min_price", "max_price", "is_published", mode="before")
    @classmethod
    def empty_string_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_params(self) -> Dict[str, str]:
        """Query parameters for ``GET /api/listings``."""
        params = {}
        for key, value in self.model_dump(by_alias=True, exclude_none=True).items():
            if isinstance(value, bool):
                params[key] = "true" if value else "false"
            elif isinstance(value, float) and value.is_integer():
                params[key] = str(int(value))
            else:
                params[key] = str(value)
        return params

    @property
    def is_empty(self) -> bool:
        return not self.to_params()


class ListingBrowser:
    """Fetches listings for the current criteria and keeps the last result."""

    def __init__(self, client: ListingsAPIClient):
        self.client = client
        self.filters = ListingFilters()
        self.listings: List[Dict[str, Any]] = []
        self.loading = False
        self.last_error: Optional[ListingsAPIError] = None

    @property
    def has_active_filters(self) -> bool:
        return not self.filters.is_empty

    def set_filter(self, name: str, value: Any) -> None:
        """
        Change one criterion without fetching.

        ``name`` may be the attribute name or the camelCase query name.
        """
        field_name = name if name in ListingFilters.model_fields else _field_for_alias(name)
        setattr(self.filters, field_name, value)

    async def apply(self) -> List[Dict[str, Any]]:
        """
        Fetch listings matching the current criteria.

        On failure the error is logged and the previous results are kept.
        """
        params = self.filters.to_params()
        self.loading = True
        try:
            self.listings = await self.client.list(params)
            self.last_error = None
            logger.debug(f"Fetched {len(self.listings)} listings with filters {params}")
        except ListingsAPIError as e:
            logger.error(f"Error fetching listings: {e}")
            self.last_error = e
        finally:
            self.loading = False
        return self.listings

    async def reset(self) -> List[Dict[str, Any]]:
        """Clear every criterion, then fetch with none."""
        self.filters = ListingFilters()
        return await self.apply()

    async def delete(self, listing_id: str) -> None:
        """Delete a listing and drop it from the current results."""
        await self.client.delete(listing_id)
        self.listings = [item for item in self.listings if item.get("_id") != listing_id]
        logger.info(f"Deleted listing {listing_id}")


def _field_for_alias(alias: str) -> str:
    for field_name, info in ListingFilters.model_fields.items():
        if info.alias == alias:
            return field_name
    raise ValueError(f"Unknown filter '{alias}'")
