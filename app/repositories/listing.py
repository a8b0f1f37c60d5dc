"""
Listing repository for managing listings with conjunctive filtering.
Translates browse filters into equality and range conditions on the listings table.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, false, asc
from app.repositories.base import BaseRepository
from app.models.listing import Listing, PropertyType, Purpose
from app.utils.validators import ValidationUtils
from typing import Optional, List, Any
from decimal import Decimal
import logging
import math

logger = logging.getLogger(__name__)


class ListingSearchFilters:
    """
    Data class for listing search filters.

    Text values are matched exactly. Numeric values have already been coerced
    by ``ValidationUtils.coerce_number``; ``NO_MATCH`` turns its condition into
    one that no row satisfies.
    """

    def __init__(
        self,
        emirate: Optional[str] = None,
        city: Optional[str] = None,
        community: Optional[str] = None,
        property_type: Optional[str] = None,
        purpose: Optional[str] = None,
        bedrooms: Optional[float] = None,
        bathrooms: Optional[float] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        is_published: Optional[bool] = None
    ):
        self.emirate = emirate
        self.city = city
        self.community = community
        self.property_type = property_type
        self.purpose = purpose
        self.bedrooms = bedrooms
        self.bathrooms = bathrooms
        self.min_price = min_price
        self.max_price = max_price
        self.is_published = is_published

    def __repr__(self) -> str:
        active = {k: v for k, v in vars(self).items() if v is not None}
        return f"ListingSearchFilters({active})"


class ListingRepository(BaseRepository[Listing]):
    """
    Repository for listing documents with filtered search.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Listing, db)

    async def search_listings(self, filters: ListingSearchFilters) -> List[Listing]:
        """
        Return every listing matching all supplied filters.

        No pagination is applied; results are ordered oldest first.

        Args:
            filters: ListingSearchFilters instance with search criteria

        Returns:
            List of matching listings
        """
        try:
            query = select(Listing)

            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))

            query = query.order_by(asc(Listing.created_at), asc(Listing.id))

            result = await self.db.execute(query)
            listings = result.scalars().all()

            logger.debug(f"Listing search {filters!r} returned {len(listings)} results")
            return list(listings)
        except Exception as e:
            logger.error(f"Failed to search listings: {e}")
            raise

    def _build_filter_conditions(self, filters: ListingSearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.

        Args:
            filters: ListingSearchFilters instance

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []

        # Location sub-document fields
        if filters.emirate:
            conditions.append(Listing.location["emirate"].as_string() == filters.emirate)
        if filters.city:
            conditions.append(Listing.location["city"].as_string() == filters.city)
        if filters.community:
            conditions.append(Listing.location["community"].as_string() == filters.community)

        # Enumerated fields
        if filters.property_type:
            conditions.append(self._enum_condition(Listing.property_type, PropertyType, filters.property_type))
        if filters.purpose:
            conditions.append(self._enum_condition(Listing.purpose, Purpose, filters.purpose))

        # Publication flag
        if filters.is_published is not None:
            conditions.append(Listing.is_published == filters.is_published)

        # Exact counts
        if filters.bedrooms is not None:
            conditions.append(self._count_condition(Listing.bedrooms, filters.bedrooms))
        if filters.bathrooms is not None:
            conditions.append(self._count_condition(Listing.bathrooms, filters.bathrooms))

        # Price range, inclusive on both ends
        if filters.min_price is not None:
            conditions.append(self._price_condition(Listing.price, ">=", filters.min_price))
        if filters.max_price is not None:
            conditions.append(self._price_condition(Listing.price, "<=", filters.max_price))

        return conditions

    @staticmethod
    def _enum_condition(column: Any, enum_cls: type, value: str):
        try:
            member = enum_cls(value)
        except ValueError:
            return false()
        return column == member

    @staticmethod
    def _count_condition(column: Any, value: float):
        if ValidationUtils.is_no_match(value) or not float(value).is_integer():
            return false()
        return column == int(value)

    @staticmethod
    def _price_condition(column: Any, op: str, value: float):
        if ValidationUtils.is_no_match(value):
            return false()
        if math.isinf(value):
            # Every priced listing is below +inf and above -inf
            if (value > 0) == (op == "<="):
                return column.isnot(None)
            return false()
        bound = Decimal(str(value))
        return column >= bound if op == ">=" else column <= bound
