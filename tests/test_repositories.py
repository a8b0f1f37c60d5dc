"""
Tests for repository classes.
Tests CRUD operations, filtered search and database interactions.
"""

import pytest
import math
import uuid
from decimal import Decimal
from typing import List

from app.models.listing import Listing, ListingStatus, PropertyType
from app.repositories.listing import ListingRepository, ListingSearchFilters
from app.utils.validators import ValidationUtils
from tests.conftest import ListingFactory


class TestBaseRepository:
    """Test base repository functionality through ListingRepository."""

    @pytest.mark.asyncio
    async def test_create(self, listing_repository: ListingRepository):
        """Test creating a record."""
        listing = await ListingFactory.create_listing(listing_repository, title="Created Listing")

        assert listing.id is not None
        assert listing.title == "Created Listing"
        assert listing.status == ListingStatus.DRAFT
        assert listing.created_at is not None
        assert listing.updated_at is not None

    @pytest.mark.asyncio
    async def test_get_by_id(self, listing_repository: ListingRepository, test_listing: Listing):
        """Test getting a record by ID."""
        retrieved = await listing_repository.get_by_id(test_listing.id)

        assert retrieved is not None
        assert retrieved.id == test_listing.id
        assert retrieved.title == test_listing.title
        assert retrieved.location == {"emirate": "Dubai", "city": "Arabian Ranches"}

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, listing_repository: ListingRepository):
        """Test getting a non-existent record."""
        assert await listing_repository.get_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_overwrites_only_given_fields(
        self, listing_repository: ListingRepository, test_listing: Listing
    ):
        """Test updating a record."""
        updated = await listing_repository.update(test_listing.id, {"price": Decimal("500000")})

        assert updated is not None
        assert updated.price == Decimal("500000")
        assert updated.title == "Family Villa in Arabian Ranches"
        assert updated.bedrooms == 4

    @pytest.mark.asyncio
    async def test_update_replaces_nested_document(
        self, listing_repository: ListingRepository, test_listing: Listing
    ):
        updated = await listing_repository.update(test_listing.id, {"location": {"emirate": "Ajman"}})

        assert updated.location == {"emirate": "Ajman"}

    @pytest.mark.asyncio
    async def test_update_writes_none(self, listing_repository: ListingRepository, test_listing: Listing):
        updated = await listing_repository.update(test_listing.id, {"bedrooms": None})

        assert updated.bedrooms is None

    @pytest.mark.asyncio
    async def test_update_not_found(self, listing_repository: ListingRepository):
        """Test updating a non-existent record."""
        assert await listing_repository.update(uuid.uuid4(), {"title": "Nope"}) is None

    @pytest.mark.asyncio
    async def test_update_empty_returns_current(
        self, listing_repository: ListingRepository, test_listing: Listing
    ):
        updated = await listing_repository.update(test_listing.id, {})

        assert updated.id == test_listing.id
        assert updated.title == test_listing.title

    @pytest.mark.asyncio
    async def test_delete(self, listing_repository: ListingRepository, test_listing: Listing):
        """Test deleting a record."""
        assert await listing_repository.delete(test_listing.id) is True
        assert await listing_repository.get_by_id(test_listing.id) is None

    @pytest.mark.asyncio
    async def test_delete_not_found(self, listing_repository: ListingRepository):
        assert await listing_repository.delete(uuid.uuid4()) is False

    @pytest.mark.asyncio
    async def test_count(self, listing_repository: ListingRepository, test_listing: Listing):
        assert await listing_repository.count() == 1


class TestListingSearch:
    """Test filtered search."""

    @staticmethod
    def titles(listings: List[Listing]) -> set:
        return {listing.title for listing in listings}

    @pytest.mark.asyncio
    async def test_no_filters_returns_everything(
        self, listing_repository: ListingRepository, sample_listings: List[Listing]
    ):
        results = await listing_repository.search_listings(ListingSearchFilters())

        assert len(results) == len(sample_listings)

    @pytest.mark.asyncio
    async def test_filter_by_emirate(self, listing_repository: ListingRepository, sample_listings):
        results = await listing_repository.search_listings(ListingSearchFilters(emirate="Dubai"))

        assert self.titles(results) == {"Marina Apartment", "Marina Rental"}

    @pytest.mark.asyncio
    async def test_filter_by_community(self, listing_repository: ListingRepository, sample_listings):
        results = await listing_repository.search_listings(ListingSearchFilters(community="Marina Gate"))

        assert self.titles(results) == {"Marina Apartment"}

    @pytest.mark.asyncio
    async def test_filters_are_conjunctive(self, listing_repository: ListingRepository, sample_listings):
        filters = ListingSearchFilters(emirate="Dubai", purpose="rent")
        results = await listing_repository.search_listings(filters)

        assert self.titles(results) == {"Marina Rental"}

    @pytest.mark.asyncio
    async def test_filter_by_property_type(self, listing_repository: ListingRepository, sample_listings):
        results = await listing_repository.search_listings(
            ListingSearchFilters(property_type=PropertyType.VILLA.value)
        )

        assert self.titles(results) == {"Saadiyat Villa"}

    @pytest.mark.asyncio
    async def test_unknown_enum_value_matches_nothing(
        self, listing_repository: ListingRepository, sample_listings
    ):
        results = await listing_repository.search_listings(ListingSearchFilters(property_type="castle"))

        assert results == []

    @pytest.mark.asyncio
    async def test_price_range_is_inclusive(self, listing_repository: ListingRepository, sample_listings):
        filters = ListingSearchFilters(min_price=120000, max_price=1500000)
        results = await listing_repository.search_listings(filters)

        assert self.titles(results) == {"Marina Apartment", "Marina Rental"}

    @pytest.mark.asyncio
    async def test_exact_bedrooms(self, listing_repository: ListingRepository, sample_listings):
        results = await listing_repository.search_listings(ListingSearchFilters(bedrooms=3))

        assert self.titles(results) == {"Sharjah Townhouse"}

    @pytest.mark.asyncio
    async def test_fractional_count_matches_nothing(
        self, listing_repository: ListingRepository, sample_listings
    ):
        results = await listing_repository.search_listings(ListingSearchFilters(bathrooms=2.5))

        assert results == []

    @pytest.mark.asyncio
    async def test_unparseable_number_matches_nothing(
        self, listing_repository: ListingRepository, sample_listings
    ):
        filters = ListingSearchFilters(min_price=ValidationUtils.NO_MATCH)
        results = await listing_repository.search_listings(filters)

        assert results == []

    @pytest.mark.asyncio
    async def test_infinite_price_bounds(self, listing_repository: ListingRepository, sample_listings):
        everything = await listing_repository.search_listings(ListingSearchFilters(max_price=math.inf))
        above_everything = await listing_repository.search_listings(ListingSearchFilters(min_price=math.inf))
        below_everything = await listing_repository.search_listings(ListingSearchFilters(min_price=-math.inf))

        assert len(everything) == len(sample_listings)
        assert above_everything == []
        assert len(below_everything) == len(sample_listings)

    @pytest.mark.asyncio
    async def test_filter_by_publication(self, listing_repository: ListingRepository, sample_listings):
        published = await listing_repository.search_listings(ListingSearchFilters(is_published=True))
        drafts = await listing_repository.search_listings(ListingSearchFilters(is_published=False))

        assert self.titles(published) == {"Marina Apartment", "Saadiyat Villa"}
        assert self.titles(drafts) == {"Marina Rental", "Sharjah Townhouse"}

    @pytest.mark.asyncio
    async def test_listing_without_location_is_excluded_by_location_filter(
        self, listing_repository: ListingRepository
    ):
        await ListingFactory.create_listing(listing_repository, title="Nowhere", location=None)

        results = await listing_repository.search_listings(ListingSearchFilters(emirate="Dubai"))

        assert results == []

    def test_filters_repr_shows_active_criteria(self):
        filters = ListingSearchFilters(emirate="Dubai", bedrooms=2)

        assert repr(filters) == "ListingSearchFilters({'emirate': 'Dubai', 'bedrooms': 2})"
