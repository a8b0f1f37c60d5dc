"""
Tests for the listing browser and its filter criteria.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.client.api import ListingsAPIClient
from app.client.browser import ListingBrowser, ListingFilters
from tests.conftest import FakeListingsAPI


@pytest.fixture
def catalogue(fake_api: FakeListingsAPI):
    fake_api.add({"title": "Marina Apartment", "purpose": "sale", "propertyType": "apartment"})
    fake_api.add({"title": "JVC Studio", "purpose": "rent", "propertyType": "apartment"})
    fake_api.add({"title": "Ranches Villa", "purpose": "sale", "propertyType": "villa"})
    return fake_api


class TestListingFilters:

    def test_empty_filters_send_nothing(self):
        assert ListingFilters().to_params() == {}
        assert ListingFilters(emirate="  ", bedrooms="").is_empty

    def test_params_use_query_names(self):
        filters = ListingFilters(
            property_type="villa",
            min_price=1000000,
            max_price=2500000.5,
            bedrooms=3,
            is_published=True
        )

        assert filters.to_params() == {
            "propertyType": "villa",
            "minPrice": "1000000",
            "maxPrice": "2500000.5",
            "bedrooms": "3",
            "isPublished": "true",
        }

    def test_unpublished_flag(self):
        assert ListingFilters(is_published=False).to_params() == {"isPublished": "false"}

    def test_accepts_query_names(self):
        filters = ListingFilters.model_validate({"propertyType": "apartment", "minPrice": "500"})

        assert filters.property_type == "apartment"
        assert filters.min_price == 500

    def test_rejects_negative_counts(self):
        with pytest.raises(PydanticValidationError):
            ListingFilters(bedrooms=-1)


class TestListingBrowser:

    @pytest.mark.asyncio
    async def test_apply_without_filters(self, api_client: ListingsAPIClient, catalogue: FakeListingsAPI):
        browser = ListingBrowser(api_client)

        results = await browser.apply()

        assert len(results) == 3
        assert browser.loading is False
        assert catalogue.requests[-1].url.params.multi_items() == []

    @pytest.mark.asyncio
    async def test_apply_sends_only_set_criteria(self, api_client: ListingsAPIClient, catalogue: FakeListingsAPI):
        browser = ListingBrowser(api_client)
        browser.set_filter("purpose", "sale")
        browser.set_filter("propertyType", "villa")
        browser.set_filter("emirate", "")

        results = await browser.apply()

        assert [item["title"] for item in results] == ["Ranches Villa"]
        assert dict(catalogue.requests[-1].url.params) == {"purpose": "sale", "propertyType": "villa"}
        assert browser.has_active_filters

    @pytest.mark.asyncio
    async def test_set_filter_does_not_fetch(self, api_client: ListingsAPIClient, catalogue: FakeListingsAPI):
        browser = ListingBrowser(api_client)
        browser.set_filter("bedrooms", 2)

        assert catalogue.requests == []

    @pytest.mark.asyncio
    async def test_unknown_filter(self, api_client: ListingsAPIClient):
        browser = ListingBrowser(api_client)

        with pytest.raises(ValueError):
            browser.set_filter("views", 3)

    @pytest.mark.asyncio
    async def test_reset_clears_and_refetches(self, api_client: ListingsAPIClient, catalogue: FakeListingsAPI):
        browser = ListingBrowser(api_client)
        browser.set_filter("purpose", "rent")
        await browser.apply()
        assert len(browser.listings) == 1

        results = await browser.reset()

        assert not browser.has_active_filters
        assert len(results) == 3
        assert len(catalogue.requests) == 2
        assert dict(catalogue.requests[-1].url.params) == {}

    @pytest.mark.asyncio
    async def test_failed_fetch_keeps_previous_results(
        self, api_client: ListingsAPIClient, catalogue: FakeListingsAPI
    ):
        browser = ListingBrowser(api_client)
        await browser.apply()

        catalogue.fail_with = 500
        browser.set_filter("purpose", "sale")
        results = await browser.apply()

        assert len(results) == 3
        assert browser.last_error.status_code == 500
        assert browser.loading is False

    @pytest.mark.asyncio
    async def test_delete_drops_row(self, api_client: ListingsAPIClient, catalogue: FakeListingsAPI):
        browser = ListingBrowser(api_client)
        await browser.apply()
        doomed = browser.listings[0]["_id"]

        await browser.delete(doomed)

        assert doomed not in catalogue.documents
        assert all(item["_id"] != doomed for item in browser.listings)
        assert len(browser.listings) == 2
