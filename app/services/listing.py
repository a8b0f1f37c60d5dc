"""
Listing service for managing property listings with write-boundary validation.
Handles CRUD operations, publication state and filter translation.
"""

from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError as PydanticValidationError
from app.repositories.listing import ListingRepository, ListingSearchFilters
from app.models.listing import Listing, ListingStatus
from app.schemas.listing import ListingCreate, ListingUpdate, PublishedListing
from app.utils.exceptions import ListingNotFoundError, PublicationStatusConflictError
from app.utils.validators import ValidationUtils, handle_pydantic_validation_error
import logging

logger = logging.getLogger(__name__)


class ListingService:
    """
    Listing service for the listings CRUD surface.

    Every write is validated here, whatever the client checked: field types,
    ranges and enum membership always; the publication contract whenever the
    stored result would be published.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.listing_repo = ListingRepository(db_session)

    async def create_listing(self, listing_data: ListingCreate) -> Listing:
        """
        Create a new listing.

        Args:
            listing_data: Validated request body

        Returns:
            Created listing with its assigned id

        Raises:
            ValidationError: If the listing is published but incomplete, or
                its status and publication flag disagree
        """
        create_data = listing_data.to_store()
        self._reconcile_publication(create_data, existing=None)

        if create_data["is_published"]:
            self._validate_publishable(create_data)

        listing = await self.listing_repo.create(create_data)
        logger.info(f"Listing created: {listing.id} ({listing.status.value})")
        return listing

    async def list_listings(
        self,
        emirate: Optional[str] = None,
        city: Optional[str] = None,
        community: Optional[str] = None,
        property_type: Optional[str] = None,
        purpose: Optional[str] = None,
        bedrooms: Optional[str] = None,
        bathrooms: Optional[str] = None,
        min_price: Optional[str] = None,
        max_price: Optional[str] = None,
        is_published: Optional[str] = None
    ) -> List[Listing]:
        """
        List listings matching all supplied query filters.

        Arguments are raw query-string values. Blank values are ignored;
        numeric values that do not parse match nothing.
        """
        filters = ListingSearchFilters(
            emirate=ValidationUtils.blank_to_none(emirate),
            city=ValidationUtils.blank_to_none(city),
            community=ValidationUtils.blank_to_none(community),
            property_type=ValidationUtils.blank_to_none(property_type),
            purpose=ValidationUtils.blank_to_none(purpose),
            bedrooms=ValidationUtils.coerce_number(bedrooms),
            bathrooms=ValidationUtils.coerce_number(bathrooms),
            min_price=ValidationUtils.coerce_number(min_price),
            max_price=ValidationUtils.coerce_number(max_price),
            is_published=ValidationUtils.parse_flag(is_published)
        )
        return await self.listing_repo.search_listings(filters)

    async def get_listing(self, listing_id: Any) -> Listing:
        """
        Get listing by ID.

        Raises:
            InvalidListingIdError: If the id is malformed
            ListingNotFoundError: If no listing has this id
        """
        parsed_id = ValidationUtils.parse_listing_id(listing_id)
        listing = await self.listing_repo.get_by_id(parsed_id)

        if not listing:
            raise ListingNotFoundError()

        return listing

    async def update_listing(self, listing_id: Any, listing_data: ListingUpdate) -> Listing:
        """
        Overwrite the fields present in the body; everything else is kept.

        The merge is shallow: a nested object in the body (``location``,
        ``agent``, ``paymentPlan``) replaces the stored one entirely.

        Raises:
            InvalidListingIdError: If the id is malformed
            ListingNotFoundError: If no listing has this id
            ValidationError: If the merged listing breaks the publication contract
        """
        parsed_id = ValidationUtils.parse_listing_id(listing_id)
        existing = await self.listing_repo.get_by_id(parsed_id)

        if not existing:
            raise ListingNotFoundError()

        update_data = listing_data.to_store()
        # status and the flag always have a value; null means "leave as is"
        for field in ("status", "is_published"):
            if field in update_data and update_data[field] is None:
                del update_data[field]
        self._reconcile_publication(update_data, existing=existing)

        merged = {**existing.to_dict(), **update_data}
        if merged["is_published"]:
            self._validate_publishable(merged)

        updated = await self.listing_repo.update(parsed_id, update_data)
        if not updated:
            raise ListingNotFoundError()

        logger.info(f"Listing updated: {parsed_id} fields={sorted(update_data)}")
        return updated

    async def delete_listing(self, listing_id: Any) -> bool:
        """
        Delete listing by ID.

        Raises:
            InvalidListingIdError: If the id is malformed
            ListingNotFoundError: If no listing has this id
        """
        parsed_id = ValidationUtils.parse_listing_id(listing_id)
        deleted = await self.listing_repo.delete(parsed_id)

        if not deleted:
            raise ListingNotFoundError()

        logger.info(f"Listing deleted: {parsed_id}")
        return True

    # Private helpers

    @staticmethod
    def _reconcile_publication(data: Dict[str, Any], existing: Optional[Listing]) -> None:
        """Keep ``status`` and ``is_published`` in step, deriving whichever is missing."""
        status = data.get("status")
        flag = data.get("is_published")

        if status is not None and flag is not None:
            if (status == ListingStatus.PUBLISHED) != flag:
                raise PublicationStatusConflictError(ListingStatus(status).value, flag)
        elif status is not None:
            data["is_published"] = status == ListingStatus.PUBLISHED
        elif flag is not None:
            data["status"] = ListingStatus.PUBLISHED if flag else ListingStatus.DRAFT
        elif existing is None:
            data["status"] = ListingStatus.DRAFT
            data["is_published"] = False

    @staticmethod
    def _validate_publishable(document: Dict[str, Any]) -> None:
        try:
            PublishedListing.model_validate(document)
        except PydanticValidationError as e:
            raise handle_pydantic_validation_error(e, "Listing is incomplete and cannot be published")
