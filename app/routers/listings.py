"""
Listing API endpoints for CRUD operations and filtered browsing.
Errors propagate to the application's exception handlers.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional, List

from app.services.listing import ListingService
from app.schemas.listing import (
    ListingCreate,
    ListingUpdate,
    ListingResponse,
    DeleteResponse,
)
from app.schemas.error import get_error_responses, get_item_error_responses, get_write_error_responses
from app.utils.dependencies import get_listing_service


router = APIRouter(prefix="/listings", tags=["Listings"])


@router.post(
    "",
    response_model=ListingResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create listing",
    description="Create a listing. Drafts may be incomplete; published listings must be complete.",
    responses=get_error_responses(422, 500)
)
async def create_listing(
    listing_data: ListingCreate,
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    """
    Create a new listing.

    Args:
        listing_data: Listing body
        listing_service: Listing service instance

    Returns:
        Stored listing including its assigned ``_id``
    """
    listing = await listing_service.create_listing(listing_data)
    return ListingResponse.model_validate(listing.to_dict())


@router.get(
    "",
    response_model=List[ListingResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="List listings",
    description="All listings matching every supplied filter. Not paginated.",
    responses=get_error_responses(500)
)
async def list_listings(
    emirate: Optional[str] = Query(None, description="Exact emirate, e.g. Dubai"),
    city: Optional[str] = Query(None, description="Exact city or area"),
    community: Optional[str] = Query(None, description="Exact community"),
    property_type: Optional[str] = Query(None, alias="propertyType", description="apartment, villa, townhouse or penthouse"),
    purpose: Optional[str] = Query(None, description="sale or rent"),
    bedrooms: Optional[str] = Query(None, description="Exact number of bedrooms"),
    bathrooms: Optional[str] = Query(None, description="Exact number of bathrooms"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Minimum price, inclusive"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Maximum price, inclusive"),
    is_published: Optional[str] = Query(None, alias="isPublished", description='"true" for published, anything else for unpublished'),
    listing_service: ListingService = Depends(get_listing_service)
) -> List[ListingResponse]:
    # Numeric filters stay strings here so that unparseable values match nothing instead of failing
    listings = await listing_service.list_listings(
        emirate=emirate,
        city=city,
        community=community,
        property_type=property_type,
        purpose=purpose,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        min_price=min_price,
        max_price=max_price,
        is_published=is_published
    )
    return [ListingResponse.model_validate(listing.to_dict()) for listing in listings]


@router.get(
    "/{listing_id}",
    response_model=ListingResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Get listing",
    responses=get_item_error_responses()
)
async def get_listing(
    listing_id: str = Path(..., description="Listing ID"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    """
    Get one listing.

    A malformed id is a 400, an unknown one a 404.
    """
    listing = await listing_service.get_listing(listing_id)
    return ListingResponse.model_validate(listing.to_dict())


@router.put(
    "/{listing_id}",
    response_model=ListingResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Update listing",
    description="Overwrite the top-level fields present in the body; other fields are kept.",
    responses=get_write_error_responses()
)
async def update_listing(
    listing_data: ListingUpdate,
    listing_id: str = Path(..., description="Listing ID"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    """
    Partially update a listing.

    Args:
        listing_data: Fields to overwrite
        listing_id: Listing ID from the path
        listing_service: Listing service instance

    Returns:
        Listing as stored after the update
    """
    listing = await listing_service.update_listing(listing_id, listing_data)
    return ListingResponse.model_validate(listing.to_dict())


@router.delete(
    "/{listing_id}",
    response_model=DeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete listing",
    responses=get_item_error_responses()
)
async def delete_listing(
    listing_id: str = Path(..., description="Listing ID"),
    listing_service: ListingService = Depends(get_listing_service)
) -> DeleteResponse:
    """Delete a listing permanently."""
    await listing_service.delete_listing(listing_id)
    return DeleteResponse(success=True)
