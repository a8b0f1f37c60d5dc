"""
Pydantic schemas for listing requests and responses.
Wire format is camelCase with the identifier exposed as ``_id``.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from email_validator import validate_email, EmailNotValidError
from typing import Any, Dict, List, Optional
from decimal import Decimal
from app.models.listing import PropertyType, Purpose, ListingStatus, CompletionStatus, Ownership


class CamelModel(BaseModel):
    """Base schema using camelCase aliases on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(CamelModel):
    """Map position of the property."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    lat: float = Field(..., ge=-90, le=90, examples=[25.0805])
    lng: float = Field(..., ge=-180, le=180, examples=[55.1403])


class Location(CamelModel):
    """Where the property is. Emirate and city may be blank on drafts."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    emirate: Optional[str] = Field(None, max_length=100, examples=["Dubai"])
    city: Optional[str] = Field(None, max_length=100, examples=["Dubai Marina"])
    building_name: Optional[str] = Field(None, max_length=255)
    community: Optional[str] = Field(None, max_length=255)
    street: Optional[str] = Field(None, max_length=255)
    coordinates: Optional[Coordinates] = None


class PaymentPlan(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    available: bool = False


class AgentContact(CamelModel):
    """Listing agent contact details."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    company: Optional[str] = Field(None, max_length=255)

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v):
        """Blank emails are allowed on drafts; anything else must be a real address."""
        if v is None or not v.strip():
            return v
        try:
            validate_email(v.strip(), check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {e}")
        return v.strip()


class ListingBase(CamelModel):
    """Listing attributes shared by requests and responses. Every field is optional on drafts."""

    title: Optional[str] = Field(
        None,
        max_length=255,
        description="Listing title",
        examples=["Luxury 2BR Apartment with Marina View"]
    )

    description: Optional[str] = Field(
        None,
        max_length=5000,
        description="Detailed property description"
    )

    price: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=14,
        decimal_places=2,
        description="Asking price, or annual rent for rentals",
        examples=[1850000]
    )

    currency: Optional[str] = Field(None, max_length=8, examples=["AED"])

    property_type: Optional[PropertyType] = Field(None, examples=["apartment"])
    purpose: Optional[Purpose] = Field(None, examples=["sale"])

    size_sqft: Optional[Decimal] = Field(
        None, ge=0, max_digits=12, decimal_places=2, alias="sizeSqFt", examples=[1240]
    )
    bedrooms: Optional[int] = Field(None, ge=0, le=100)
    bathrooms: Optional[int] = Field(None, ge=0, le=100)
    parking_spots: Optional[int] = Field(None, ge=0, le=100)

    location: Optional[Location] = None

    status: Optional[ListingStatus] = None
    is_published: Optional[bool] = None

    amenities: Optional[List[str]] = None
    developer: Optional[str] = Field(None, max_length=255)
    completion_status: Optional[CompletionStatus] = None
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    payment_plan: Optional[PaymentPlan] = None
    ownership: Optional[Ownership] = None
    agent: Optional[AgentContact] = None


class ListingWrite(ListingBase):
    """
    Schema for create and update bodies.

    ``_id``, ``createdAt`` and ``updatedAt`` are accepted so that a client can
    send back a document it previously received, but they are never written.
    Any other unknown field is rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    id: Optional[Any] = Field(None, alias="_id")
    created_at: Optional[Any] = None
    updated_at: Optional[Any] = None

    def to_store(self) -> Dict[str, Any]:
        """
        Fields the client actually sent, keyed by column name.

        Nested sub-documents are dumped in wire form since they are stored whole.
        """
        data = self.model_dump(
            exclude_unset=True,
            exclude={"id", "created_at", "updated_at"},
        )
        for field in ("location", "payment_plan", "agent"):
            value = getattr(self, field)
            if field in data and value is not None:
                data[field] = value.model_dump(by_alias=True, exclude_none=True)
        return data


class ListingCreate(ListingWrite):
    """Schema for creating a listing."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "title": "Luxury 2BR Apartment with Marina View",
                "description": "A premium 2-bedroom apartment located in Dubai Marina with full sea views.",
                "price": 1850000,
                "currency": "AED",
                "propertyType": "apartment",
                "purpose": "sale",
                "sizeSqFt": 1240,
                "bedrooms": 2,
                "bathrooms": 3,
                "location": {
                    "emirate": "Dubai",
                    "city": "Dubai Marina",
                    "coordinates": {"lat": 25.0805, "lng": 55.1403}
                },
                "status": "draft",
                "isPublished": False
            }
        }
    )


class ListingUpdate(ListingWrite):
    """Schema for partial updates; only the fields sent are written."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "price": 500000,
                "isPublished": True,
                "status": "published"
            }
        }
    )


class ListingResponse(CamelModel):
    """Stored listing as returned to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str = Field(..., alias="_id", description="Listing identifier")
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    property_type: Optional[PropertyType] = None
    purpose: Optional[Purpose] = None
    size_sqft: Optional[float] = Field(None, alias="sizeSqFt")
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    parking_spots: Optional[int] = None
    location: Optional[Dict[str, Any]] = None
    status: ListingStatus
    is_published: bool
    amenities: Optional[List[str]] = None
    developer: Optional[str] = None
    completion_status: Optional[CompletionStatus] = None
    year_built: Optional[int] = None
    payment_plan: Optional[Dict[str, Any]] = None
    ownership: Optional[Ownership] = None
    agent: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class DeleteResponse(BaseModel):
    success: bool = True


class PublishedLocation(CamelModel):
    emirate: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)


class PublishedAgent(CamelModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v):
        try:
            validate_email(v.strip(), check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {e}")
        return v.strip()


class PublishedListing(CamelModel):
    """
    Completeness contract a listing must meet once it is published.

    Validated against the merged document, so it also covers updates that
    touch only a few fields of an already published listing.
    """

    title: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    price: Decimal = Field(..., ge=0)
    property_type: PropertyType
    purpose: Purpose
    location: PublishedLocation
    agent: Optional[PublishedAgent] = None

    @field_validator('title', 'description', mode='before')
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v
