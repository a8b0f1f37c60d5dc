"""
Listing model for UAE sale and rental listings.
Stores flat listing attributes as columns and nested sub-documents as JSON.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, JSON, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
from decimal import Decimal
import enum
from typing import Any, Dict, List, Optional


class PropertyType(str, enum.Enum):
    """Kind of property being listed."""
    APARTMENT = "apartment"
    VILLA = "villa"
    TOWNHOUSE = "townhouse"
    PENTHOUSE = "penthouse"


class Purpose(str, enum.Enum):
    """Whether the listing is for sale or rent."""
    SALE = "sale"
    RENT = "rent"


class ListingStatus(str, enum.Enum):
    """Publication status of a listing."""
    DRAFT = "draft"
    PUBLISHED = "published"


class CompletionStatus(str, enum.Enum):
    READY = "ready"
    OFF_PLAN = "off-plan"


class Ownership(str, enum.Enum):
    FREEHOLD = "freehold"
    LEASEHOLD = "leasehold"


def _enum_column(enum_cls: type) -> SQLEnum:
    """Portable enum column storing the enum values rather than member names."""
    return SQLEnum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


def _to_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class Listing(Base):
    """
    Property listing document.

    Content columns are nullable because drafts are saved while the form is
    still being filled in; the service layer decides what a complete
    (published) listing must contain. ``location``, ``agent`` and
    ``payment_plan`` are stored whole and replaced whole on update.
    """

    __tablename__ = "listings"

    # Basic information
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Pricing
    price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=True,
        index=True,
        comment="Asking price or annual rent"
    )
    currency: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)

    property_type: Mapped[Optional[PropertyType]] = mapped_column(
        _enum_column(PropertyType), nullable=True, index=True
    )
    purpose: Mapped[Optional[Purpose]] = mapped_column(
        _enum_column(Purpose), nullable=True, index=True
    )

    # Specifications
    size_sqft: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    parking_spots: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Nested sub-documents
    location: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    amenities: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    payment_plan: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    agent: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # Publication
    status: Mapped[ListingStatus] = mapped_column(
        _enum_column(ListingStatus),
        nullable=False,
        default=ListingStatus.DRAFT
    )
    is_published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True
    )

    # Project details
    developer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    completion_status: Mapped[Optional[CompletionStatus]] = mapped_column(
        _enum_column(CompletionStatus), nullable=True
    )
    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ownership: Mapped[Optional[Ownership]] = mapped_column(_enum_column(Ownership), nullable=True)

    def __repr__(self) -> str:
        title = (self.title or "")[:30]
        return f"<Listing(id={self.id}, title={title!r}, status={self.status})>"

    def to_dict(self) -> dict:
        """
        Convert listing to a dictionary keyed by attribute name.

        Returns:
            Dictionary representation of the listing
        """
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "price": _to_float(self.price),
            "currency": self.currency,
            "property_type": self.property_type.value if self.property_type else None,
            "purpose": self.purpose.value if self.purpose else None,
            "size_sqft": _to_float(self.size_sqft),
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parking_spots": self.parking_spots,
            "location": self.location,
            "status": self.status.value if self.status else None,
            "is_published": self.is_published,
            "amenities": self.amenities,
            "developer": self.developer,
            "completion_status": self.completion_status.value if self.completion_status else None,
            "year_built": self.year_built,
            "payment_plan": self.payment_plan,
            "ownership": self.ownership.value if self.ownership else None,
            "agent": self.agent,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


# Composite index for the browse filters most often combined with a price range
purpose_type_price_index = Index(
    'idx_listings_purpose_type_price',
    Listing.purpose,
    Listing.property_type,
    Listing.price
)
