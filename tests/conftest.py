"""
Test configuration and fixtures for the UAE listings API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Point settings at SQLite before the application is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
import json
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport
import httpx

from app.main import app
from app.database import Base, get_db
from app.models.listing import Listing
from app.repositories.listing import ListingRepository
from app.services.listing import ListingService
from app.client.api import ListingsAPIClient


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def listing_repository(db_session: AsyncSession) -> ListingRepository:
    """Create a listing repository instance."""
    return ListingRepository(db_session)


# Service fixtures
@pytest.fixture
def listing_service(db_session: AsyncSession) -> ListingService:
    """Create a listing service instance."""
    return ListingService(db_session)


# Test data factories
class ListingFactory:
    """Factory for creating test listings."""

    @staticmethod
    def create_listing_payload(**overrides) -> Dict[str, Any]:
        """Complete listing body in wire form, ready to publish."""
        payload = {
            "title": "Luxury 2BR Apartment with Marina View",
            "description": "A premium 2-bedroom apartment in Dubai Marina with sea views.",
            "price": 1850000,
            "currency": "AED",
            "propertyType": "apartment",
            "purpose": "sale",
            "sizeSqFt": 1240,
            "bedrooms": 2,
            "bathrooms": 3,
            "parkingSpots": 1,
            "location": {
                "emirate": "Dubai",
                "city": "Dubai Marina",
                "community": "Marina Gate",
                "coordinates": {"lat": 25.0805, "lng": 55.1403}
            },
            "amenities": ["Pool", "Gym"],
            "developer": "Select Group",
            "completionStatus": "ready",
            "yearBuilt": 2019,
            "paymentPlan": {"available": False},
            "ownership": "freehold",
            "agent": {
                "name": "Sara Khan",
                "phone": "+971501234567",
                "email": "sara@example.com",
                "company": "Marina Homes"
            }
        }
        payload.update(overrides)
        return payload

    @staticmethod
    def create_listing_data(**overrides) -> Dict[str, Any]:
        """Listing column values as the repository stores them."""
        data = {
            "title": "Family Villa in Arabian Ranches",
            "description": "Four bedroom villa backing onto the golf course.",
            "price": 4200000,
            "currency": "AED",
            "property_type": "villa",
            "purpose": "sale",
            "size_sqft": 3800,
            "bedrooms": 4,
            "bathrooms": 5,
            "location": {"emirate": "Dubai", "city": "Arabian Ranches"},
            "status": "draft",
            "is_published": False
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_listing(listing_repo: ListingRepository, **overrides) -> Listing:
        """Create a test listing in the database."""
        return await listing_repo.create(ListingFactory.create_listing_data(**overrides))


@pytest.fixture
async def test_listing(listing_repository: ListingRepository) -> Listing:
    """Create a draft test listing."""
    return await ListingFactory.create_listing(listing_repository)


@pytest.fixture
async def sample_listings(listing_repository: ListingRepository) -> List[Listing]:
    """A small mixed catalogue for filter tests."""
    specs = [
        dict(title="Marina Apartment", property_type="apartment", purpose="sale", price=1500000,
             bedrooms=2, bathrooms=2,
             location={"emirate": "Dubai", "city": "Dubai Marina", "community": "Marina Gate"},
             status="published", is_published=True),
        dict(title="Marina Rental", property_type="apartment", purpose="rent", price=120000,
             bedrooms=1, bathrooms=1,
             location={"emirate": "Dubai", "city": "Dubai Marina", "community": "Marina Promenade"}),
        dict(title="Saadiyat Villa", property_type="villa", purpose="sale", price=7500000,
             bedrooms=5, bathrooms=6,
             location={"emirate": "Abu Dhabi", "city": "Saadiyat Island"},
             status="published", is_published=True),
        dict(title="Sharjah Townhouse", property_type="townhouse", purpose="rent", price=95000,
             bedrooms=3, bathrooms=3,
             location={"emirate": "Sharjah", "city": "Al Khan"}),
    ]
    return [await ListingFactory.create_listing(listing_repository, **spec) for spec in specs]


# Client fixtures
class FakeListingsAPI:
    """
    In-memory stand-in for the listings REST API, served through
    ``httpx.MockTransport``. Records every request it receives.
    """

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.fail_with: Optional[int] = None
        self.on_request: Optional[Callable[[httpx.Request], None]] = None
        self._next_id = 1

    @property
    def writes(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method in ("POST", "PUT", "DELETE")]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)

    def add(self, document: Dict[str, Any]) -> Dict[str, Any]:
        listing_id = f"{self._next_id:024x}"
        self._next_id += 1
        stored = {**document, "_id": listing_id}
        self.documents[listing_id] = stored
        return stored

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.on_request:
            self.on_request(request)
        if self.fail_with:
            return httpx.Response(
                self.fail_with,
                json={"error": {"code": "ERROR", "message": "Request failed"}}
            )

        parts = request.url.path.rstrip("/").split("/")
        listing_id = parts[3] if len(parts) > 3 else None

        if request.method == "POST":
            return httpx.Response(201, json=self.add(self.body(request)))

        if request.method == "GET" and listing_id is None:
            params = dict(request.url.params)
            results = [
                d for d in self.documents.values()
                if all(str(d.get(k)) == v for k, v in params.items())
            ]
            return httpx.Response(200, json=results)

        if listing_id not in self.documents:
            return httpx.Response(404, json={"error": {"code": "NOT_FOUND", "message": "Listing not found"}})

        if request.method == "GET":
            return httpx.Response(200, json=self.documents[listing_id])
        if request.method == "PUT":
            self.documents[listing_id].update(self.body(request))
            return httpx.Response(200, json=self.documents[listing_id])
        if request.method == "DELETE":
            del self.documents[listing_id]
            return httpx.Response(200, json={"success": True})

        return httpx.Response(405)


@pytest.fixture
def fake_api() -> FakeListingsAPI:
    return FakeListingsAPI()


@pytest.fixture
async def api_client(fake_api: FakeListingsAPI) -> AsyncGenerator[ListingsAPIClient, None]:
    """API client wired to the in-memory fake."""
    client = ListingsAPIClient(base_url="http://test", transport=httpx.MockTransport(fake_api.handler))
    yield client
    await client.aclose()
