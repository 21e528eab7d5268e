import os
import sys
import pathlib

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Must be set before app.config.get_settings() is first called
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-rent-request-service"
os.environ["CALLBACK_BASE_URL"] = "http://rent.test"

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import Base, get_db
from app.dependencies import get_listing_client, get_payment_client
from app.exceptions import NotFoundError
from app.models import RentRequest, RentRequestStatus, PaymentStatus
from app.repositories.rent_requests import RentRequestRepository
from app.schemas.upstream import ListingDetail
from app.services.auth import create_access_token
from app.services.rent_requests import RentRequestService

LISTING_ID = 5
OWNER_ID = 20
PRICE_PER_DAY = 100


class FakeListingClient:
    """In-memory stand-in for the listings service."""

    def __init__(self):
        self.listings = {LISTING_ID: ListingDetail(price_per_day=PRICE_PER_DAY, owner_id=OWNER_ID)}
        self.error = None
        self.calls = []

    def get_listing(self, listing_id):
        self.calls.append(listing_id)
        if self.error is not None:
            raise self.error
        if listing_id not in self.listings:
            raise NotFoundError("Listing not found")
        return self.listings[listing_id]


class FakePaymentClient:
    def __init__(self):
        self.sessions = []
        self.error = None

    def create_payment_session(self, payload):
        if self.error is not None:
            raise self.error
        self.sessions.append(payload)
        return f"https://pay.test/checkout/{payload.request_id}"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def listings():
    return FakeListingClient()


@pytest.fixture
def payments():
    return FakePaymentClient()


@pytest.fixture
def repo(db):
    return RentRequestRepository(db)


@pytest.fixture
def service(repo, listings, payments):
    return RentRequestService(repo, listings, payments, get_settings())


@pytest.fixture
def client(session_factory, listings, payments):
    from app.main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_listing_client] = lambda: listings
    app.dependency_overrides[get_payment_client] = lambda: payments
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def seed_request(
    db,
    renter_id=1,
    owner_id=OWNER_ID,
    listing_id=LISTING_ID,
    start="2024-06-01",
    end="2024-06-04",
    status=RentRequestStatus.awaiting_confirmation,
    payment_status=PaymentStatus.pending,
    created_at=None,
):
    """Insert a rent request directly, bypassing the service rules."""
    start_d, end_d = date.fromisoformat(start), date.fromisoformat(end)
    record = RentRequest(
        renter_id=renter_id,
        owner_id=owner_id,
        listing_id=listing_id,
        start_date=start_d,
        end_date=end_d,
        total_price=(end_d - start_d).days * PRICE_PER_DAY,
        status=status,
        payment_status=payment_status,
    )
    if created_at is not None:
        record.created_at = datetime.fromisoformat(created_at)
    db.add(record)
    db.commit()
    return record.id
