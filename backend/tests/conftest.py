"""
Pytest fixtures for test database, client, principals and the payment gateway.

Each test gets a fresh in-memory SQLite database, a controllable clock and a
Razorpay gateway whose SDK order API is replaced by an in-memory stub.
"""

import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
import razorpay
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from weddinghub.main import app
from weddinghub.core.clock import get_clock
from weddinghub.core.security import create_access_token
from weddinghub.db.base import Base
from weddinghub.db.session import get_db
from weddinghub.models.event import Event
from weddinghub.models.user import User
from weddinghub.models.vendor import Vendor
from weddinghub.services.payment_gateway import RazorpayGateway, get_payment_gateway

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

GATEWAY_KEY_ID = "rzp_test_key"
GATEWAY_SECRET = "rzp_test_secret"

START = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class GatewayStub:
    """Stands in for the SDK's ``client.order`` and records the orders it was asked for."""

    def __init__(self):
        self.orders: list[dict] = []
        self.options: list[dict] = []
        self.fail_with: Exception | None = None
        self._counter = 0

    def create(self, data=None, **kwargs) -> dict:
        self.orders.append(data)
        self.options.append(kwargs)
        if self.fail_with is not None:
            raise self.fail_with
        self._counter += 1
        return {
            "id": f"order_TEST{self._counter:04d}",
            "entity": "order",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
        }


def sign(order_id: str, payment_id: str) -> str:
    """The checkout widget's signature: hex HMAC-SHA256 of "order|payment"."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(GATEWAY_SECRET.encode("utf-8"), message, hashlib.sha256).hexdigest()


def headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture
def gateway_stub() -> GatewayStub:
    return GatewayStub()


@pytest.fixture
def gateway(gateway_stub: GatewayStub) -> RazorpayGateway:
    client = razorpay.Client(auth=(GATEWAY_KEY_ID, GATEWAY_SECRET))
    client.order = gateway_stub
    return RazorpayGateway(key_id=GATEWAY_KEY_ID, key_secret=GATEWAY_SECRET, client=client)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, clock: FakeClock, gateway: RazorpayGateway) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with DB, clock and gateway dependencies overridden."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(db: AsyncSession, email: str, name: str, role: str) -> User:
    user = User(email=email, name=name, role=role, created_at=START, updated_at=START)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def _make_vendor(db: AsyncSession, owner: User, business_name: str, category: str = "Catering") -> Vendor:
    vendor = Vendor(
        user_id=owner.id,
        business_name=business_name,
        category=category,
        city="Jaipur",
        price_min=10000,
        price_max=200000,
        rating_average=0,
        rating_count=0,
        created_at=START,
        updated_at=START,
    )
    db.add(vendor)
    await db.commit()
    await db.refresh(vendor)
    return vendor


@pytest_asyncio.fixture
async def customer(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "asha@example.com", "Asha", "customer")


@pytest_asyncio.fixture
async def other_customer(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "ravi@example.com", "Ravi", "customer")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "admin@example.com", "Admin", "admin")


@pytest_asyncio.fixture
async def vendor_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "caterer@example.com", "Caterer", "vendor")


@pytest_asyncio.fixture
async def other_vendor_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "dj@example.com", "DJ", "vendor")


@pytest_asyncio.fixture
async def vendor(db_session: AsyncSession, vendor_user: User) -> Vendor:
    return await _make_vendor(db_session, vendor_user, "Royal Caterers")


@pytest_asyncio.fixture
async def other_vendor(db_session: AsyncSession, other_vendor_user: User) -> Vendor:
    return await _make_vendor(db_session, other_vendor_user, "Beat Box DJ", category="DJ")


@pytest.fixture
def customer_headers(customer: User) -> dict:
    return headers_for(customer)


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, customer: User) -> Event:
    """A wedding owned by ``customer`` with no bookings yet."""
    event = Event(
        user_id=customer.id,
        event_type="Wedding",
        event_name="Asha & Karan",
        start_date=START + timedelta(days=60),
        end_date=START + timedelta(days=62),
        guest_count=300,
        budget_amount=1500000,
        budget_currency="INR",
        status="Planning",
        booking_ids=[],
        created_at=START,
        updated_at=START,
    )
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


def booking_payload(event: Event, vendor: Vendor, **overrides) -> dict:
    payload = {
        "event_id": event.id,
        "vendor_id": vendor.id,
        "event_date": (START + timedelta(days=60)).isoformat(),
        "amount": 5000,
        "service_details": {
            "service_name": "Dinner buffet",
            "description": "Veg and non-veg buffet",
            "quantity": 300,
            "unit": "plates",
        },
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def booking(client: AsyncClient, customer_headers, test_event, vendor) -> dict:
    """A Pending booking created through the API."""
    response = await client.post(
        "/api/v1/bookings/",
        json=booking_payload(test_event, vendor),
        headers=customer_headers,
    )
    assert response.status_code == 201
    return response.json()
