"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Keep the app's own engine (used by the lifespan) off the developer database.
os.environ.setdefault("POS_DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pos_api.core.dependencies import get_clock, get_receipt_printer
from pos_api.main import app
from pos_api.models import Base, KTVRoom, MenuItem, Order
from pos_api.repositories import SqlCollectionStore
from pos_shared.config.constants import KTVRoomType, MenuTag
from pos_shared.config.settings import Settings
from pos_shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

T0 = datetime(2024, 5, 1, 18, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock; call it to read the current time."""

    def __init__(self, start: datetime = T0):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta) -> datetime:
        self.current = self.current + timedelta(**delta)
        return self.current


class RecordingAuditSink:
    def __init__(self):
        self.entries: list[tuple[str, str, dict]] = []

    def __call__(self, level, action, details):
        self.entries.append((level, action, details))

    @property
    def actions(self) -> list[str]:
        return [action for _, action, _ in self.entries]


class RecordingPrinter:
    def __init__(self):
        self.printed: list[Order] = []

    def __call__(self, order):
        self.printed.append(order)

    @property
    def order_ids(self) -> list[str]:
        return [order.id for order in self.printed]


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    return SqlCollectionStore(db_session)


@pytest.fixture
def test_settings():
    """Settings with the documented defaults, independent of the environment."""
    return Settings(
        _env_file=None,
        database_url=SQLALCHEMY_DATABASE_URL,
        service_charge_rate=Decimal("0.10"),
        ktv_apply_service_charge=False,
        ktv_minimum_hours=1,
        kitchen_overdue_minutes=15,
        business_timezone="UTC",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def audit_sink():
    return RecordingAuditSink()


@pytest.fixture
def printer():
    return RecordingPrinter()


@pytest.fixture
def collaborators(audit_sink, printer, clock, test_settings):
    """Keyword arguments for building any domain service in tests."""
    return {
        "audit": audit_sink,
        "printer": printer,
        "clock": clock,
        "settings": test_settings,
    }


@pytest.fixture
def menu(store):
    """A small menu: two dishes, a KTV-servable drink and a retail product."""
    from pos_api.repositories import get_menu_item_repository

    repo = get_menu_item_repository(store)
    items = {
        "rice": MenuItem(
            id="dish-rice",
            name="Fried Rice",
            price_cents=3_000,
            tags=frozenset({MenuTag.FOOD}),
        ),
        "soup": MenuItem(
            id="dish-soup",
            name="Hot and Sour Soup",
            price_cents=2_000,
            tags=frozenset({MenuTag.FOOD}),
        ),
        "beer": MenuItem(
            id="drink-beer",
            name="Beer",
            price_cents=5_000,
            tags=frozenset({MenuTag.DRINK, MenuTag.KTV_SERVABLE, MenuTag.RETAIL}),
        ),
        "water": MenuItem(
            id="retail-water",
            name="Water",
            price_cents=1_500,
            tags=frozenset({MenuTag.RETAIL}),
        ),
    }
    return {key: repo.add(item) for key, item in items.items()}


@pytest.fixture
def ktv_room(store):
    """VIP01 at 88.00 per hour, Available."""
    from pos_api.repositories import get_ktv_room_repository

    return get_ktv_room_repository(store).add(
        KTVRoom(id="VIP01", name="VIP 01", room_type=KTVRoomType.VIP, hourly_rate_cents=8_800)
    )


@pytest.fixture(scope="function")
def client(db_session, clock, printer):
    """
    Create a test client with database session, clock and printer overrides.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_receipt_printer] = lambda: printer

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
