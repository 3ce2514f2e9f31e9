from datetime import date
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv
import pytest

# Load environment variables for tests before the app reads its settings
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.auth import create_access_token
from app.database import get_db
from app.models import (
    Booking,
    BookingStatus,
    ProviderProfile,
    Service,
    ServiceCategory,
    User,
    UserRole,
)
from app.models.base import BaseModel
from app.notifications.sink import NotificationEvent
from app.utils.auth import get_password_hash

PASSWORD = "Secret123"


class RecordingNotificationSink:
    """Keep published events in memory instead of writing rows."""

    def __init__(self) -> None:
        self.events: list[tuple[int, NotificationEvent]] = []

    def publish(self, account_id: int, event: NotificationEvent) -> None:
        self.events.append((account_id, event))

    def for_account(self, account_id: int) -> list[NotificationEvent]:
        return [event for recipient, event in self.events if recipient == account_id]


@pytest.fixture
def Session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    BaseModel.metadata.create_all(engine)
    yield sessionmaker(bind=engine)
    engine.dispose()


@pytest.fixture
def db(Session):
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(Session):
    def override_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=UserRole.CUSTOMER, **fields):
        counter["n"] += 1
        values = {
            "email": f"user{counter['n']}@test.lv",
            "password": get_password_hash(PASSWORD),
            "first_name": "Test",
            "last_name": f"User{counter['n']}",
            "role": role,
        }
        values.update(fields)
        user = User(**values)
        if role == UserRole.PROVIDER:
            user.provider_profile = ProviderProfile(business_name=f"Biz {counter['n']}")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def category(db):
    cat = ServiceCategory(slug="cleaning", name_lv="Uzkopšana", name_ru="Уборка", name_en="Cleaning")
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


@pytest.fixture
def make_service(db, category):
    def _make(provider, **fields):
        values = {
            "provider_id": provider.id,
            "category_id": category.id,
            "title": "Dzīvokļa uzkopšana",
            "description": "Full apartment cleaning",
            "price": Decimal("45.00"),
            "duration_minutes": 120,
            "city": "Riga",
        }
        values.update(fields)
        service = Service(**values)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    return _make


@pytest.fixture
def make_booking(db):
    def _make(customer, service, status=BookingStatus.PENDING, **fields):
        values = {
            "customer_id": customer.id,
            "provider_id": service.provider_id,
            "service_id": service.id,
            "scheduled_date": date(2030, 1, 1),
            "scheduled_time": "10:00",
            "total_amount": service.price,
            "address": "Brivibas iela 1",
            "city": "Riga",
            "status": status,
        }
        values.update(fields)
        booking = Booking(**values)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}

    return _headers
