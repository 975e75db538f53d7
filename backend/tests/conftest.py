"""
Pytest configuration and shared fixtures
"""
import asyncio
import pytest
from fastapi.testclient import TestClient

from stayease.config import Settings
from stayease.main import create_app
from stayease.security.auth import get_password_hash
from stayease.storage.memory import MemoryStorage

USER_PASSWORD = "secret1"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
def settings():
    """Test settings, independent of the environment"""
    return Settings(
        _env_file=None,
        DB_TYPE="memory",
        SESSION_SECRET="test-session-secret",
        ADMIN_PASSWORD=None,
    )


@pytest.fixture
def storage():
    """In-memory storage"""
    return MemoryStorage()


@pytest.fixture
def app(settings, storage):
    """Application wired to the test storage"""
    return create_app(settings=settings, storage=storage)


@pytest.fixture
def client(app):
    """Anonymous test client"""
    with TestClient(app) as test_client:
        yield test_client


# ============== Authentication Fixtures ==============

def register(client: TestClient, username: str = "alice", password: str = USER_PASSWORD, **extra):
    """Register through the API; the client keeps the session cookie"""
    return client.post("/api/register", json={"username": username, "password": password, **extra})


@pytest.fixture
def user_client(app):
    """Client logged in as the regular user alice"""
    with TestClient(app) as test_client:
        response = register(test_client, "alice", email="alice@example.com")
        assert response.status_code == 201
        yield test_client


@pytest.fixture
def other_user_client(app):
    """Client logged in as the regular user bob"""
    with TestClient(app) as test_client:
        response = register(test_client, "bob")
        assert response.status_code == 201
        yield test_client


@pytest.fixture
def admin_user(storage):
    """Admin account created directly in storage"""
    return asyncio.run(storage.create_user({
        "username": "admin",
        "password_hash": get_password_hash(ADMIN_PASSWORD),
        "is_admin": True,
    }))


@pytest.fixture
def admin_client(app, admin_user):
    """Client logged in as admin"""
    with TestClient(app) as test_client:
        response = test_client.post("/api/login", json={
            "username": "admin",
            "password": ADMIN_PASSWORD
        })
        assert response.status_code == 200
        yield test_client


# ============== Entity Fixtures ==============

@pytest.fixture
def sample_hotel(storage):
    """A hotel with one amenity"""
    hotel = asyncio.run(storage.create_hotel({
        "name": "Seaside Resort",
        "location": "Miami, Florida",
        "description": "Beachfront hotel",
        "rating": 4.5,
        "review_count": 120,
        "price_per_night": 200.0,
        "discount_percentage": 10,
    }))
    asyncio.run(storage.create_hotel_amenity({
        "hotel_id": hotel.id, "name": "Pool", "icon": "pool"
    }))
    return hotel


@pytest.fixture
def sample_room(storage, sample_hotel):
    """A room in the sample hotel with one amenity"""
    room = asyncio.run(storage.create_room({
        "hotel_id": sample_hotel.id,
        "name": "Ocean View King",
        "description": "King bed facing the ocean",
        "max_guests": 2,
        "bed_type": "King",
        "size": "40 m2",
        "view": "Ocean",
        "price_per_night": 150.0,
        "discount_percentage": 20,
    }))
    asyncio.run(storage.create_room_amenity({
        "room_id": room.id, "name": "Minibar", "icon": "glass"
    }))
    return room


@pytest.fixture
def booking_payload(sample_hotel, sample_room):
    """Valid booking request body"""
    return {
        "hotelId": sample_hotel.id,
        "roomId": sample_room.id,
        "checkInDate": "2026-11-01",
        "checkOutDate": "2026-11-04",
        "guestCount": 2,
        "totalPrice": 403.2,
    }
