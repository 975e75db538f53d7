"""
Hotel catalogue API tests
"""
import asyncio
import pytest
from fastapi.testclient import TestClient

from stayease.main import create_app
from stayease.storage.sql import SqlStorage


@pytest.fixture
def sql_client(settings):
    """Anonymous client over a SQLite-backed app"""
    storage = SqlStorage("sqlite:///:memory:")
    asyncio.run(storage.connect())
    with TestClient(create_app(settings=settings, storage=storage)) as test_client:
        yield test_client
    asyncio.run(storage.close())


def _add_hotel(storage, name, location, rating, price, discount=0):
    return asyncio.run(storage.create_hotel({
        "name": name,
        "location": location,
        "description": f"{name} description",
        "rating": rating,
        "price_per_night": price,
        "discount_percentage": discount,
    }))


class TestListHotels:
    """GET /api/hotels"""

    def test_empty_catalogue(self, client: TestClient):
        response = client.get("/api/hotels")

        assert response.status_code == 200
        assert response.json() == []

    def test_camel_case_fields(self, client: TestClient, sample_hotel):
        data = client.get("/api/hotels").json()

        assert len(data) == 1
        hotel = data[0]
        assert hotel["id"] == sample_hotel.id
        assert hotel["pricePerNight"] == 200.0
        assert hotel["discountPercentage"] == 10
        assert hotel["reviewCount"] == 120
        assert hotel["status"] == "active"

    def test_filter_by_location(self, client: TestClient, storage):
        _add_hotel(storage, "A", "Paris, France", 4, 100)
        _add_hotel(storage, "B", "Rome, Italy", 4, 100)

        data = client.get("/api/hotels", params={"location": "paris"}).json()
        assert [h["name"] for h in data] == ["A"]

    def test_filter_by_discounted_price(self, client: TestClient, storage):
        _add_hotel(storage, "Cheap", "X", 3, 80)
        _add_hotel(storage, "Discounted", "X", 4, 300, discount=50)
        _add_hotel(storage, "Pricey", "X", 5, 400)

        data = client.get("/api/hotels", params={"minPrice": 100, "maxPrice": 200}).json()
        assert [h["name"] for h in data] == ["Discounted"]

    def test_filter_by_star_rating(self, client: TestClient, storage):
        _add_hotel(storage, "Four and a half", "X", 4.5, 100)
        _add_hotel(storage, "Three", "X", 3, 100)
        _add_hotel(storage, "Five", "X", 5, 100)

        data = client.get("/api/hotels", params=[("rating", 4), ("rating", 5)]).json()
        assert sorted(h["name"] for h in data) == ["Five", "Four and a half"]

    def test_sort_by_price(self, client: TestClient, storage):
        _add_hotel(storage, "Mid", "X", 3, 150)
        _add_hotel(storage, "Low", "X", 3, 300, discount=80)
        _add_hotel(storage, "High", "X", 3, 250)

        low = client.get("/api/hotels", params={"sort": "price_low"}).json()
        high = client.get("/api/hotels", params={"sort": "price_high"}).json()
        assert [h["name"] for h in low] == ["Low", "Mid", "High"]
        assert [h["name"] for h in high] == ["High", "Mid", "Low"]

    def test_sort_recommended(self, client: TestClient, storage):
        _add_hotel(storage, "Good", "X", 4, 100, discount=5)
        _add_hotel(storage, "Best", "X", 5, 100)
        _add_hotel(storage, "Good deal", "X", 4, 100, discount=25)

        data = client.get("/api/hotels", params={"sort": "recommended"}).json()
        assert [h["name"] for h in data] == ["Best", "Good deal", "Good"]

    def test_unknown_sort(self, client: TestClient):
        response = client.get("/api/hotels", params={"sort": "cheapest"})

        assert response.status_code == 400
        assert response.json()["message"].startswith("sort")


class TestHotelDetail:
    """GET /api/hotels/{id}"""

    def test_detail_includes_amenities_and_rooms(self, client: TestClient, sample_hotel, sample_room):
        response = client.get(f"/api/hotels/{sample_hotel.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Seaside Resort"
        assert [a["name"] for a in data["amenities"]] == ["Pool"]
        assert len(data["rooms"]) == 1
        room = data["rooms"][0]
        assert room["id"] == sample_room.id
        assert room["bedType"] == "King"
        assert [a["name"] for a in room["amenities"]] == ["Minibar"]

    def test_missing_hotel(self, client: TestClient):
        response = client.get("/api/hotels/999")

        assert response.status_code == 404
        assert response.json() == {"message": "Hotel not found"}

    def test_non_numeric_id(self, client: TestClient):
        assert client.get("/api/hotels/abc").status_code == 404

    def test_non_ascii_digit_id(self, client: TestClient):
        response = client.get("/api/hotels/%C2%B2")

        assert response.status_code == 404
        assert response.json() == {"message": "Hotel not found"}

    def test_id_too_large_for_sql(self, sql_client: TestClient):
        response = sql_client.get("/api/hotels/99999999999999999999999")

        assert response.status_code == 404
        assert response.json() == {"message": "Hotel not found"}

        quote = sql_client.get("/api/rooms/99999999999999999999999/quote", params={
            "checkIn": "2026-11-01", "checkOut": "2026-11-04"
        })
        assert quote.status_code == 404


class TestRoomQuote:
    """GET /api/rooms/{id}/quote"""

    def test_quote(self, client: TestClient, sample_room):
        response = client.get(f"/api/rooms/{sample_room.id}/quote", params={
            "checkIn": "2026-11-01", "checkOut": "2026-11-04"
        })

        assert response.status_code == 200
        # 150 with 20% off for 3 nights
        assert response.json() == {
            "nights": 3,
            "nightlyRate": 120.0,
            "subtotal": 360.0,
            "taxes": 43.2,
            "discountAmount": 0.0,
            "total": 403.2,
        }

    def test_quote_with_booking_discount(self, client: TestClient, sample_room):
        data = client.get(f"/api/rooms/{sample_room.id}/quote", params={
            "checkIn": "2026-11-01", "checkOut": "2026-11-04", "discount": 10
        }).json()

        assert data["discountAmount"] == 36.0
        assert data["total"] == 367.2

    def test_quote_rejects_reversed_dates(self, client: TestClient, sample_room):
        response = client.get(f"/api/rooms/{sample_room.id}/quote", params={
            "checkIn": "2026-11-04", "checkOut": "2026-11-01"
        })
        assert response.status_code == 400

    def test_quote_missing_room(self, client: TestClient):
        response = client.get("/api/rooms/42/quote", params={
            "checkIn": "2026-11-01", "checkOut": "2026-11-02"
        })

        assert response.status_code == 404
        assert response.json() == {"message": "Room not found"}
