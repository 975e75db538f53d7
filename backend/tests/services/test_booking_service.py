"""
Tests for stayease/services/booking_service.py
Covers: create_booking, get_booking_for, cancel_booking, update_status,
        list_user_bookings, list_all_bookings
"""
import asyncio
import pytest
from datetime import date

from stayease.exceptions import (
    NotFoundError, ForbiddenError, BookingStateError, InvalidBookingError
)
from stayease.models.entities import BookingStatus
from stayease.models.schemas import BookingCreate
from stayease.services.booking_service import BookingService


# ── helpers ──────────────────────────────────────────────────────────

def _user(storage, username, is_admin=False):
    return asyncio.run(storage.create_user({
        "username": username, "password_hash": "x", "is_admin": is_admin
    }))


def _request(hotel_id, room_id, **overrides):
    fields = {
        "hotel_id": hotel_id,
        "room_id": room_id,
        "check_in_date": date(2026, 11, 1),
        "check_out_date": date(2026, 11, 3),
        "guest_count": 1,
        "total_price": 268.8,
    }
    fields.update(overrides)
    return BookingCreate(**fields)


@pytest.fixture
def service(storage):
    return BookingService(storage)


@pytest.fixture
def alice(storage):
    return _user(storage, "alice")


# ── tests ────────────────────────────────────────────────────────────

class TestCreateBooking:

    def test_defaults_to_confirmed(self, service, alice, sample_hotel, sample_room):
        booking = asyncio.run(service.create_booking(alice, _request(sample_hotel.id, sample_room.id)))

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.user_id == alice.id
        assert booking.created_at is not None

    def test_keeps_pending_payment(self, service, alice, sample_hotel, sample_room):
        request = _request(sample_hotel.id, sample_room.id, status=BookingStatus.PENDING_PAYMENT)

        booking = asyncio.run(service.create_booking(alice, request))
        assert booking.status == BookingStatus.PENDING_PAYMENT

    def test_missing_room(self, service, alice, sample_hotel):
        with pytest.raises(NotFoundError) as exc:
            asyncio.run(service.create_booking(alice, _request(sample_hotel.id, 404)))
        assert exc.value.entity == "Room"

    def test_missing_hotel(self, service, alice, sample_room):
        with pytest.raises(NotFoundError) as exc:
            asyncio.run(service.create_booking(alice, _request(404, sample_room.id)))
        assert str(exc.value) == "Hotel not found"

    def test_room_from_another_hotel(self, service, storage, alice, sample_room):
        other = asyncio.run(storage.create_hotel({
            "name": "Harbour Inn", "location": "Boston", "description": "Quayside rooms",
            "rating": 4.0, "price_per_night": 120.0,
        }))

        with pytest.raises(InvalidBookingError) as exc:
            asyncio.run(service.create_booking(alice, _request(other.id, sample_room.id)))
        assert str(exc.value) == "Room does not belong to this hotel"
        assert asyncio.run(storage.get_all_bookings()) == []

    def test_guest_count_over_capacity(self, service, alice, sample_hotel, sample_room):
        request = _request(sample_hotel.id, sample_room.id, guest_count=sample_room.max_guests + 1)

        with pytest.raises(InvalidBookingError) as exc:
            asyncio.run(service.create_booking(alice, request))
        assert str(exc.value) == "Guest count exceeds room capacity"

    def test_guest_count_at_capacity(self, service, alice, sample_hotel, sample_room):
        request = _request(sample_hotel.id, sample_room.id, guest_count=sample_room.max_guests)
        assert asyncio.run(service.create_booking(alice, request)).guest_count == 2


class TestCancelBooking:

    def test_transitions(self, service, storage, alice, sample_hotel, sample_room):
        booking = asyncio.run(service.create_booking(alice, _request(sample_hotel.id, sample_room.id)))

        cancelled = asyncio.run(service.cancel_booking(alice, booking.id))
        assert cancelled.status == BookingStatus.CANCELLED

        with pytest.raises(BookingStateError, match="already cancelled"):
            asyncio.run(service.cancel_booking(alice, booking.id))

    def test_completed_is_terminal(self, service, alice, sample_hotel, sample_room):
        booking = asyncio.run(service.create_booking(alice, _request(sample_hotel.id, sample_room.id)))
        asyncio.run(service.update_status(booking.id, BookingStatus.COMPLETED))

        with pytest.raises(BookingStateError):
            asyncio.run(service.cancel_booking(alice, booking.id))

    def test_other_user_is_forbidden(self, service, storage, alice, sample_hotel, sample_room):
        bob = _user(storage, "bob")
        booking = asyncio.run(service.create_booking(alice, _request(sample_hotel.id, sample_room.id)))

        with pytest.raises(ForbiddenError):
            asyncio.run(service.cancel_booking(bob, booking.id))

    def test_admin_may_cancel(self, service, storage, alice, sample_hotel, sample_room):
        admin = _user(storage, "root", is_admin=True)
        booking = asyncio.run(service.create_booking(alice, _request(sample_hotel.id, sample_room.id)))

        assert asyncio.run(service.cancel_booking(admin, booking.id)).status == BookingStatus.CANCELLED


class TestListings:

    def test_user_listing_joins_summaries(self, service, alice, sample_hotel, sample_room):
        asyncio.run(service.create_booking(alice, _request(sample_hotel.id, sample_room.id)))

        details = asyncio.run(service.list_user_bookings(alice))

        assert len(details) == 1
        assert details[0].hotel.name == sample_hotel.name
        assert details[0].room.bed_type == sample_room.bed_type

    def test_summaries_absent_after_hotel_deleted(self, service, storage, alice, sample_hotel, sample_room):
        asyncio.run(service.create_booking(alice, _request(sample_hotel.id, sample_room.id)))
        asyncio.run(storage.delete_hotel(sample_hotel.id))

        details = asyncio.run(service.list_user_bookings(alice))

        # Bookings survive; their references dangle
        assert len(details) == 1
        assert details[0].hotel is None
        assert details[0].room is None

    def test_admin_listing_covers_all_users(self, service, storage, alice, sample_hotel, sample_room):
        bob = _user(storage, "bob")
        asyncio.run(service.create_booking(alice, _request(sample_hotel.id, sample_room.id)))
        asyncio.run(service.create_booking(bob, _request(sample_hotel.id, sample_room.id)))

        assert len(asyncio.run(service.list_all_bookings())) == 2

    def test_update_status_missing(self, service):
        with pytest.raises(NotFoundError):
            asyncio.run(service.update_status(999, BookingStatus.COMPLETED))
