"""
Booking service
Booking creation, ownership checks and the status lifecycle
"""
import logging
from typing import List, Optional
from stayease.exceptions import (
    NotFoundError, ForbiddenError, BookingStateError, InvalidBookingError
)
from stayease.models.entities import EntityId, User, Booking, BookingStatus
from stayease.models.schemas import (
    BookingCreate, BookingDetail, HotelSummary, RoomSummary
)
from stayease.storage.base import Storage

logger = logging.getLogger(__name__)

# States a booking can be cancelled from
CANCELLABLE_STATES = {BookingStatus.CONFIRMED, BookingStatus.PENDING_PAYMENT}


class BookingService:
    """Booking service"""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def create_booking(self, user: User, data: BookingCreate) -> Booking:
        """Create a booking for the user"""
        room = await self.storage.get_room(data.room_id)
        if not room:
            raise NotFoundError("Room")

        hotel = await self.storage.get_hotel(data.hotel_id)
        if not hotel:
            raise NotFoundError("Hotel")

        if str(room.hotel_id) != str(hotel.id):
            raise InvalidBookingError("Room does not belong to this hotel")
        if data.guest_count > room.max_guests:
            raise InvalidBookingError("Guest count exceeds room capacity")

        fields = data.model_dump()
        fields["user_id"] = user.id
        fields["status"] = data.status or BookingStatus.CONFIRMED

        booking = await self.storage.create_booking(fields)
        logger.info(f"Booking {booking.id} created by user {user.id} for room {room.id}")
        return booking

    async def get_booking(self, booking_id: EntityId) -> Booking:
        """Get a booking"""
        booking = await self.storage.get_booking(booking_id)
        if not booking:
            raise NotFoundError("Booking")
        return booking

    async def get_booking_for(self, user: User, booking_id: EntityId) -> Booking:
        """Get a booking the user owns, or any booking for an admin"""
        booking = await self.get_booking(booking_id)
        if not user.is_admin and str(booking.user_id) != str(user.id):
            raise ForbiddenError()
        return booking

    async def list_user_bookings(self, user: User) -> List[BookingDetail]:
        """The user's bookings with hotel and room summaries"""
        bookings = await self.storage.get_user_bookings(user.id)
        return [await self.to_detail(b) for b in bookings]

    async def list_all_bookings(self) -> List[BookingDetail]:
        """Every booking, for admins"""
        bookings = await self.storage.get_all_bookings()
        return [await self.to_detail(b) for b in bookings]

    async def cancel_booking(self, user: User, booking_id: EntityId) -> Booking:
        """Cancel a booking as its owner or an admin"""
        booking = await self.get_booking_for(user, booking_id)

        if booking.status == BookingStatus.CANCELLED:
            raise BookingStateError("Booking is already cancelled")
        if booking.status not in CANCELLABLE_STATES:
            raise BookingStateError(f"Cannot cancel a {booking.status.value} booking")

        updated = await self.storage.update_booking_status(booking.id, BookingStatus.CANCELLED.value)
        if not updated:
            raise NotFoundError("Booking")
        logger.info(f"Booking {booking.id} cancelled by user {user.id}")
        return updated

    async def update_status(self, booking_id: EntityId, status: BookingStatus) -> Booking:
        """Set any status; admin only"""
        updated = await self.storage.update_booking_status(booking_id, status.value)
        if not updated:
            raise NotFoundError("Booking")
        logger.info(f"Booking {booking_id} status set to {status.value}")
        return updated

    async def to_detail(self, booking: Booking) -> BookingDetail:
        """Join hotel and room summaries onto a booking"""
        hotel = await self.storage.get_hotel(booking.hotel_id)
        room = await self.storage.get_room(booking.room_id)
        return BookingDetail(
            **booking.model_dump(),
            hotel=self._hotel_summary(hotel),
            room=self._room_summary(room),
        )

    @staticmethod
    def _hotel_summary(hotel) -> Optional[HotelSummary]:
        return HotelSummary.model_validate(hotel.model_dump()) if hotel else None

    @staticmethod
    def _room_summary(room) -> Optional[RoomSummary]:
        return RoomSummary.model_validate(room.model_dump()) if room else None
