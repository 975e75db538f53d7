# Entity records and API schemas
from stayease.models.entities import (
    EntityId, HotelStatus, BookingStatus,
    User, Hotel, HotelAmenity, Room, RoomAmenity, Booking
)

__all__ = [
    'EntityId', 'HotelStatus', 'BookingStatus',
    'User', 'Hotel', 'HotelAmenity', 'Room', 'RoomAmenity', 'Booking'
]
