"""
In-memory storage adapter
One dict per entity keyed by an auto-incrementing integer id. Nothing
survives a restart; meant for development, demos and tests.
"""
import itertools
import logging
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from stayease.models.entities import (
    EntityId, User, Hotel, HotelAmenity, Room, RoomAmenity, Booking
)
from stayease.storage.base import Storage
from stayease.storage.sessions import MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _key(value: Any) -> Optional[int]:
    """Coerce an opaque id to this adapter's integer key"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        # ASCII only: int() rejects digits such as superscripts
        if value.isascii() and value.isdigit():
            return int(value)
    return None


def _copy(record: Optional[T]) -> Optional[T]:
    return record.model_copy(deep=True) if record is not None else None


class MemoryStorage(Storage):
    """In-memory storage"""

    name = "memory"

    def __init__(self, session_store: Optional[SessionStore] = None):
        self.session_store = session_store if session_store is not None else MemorySessionStore()

        self._users: Dict[int, User] = {}
        self._hotels: Dict[int, Hotel] = {}
        self._hotel_amenities: Dict[int, HotelAmenity] = {}
        self._rooms: Dict[int, Room] = {}
        self._room_amenities: Dict[int, RoomAmenity] = {}
        self._bookings: Dict[int, Booking] = {}

        # Id counters
        self._user_ids = itertools.count(1)
        self._hotel_ids = itertools.count(1)
        self._hotel_amenity_ids = itertools.count(1)
        self._room_ids = itertools.count(1)
        self._room_amenity_ids = itertools.count(1)
        self._booking_ids = itertools.count(1)

    # ============== Users ==============

    async def get_user(self, user_id: EntityId) -> Optional[User]:
        return _copy(self._users.get(_key(user_id)))

    async def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return _copy(user)
        return None

    async def create_user(self, data: Dict[str, Any]) -> User:
        user = User(id=next(self._user_ids), **data)
        self._users[user.id] = user
        return _copy(user)

    # ============== Hotels ==============

    async def get_all_hotels(self) -> List[Hotel]:
        return [_copy(h) for h in self._hotels.values()]

    async def get_hotel(self, hotel_id: EntityId) -> Optional[Hotel]:
        return _copy(self._hotels.get(_key(hotel_id)))

    async def create_hotel(self, data: Dict[str, Any]) -> Hotel:
        hotel = Hotel(id=next(self._hotel_ids), **data)
        self._hotels[hotel.id] = hotel
        return _copy(hotel)

    async def update_hotel(self, hotel_id: EntityId, fields: Dict[str, Any]) -> Optional[Hotel]:
        key = _key(hotel_id)
        hotel = self._hotels.get(key)
        if hotel is None:
            return None
        updated = hotel.model_copy(update=fields)
        self._hotels[key] = updated
        return _copy(updated)

    async def delete_hotel(self, hotel_id: EntityId) -> bool:
        key = _key(hotel_id)
        if self._hotels.pop(key, None) is None:
            return False
        for amenity_id in [a.id for a in self._hotel_amenities.values() if a.hotel_id == key]:
            del self._hotel_amenities[amenity_id]
        for room_id in [r.id for r in self._rooms.values() if r.hotel_id == key]:
            await self.delete_room(room_id)
        return True

    # ============== Hotel amenities ==============

    async def get_hotel_amenities(self, hotel_id: EntityId) -> List[HotelAmenity]:
        key = _key(hotel_id)
        return [_copy(a) for a in self._hotel_amenities.values() if a.hotel_id == key]

    async def create_hotel_amenity(self, data: Dict[str, Any]) -> HotelAmenity:
        fields = {**data, "hotel_id": _key(data["hotel_id"])}
        amenity = HotelAmenity(id=next(self._hotel_amenity_ids), **fields)
        self._hotel_amenities[amenity.id] = amenity
        return _copy(amenity)

    # ============== Rooms ==============

    async def get_rooms_for_hotel(self, hotel_id: EntityId) -> List[Room]:
        key = _key(hotel_id)
        return [_copy(r) for r in self._rooms.values() if r.hotel_id == key]

    async def get_room(self, room_id: EntityId) -> Optional[Room]:
        return _copy(self._rooms.get(_key(room_id)))

    async def create_room(self, data: Dict[str, Any]) -> Room:
        fields = {**data, "hotel_id": _key(data["hotel_id"])}
        room = Room(id=next(self._room_ids), **fields)
        self._rooms[room.id] = room
        return _copy(room)

    async def update_room(self, room_id: EntityId, fields: Dict[str, Any]) -> Optional[Room]:
        key = _key(room_id)
        room = self._rooms.get(key)
        if room is None:
            return None
        if "hotel_id" in fields:
            fields = {**fields, "hotel_id": _key(fields["hotel_id"])}
        updated = room.model_copy(update=fields)
        self._rooms[key] = updated
        return _copy(updated)

    async def delete_room(self, room_id: EntityId) -> bool:
        key = _key(room_id)
        if self._rooms.pop(key, None) is None:
            return False
        for amenity_id in [a.id for a in self._room_amenities.values() if a.room_id == key]:
            del self._room_amenities[amenity_id]
        return True

    # ============== Room amenities ==============

    async def get_room_amenities(self, room_id: EntityId) -> List[RoomAmenity]:
        key = _key(room_id)
        return [_copy(a) for a in self._room_amenities.values() if a.room_id == key]

    async def create_room_amenity(self, data: Dict[str, Any]) -> RoomAmenity:
        fields = {**data, "room_id": _key(data["room_id"])}
        amenity = RoomAmenity(id=next(self._room_amenity_ids), **fields)
        self._room_amenities[amenity.id] = amenity
        return _copy(amenity)

    # ============== Bookings ==============

    async def get_booking(self, booking_id: EntityId) -> Optional[Booking]:
        return _copy(self._bookings.get(_key(booking_id)))

    async def get_user_bookings(self, user_id: EntityId) -> List[Booking]:
        key = _key(user_id)
        return [_copy(b) for b in self._bookings.values() if b.user_id == key]

    async def get_all_bookings(self) -> List[Booking]:
        return [_copy(b) for b in self._bookings.values()]

    async def create_booking(self, data: Dict[str, Any]) -> Booking:
        fields = {
            **data,
            "user_id": _key(data["user_id"]),
            "hotel_id": _key(data["hotel_id"]),
            "room_id": _key(data["room_id"]),
            "created_at": datetime.now(UTC),
        }
        booking = Booking(id=next(self._booking_ids), **fields)
        self._bookings[booking.id] = booking
        return _copy(booking)

    async def update_booking_status(self, booking_id: EntityId, status: str) -> Optional[Booking]:
        key = _key(booking_id)
        booking = self._bookings.get(key)
        if booking is None:
            return None
        updated = Booking.model_validate({**booking.model_dump(), "status": status})
        self._bookings[key] = updated
        return _copy(updated)
