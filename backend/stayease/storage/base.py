"""
Storage port
The persistence contract used by the services and the HTTP layer.

Every operation is a coroutine. Lookups return None (or False / an empty list)
when nothing matches and never raise for "not found"; backend failures raise
StorageUnavailableError. Identifiers are opaque and only valid inside the
adapter instance that issued them.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from stayease.models.entities import (
    EntityId, User, Hotel, HotelAmenity, Room, RoomAmenity, Booking
)
from stayease.storage.sessions import SessionStore


class Storage(ABC):
    """Storage adapter interface"""

    name: str = "storage"
    session_store: SessionStore

    # ============== Lifecycle ==============

    async def connect(self) -> None:
        """Open backend resources; called once before serving requests"""

    async def close(self) -> None:
        """Release backend resources"""

    # ============== Users ==============

    @abstractmethod
    async def get_user(self, user_id: EntityId) -> Optional[User]:
        """Get a user by id"""

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username"""

    @abstractmethod
    async def create_user(self, data: Dict[str, Any]) -> User:
        """Create a user; data carries the already hashed password"""

    # ============== Hotels ==============

    @abstractmethod
    async def get_all_hotels(self) -> List[Hotel]:
        """List every hotel"""

    @abstractmethod
    async def get_hotel(self, hotel_id: EntityId) -> Optional[Hotel]:
        """Get a hotel by id"""

    @abstractmethod
    async def create_hotel(self, data: Dict[str, Any]) -> Hotel:
        """Create a hotel"""

    @abstractmethod
    async def update_hotel(self, hotel_id: EntityId, fields: Dict[str, Any]) -> Optional[Hotel]:
        """Merge fields into a hotel"""

    @abstractmethod
    async def delete_hotel(self, hotel_id: EntityId) -> bool:
        """Delete a hotel with its amenities and rooms"""

    # ============== Hotel amenities ==============

    @abstractmethod
    async def get_hotel_amenities(self, hotel_id: EntityId) -> List[HotelAmenity]:
        """List the amenities of a hotel"""

    @abstractmethod
    async def create_hotel_amenity(self, data: Dict[str, Any]) -> HotelAmenity:
        """Create a hotel amenity"""

    # ============== Rooms ==============

    @abstractmethod
    async def get_rooms_for_hotel(self, hotel_id: EntityId) -> List[Room]:
        """List the rooms of a hotel"""

    @abstractmethod
    async def get_room(self, room_id: EntityId) -> Optional[Room]:
        """Get a room by id"""

    @abstractmethod
    async def create_room(self, data: Dict[str, Any]) -> Room:
        """Create a room"""

    @abstractmethod
    async def update_room(self, room_id: EntityId, fields: Dict[str, Any]) -> Optional[Room]:
        """Merge fields into a room"""

    @abstractmethod
    async def delete_room(self, room_id: EntityId) -> bool:
        """Delete a room with its amenities"""

    # ============== Room amenities ==============

    @abstractmethod
    async def get_room_amenities(self, room_id: EntityId) -> List[RoomAmenity]:
        """List the amenities of a room"""

    @abstractmethod
    async def create_room_amenity(self, data: Dict[str, Any]) -> RoomAmenity:
        """Create a room amenity"""

    # ============== Bookings ==============

    @abstractmethod
    async def get_booking(self, booking_id: EntityId) -> Optional[Booking]:
        """Get a booking by id"""

    @abstractmethod
    async def get_user_bookings(self, user_id: EntityId) -> List[Booking]:
        """List the bookings of a user"""

    @abstractmethod
    async def get_all_bookings(self) -> List[Booking]:
        """List every booking"""

    @abstractmethod
    async def create_booking(self, data: Dict[str, Any]) -> Booking:
        """Create a booking, stamping createdAt"""

    @abstractmethod
    async def update_booking_status(self, booking_id: EntityId, status: str) -> Optional[Booking]:
        """Set the status of a booking"""
