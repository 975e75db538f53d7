"""
Hotel service
Catalogue listing, hotel detail assembly and admin management of hotels and rooms
"""
import logging
import math
from typing import List, Optional
from stayease.exceptions import NotFoundError
from stayease.models.entities import EntityId, Hotel, Room
from stayease.models.schemas import (
    HotelCreate, HotelUpdate, RoomCreate, RoomUpdate,
    HotelDetail, RoomWithAmenities
)
from stayease.services.price_service import discounted_price
from stayease.storage.base import Storage

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("recommended", "price_low", "price_high", "rating")


def _nightly(hotel: Hotel) -> float:
    return discounted_price(hotel.price_per_night, hotel.discount_percentage)


def filter_hotels(hotels: List[Hotel], location: Optional[str] = None,
                  min_price: Optional[float] = None, max_price: Optional[float] = None,
                  ratings: Optional[List[int]] = None) -> List[Hotel]:
    """Apply the listing filters; None means no constraint"""
    results = list(hotels)

    if location:
        needle = location.lower()
        results = [h for h in results if needle in h.location.lower()]
    if min_price is not None:
        results = [h for h in results if _nightly(h) >= min_price]
    if max_price is not None:
        results = [h for h in results if _nightly(h) <= max_price]
    if ratings:
        wanted = set(ratings)
        results = [h for h in results if math.floor(h.rating) in wanted]

    return results


def sort_hotels(hotels: List[Hotel], sort: str) -> List[Hotel]:
    """Order hotels by one of SORT_OPTIONS"""
    if sort == "price_low":
        return sorted(hotels, key=_nightly)
    if sort == "price_high":
        return sorted(hotels, key=_nightly, reverse=True)
    if sort == "rating":
        return sorted(hotels, key=lambda h: h.rating, reverse=True)
    # recommended: rating first, then the bigger discount
    return sorted(hotels, key=lambda h: (h.rating, h.discount_percentage or 0), reverse=True)


class HotelService:
    """Hotel service"""

    def __init__(self, storage: Storage):
        self.storage = storage

    # ============== Catalogue ==============

    async def list_hotels(self, location: Optional[str] = None,
                          min_price: Optional[float] = None,
                          max_price: Optional[float] = None,
                          ratings: Optional[List[int]] = None,
                          sort: Optional[str] = None) -> List[Hotel]:
        """List hotels, optionally filtered and sorted"""
        hotels = await self.storage.get_all_hotels()
        hotels = filter_hotels(hotels, location, min_price, max_price, ratings)
        if sort:
            hotels = sort_hotels(hotels, sort)
        return hotels

    async def get_hotel_detail(self, hotel_id: EntityId) -> HotelDetail:
        """Hotel with its amenities and rooms, each room with its amenities"""
        hotel = await self.storage.get_hotel(hotel_id)
        if not hotel:
            raise NotFoundError("Hotel")

        amenities = await self.storage.get_hotel_amenities(hotel.id)
        rooms = []
        for room in await self.storage.get_rooms_for_hotel(hotel.id):
            room_amenities = await self.storage.get_room_amenities(room.id)
            rooms.append(RoomWithAmenities(**room.model_dump(), amenities=room_amenities))

        return HotelDetail(**hotel.model_dump(), amenities=amenities, rooms=rooms)

    async def get_room(self, room_id: EntityId) -> Room:
        """Get a room"""
        room = await self.storage.get_room(room_id)
        if not room:
            raise NotFoundError("Room")
        return room

    # ============== Hotel management ==============

    async def create_hotel(self, data: HotelCreate) -> Hotel:
        """Create a hotel and its amenities"""
        hotel = await self.storage.create_hotel(data.model_dump(exclude={"amenities"}))
        for amenity in data.amenities:
            await self.storage.create_hotel_amenity({"hotel_id": hotel.id, **amenity.model_dump()})
        logger.info(f"Hotel {hotel.id} created: {hotel.name}")
        return hotel

    async def update_hotel(self, hotel_id: EntityId, data: HotelUpdate) -> Hotel:
        """Partially update a hotel"""
        hotel = await self.storage.update_hotel(hotel_id, data.model_dump(exclude_unset=True))
        if not hotel:
            raise NotFoundError("Hotel")
        return hotel

    async def delete_hotel(self, hotel_id: EntityId) -> None:
        """Delete a hotel with its amenities and rooms"""
        if not await self.storage.delete_hotel(hotel_id):
            raise NotFoundError("Hotel")
        logger.info(f"Hotel {hotel_id} deleted")

    # ============== Room management ==============

    async def create_room(self, data: RoomCreate) -> Room:
        """Create a room and its amenities"""
        if not await self.storage.get_hotel(data.hotel_id):
            raise NotFoundError("Hotel")

        room = await self.storage.create_room(data.model_dump(exclude={"amenities"}))
        for amenity in data.amenities:
            await self.storage.create_room_amenity({"room_id": room.id, **amenity.model_dump()})
        logger.info(f"Room {room.id} created in hotel {room.hotel_id}")
        return room

    async def update_room(self, room_id: EntityId, data: RoomUpdate) -> Room:
        """Partially update a room; moving it needs an existing hotel"""
        fields = data.model_dump(exclude_unset=True)
        if "hotel_id" in fields and not await self.storage.get_hotel(fields["hotel_id"]):
            raise NotFoundError("Hotel")

        room = await self.storage.update_room(room_id, fields)
        if not room:
            raise NotFoundError("Room")
        return room

    async def delete_room(self, room_id: EntityId) -> None:
        """Delete a room with its amenities"""
        if not await self.storage.delete_room(room_id):
            raise NotFoundError("Room")
        logger.info(f"Room {room_id} deleted")
