"""
Document storage adapter
One MongoDB collection per entity through pymongo's asyncio client.
Documents use the camelCase field names of the wire format; ids are the
native ObjectId surfaced to callers as strings.
"""
import functools
import logging
from datetime import date, datetime, time, UTC
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from stayease.exceptions import StorageUnavailableError
from stayease.models.entities import (
    EntityId, User, Hotel, HotelAmenity, Room, RoomAmenity, Booking
)
from stayease.storage.base import Storage
from stayease.storage.sessions import MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_DATABASE = "hotel_booking_app"

# Reference fields stored as string ids
REFERENCE_FIELDS = ("userId", "hotelId", "roomId")
DATE_FIELDS = ("checkInDate", "checkOutDate")


def _object_id(value: Any) -> Optional[ObjectId]:
    """Parse an opaque id; anything that is not an ObjectId matches nothing"""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def _to_document(data: Dict[str, Any]) -> Dict[str, Any]:
    document = {}
    for name, value in data.items():
        field = to_camel(name)
        if isinstance(value, Enum):
            value = value.value
        if field in REFERENCE_FIELDS and value is not None:
            value = str(value)
        if field in DATE_FIELDS and isinstance(value, date) and not isinstance(value, datetime):
            # BSON has no date-only type
            value = datetime.combine(value, time.min, tzinfo=UTC)
        document[field] = value
    return document


def _from_document(entity_cls: Type[T], document: Optional[Dict[str, Any]]) -> Optional[T]:
    if document is None:
        return None
    fields = dict(document)
    fields["id"] = str(fields.pop("_id"))
    for field in DATE_FIELDS:
        if isinstance(fields.get(field), datetime):
            fields[field] = fields[field].date()
    return entity_cls.model_validate(fields)


def _guarded(method):
    """Turn driver failures into StorageUnavailableError"""
    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except PyMongoError as e:
            logger.error(f"Document storage operation '{method.__name__}' failed: {e}")
            raise StorageUnavailableError(f"Document store failed during {method.__name__}") from e
    return wrapper


class MongoStorage(Storage):
    """MongoDB storage"""

    name = "mongodb"

    def __init__(
        self,
        uri: str,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        socket_timeout_ms: int = 45000,
        session_store: Optional[SessionStore] = None,
        database=None,
    ):
        self.uri = uri
        self.session_store = session_store if session_store is not None else MemorySessionStore()
        if database is not None:
            self.client = None
            self.db = database
        else:
            self.client = AsyncMongoClient(
                uri,
                serverSelectionTimeoutMS=server_selection_timeout_ms,
                connectTimeoutMS=connect_timeout_ms,
                socketTimeoutMS=socket_timeout_ms,
                tz_aware=True,
            )
            self.db = self.client.get_default_database(default=DEFAULT_DATABASE)

        self.users = self.db["users"]
        self.hotels = self.db["hotels"]
        self.hotel_amenities = self.db["hotelamenities"]
        self.rooms = self.db["rooms"]
        self.room_amenities = self.db["roomamenities"]
        self.bookings = self.db["bookings"]

    # ============== Lifecycle ==============

    @_guarded
    async def connect(self) -> None:
        await self.db.command("ping")
        await self.users.create_index("username", unique=True)
        logger.info(f"Connected to MongoDB database '{self.db.name}'")

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()

    # ============== Generic document operations ==============

    async def _get(self, collection, entity_cls: Type[T], entity_id: EntityId) -> Optional[T]:
        oid = _object_id(entity_id)
        if oid is None:
            return None
        return _from_document(entity_cls, await collection.find_one({"_id": oid}))

    async def _find(self, collection, entity_cls: Type[T], query: Dict[str, Any]) -> List[T]:
        documents = await collection.find(query).to_list(length=None)
        return [_from_document(entity_cls, document) for document in documents]

    async def _insert(self, collection, entity_cls: Type[T], data: Dict[str, Any]) -> T:
        document = _to_document(data)
        result = await collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _from_document(entity_cls, document)

    async def _update(self, collection, entity_cls: Type[T], entity_id: EntityId,
                      fields: Dict[str, Any]) -> Optional[T]:
        oid = _object_id(entity_id)
        if oid is None:
            return None
        if not fields:
            return _from_document(entity_cls, await collection.find_one({"_id": oid}))
        document = await collection.find_one_and_update(
            {"_id": oid},
            {"$set": _to_document(fields)},
            return_document=ReturnDocument.AFTER,
        )
        return _from_document(entity_cls, document)

    # ============== Users ==============

    @_guarded
    async def get_user(self, user_id: EntityId) -> Optional[User]:
        return await self._get(self.users, User, user_id)

    @_guarded
    async def get_user_by_username(self, username: str) -> Optional[User]:
        return _from_document(User, await self.users.find_one({"username": username}))

    @_guarded
    async def create_user(self, data: Dict[str, Any]) -> User:
        return await self._insert(self.users, User, data)

    # ============== Hotels ==============

    @_guarded
    async def get_all_hotels(self) -> List[Hotel]:
        return await self._find(self.hotels, Hotel, {})

    @_guarded
    async def get_hotel(self, hotel_id: EntityId) -> Optional[Hotel]:
        return await self._get(self.hotels, Hotel, hotel_id)

    @_guarded
    async def create_hotel(self, data: Dict[str, Any]) -> Hotel:
        return await self._insert(self.hotels, Hotel, data)

    @_guarded
    async def update_hotel(self, hotel_id: EntityId, fields: Dict[str, Any]) -> Optional[Hotel]:
        return await self._update(self.hotels, Hotel, hotel_id, fields)

    @_guarded
    async def delete_hotel(self, hotel_id: EntityId) -> bool:
        oid = _object_id(hotel_id)
        if oid is None:
            return False
        result = await self.hotels.delete_one({"_id": oid})
        if result.deleted_count == 0:
            return False
        key = str(oid)
        rooms = await self.rooms.find({"hotelId": key}).to_list(length=None)
        room_ids = [str(room["_id"]) for room in rooms]
        if room_ids:
            await self.room_amenities.delete_many({"roomId": {"$in": room_ids}})
            await self.rooms.delete_many({"hotelId": key})
        await self.hotel_amenities.delete_many({"hotelId": key})
        return True

    # ============== Hotel amenities ==============

    @_guarded
    async def get_hotel_amenities(self, hotel_id: EntityId) -> List[HotelAmenity]:
        return await self._find(self.hotel_amenities, HotelAmenity, {"hotelId": str(hotel_id)})

    @_guarded
    async def create_hotel_amenity(self, data: Dict[str, Any]) -> HotelAmenity:
        return await self._insert(self.hotel_amenities, HotelAmenity, data)

    # ============== Rooms ==============

    @_guarded
    async def get_rooms_for_hotel(self, hotel_id: EntityId) -> List[Room]:
        return await self._find(self.rooms, Room, {"hotelId": str(hotel_id)})

    @_guarded
    async def get_room(self, room_id: EntityId) -> Optional[Room]:
        return await self._get(self.rooms, Room, room_id)

    @_guarded
    async def create_room(self, data: Dict[str, Any]) -> Room:
        return await self._insert(self.rooms, Room, data)

    @_guarded
    async def update_room(self, room_id: EntityId, fields: Dict[str, Any]) -> Optional[Room]:
        return await self._update(self.rooms, Room, room_id, fields)

    @_guarded
    async def delete_room(self, room_id: EntityId) -> bool:
        oid = _object_id(room_id)
        if oid is None:
            return False
        result = await self.rooms.delete_one({"_id": oid})
        if result.deleted_count == 0:
            return False
        await self.room_amenities.delete_many({"roomId": str(oid)})
        return True

    # ============== Room amenities ==============

    @_guarded
    async def get_room_amenities(self, room_id: EntityId) -> List[RoomAmenity]:
        return await self._find(self.room_amenities, RoomAmenity, {"roomId": str(room_id)})

    @_guarded
    async def create_room_amenity(self, data: Dict[str, Any]) -> RoomAmenity:
        return await self._insert(self.room_amenities, RoomAmenity, data)

    # ============== Bookings ==============

    @_guarded
    async def get_booking(self, booking_id: EntityId) -> Optional[Booking]:
        return await self._get(self.bookings, Booking, booking_id)

    @_guarded
    async def get_user_bookings(self, user_id: EntityId) -> List[Booking]:
        return await self._find(self.bookings, Booking, {"userId": str(user_id)})

    @_guarded
    async def get_all_bookings(self) -> List[Booking]:
        return await self._find(self.bookings, Booking, {})

    @_guarded
    async def create_booking(self, data: Dict[str, Any]) -> Booking:
        fields = {**data, "created_at": datetime.now(UTC)}
        for name in ("check_in_date", "check_out_date"):
            if isinstance(fields.get(name), str):
                fields[name] = date.fromisoformat(fields[name][:10])
        return await self._insert(self.bookings, Booking, fields)

    @_guarded
    async def update_booking_status(self, booking_id: EntityId, status: str) -> Optional[Booking]:
        return await self._update(self.bookings, Booking, booking_id, {"status": status})
