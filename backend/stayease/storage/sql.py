"""
Relational storage adapter
SQLAlchemy ORM over any SQLAlchemy URL (SQLite by default). Session work is
synchronous and runs in a worker thread so the port stays asynchronous.
"""
import logging
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from fastapi.concurrency import run_in_threadpool

from stayease.database import create_db_engine, create_session_factory, init_db
from stayease.exceptions import StorageUnavailableError
from stayease.models.entities import (
    EntityId, User, Hotel, HotelAmenity, Room, RoomAmenity, Booking
)
from stayease.models.tables import (
    UserRow, HotelRow, HotelAmenityRow, RoomRow, RoomAmenityRow, BookingRow
)
from stayease.storage.base import Storage
from stayease.storage.memory import _key
from stayease.storage.sessions import MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Signed 64-bit INTEGER range
MIN_ROW_ID = -(2 ** 63)
MAX_ROW_ID = 2 ** 63 - 1


def _row_key(value: Any) -> Optional[int]:
    """Integer key the database can bind, or None"""
    key = _key(value)
    if key is None or not MIN_ROW_ID <= key <= MAX_ROW_ID:
        return None
    return key


def _to_entity(entity_cls: Type[T], row) -> T:
    return entity_cls.model_validate(
        {column.key: getattr(row, column.key) for column in row.__table__.columns}
    )


def _plain(data: Dict[str, Any]) -> Dict[str, Any]:
    """Enum members to their values for the column types"""
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in data.items()}


class SqlStorage(Storage):
    """SQLAlchemy storage"""

    name = "sql"

    def __init__(self, database_url: str, session_store: Optional[SessionStore] = None,
                 engine: Optional[Engine] = None):
        self.database_url = database_url
        self.engine = engine or create_db_engine(database_url)
        self.SessionLocal = create_session_factory(self.engine)
        self.session_store = session_store if session_store is not None else MemorySessionStore()

    async def _run(self, operation: str, fn: Callable, *args) -> Any:
        try:
            return await run_in_threadpool(fn, *args)
        except OperationalError as e:
            logger.error(f"Relational storage operation '{operation}' failed: {e}")
            raise StorageUnavailableError(f"Relational store failed during {operation}") from e

    # ============== Lifecycle ==============

    async def connect(self) -> None:
        await self._run("connect", init_db, self.engine)
        logger.info("Relational storage ready")

    async def close(self) -> None:
        self.engine.dispose()

    # ============== Generic row operations ==============

    def _get(self, row_cls, entity_cls: Type[T], key: Optional[int]) -> Optional[T]:
        if key is None:
            return None
        with self.SessionLocal() as db:
            row = db.get(row_cls, key)
            return _to_entity(entity_cls, row) if row is not None else None

    def _list(self, row_cls, entity_cls: Type[T], *criteria) -> List[T]:
        with self.SessionLocal() as db:
            rows = db.scalars(select(row_cls).where(*criteria).order_by(row_cls.id)).all()
            return [_to_entity(entity_cls, row) for row in rows]

    def _create(self, row_cls, entity_cls: Type[T], data: Dict[str, Any]) -> T:
        with self.SessionLocal() as db:
            row = row_cls(**_plain(data))
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_entity(entity_cls, row)

    def _update(self, row_cls, entity_cls: Type[T], key: Optional[int],
                fields: Dict[str, Any]) -> Optional[T]:
        if key is None:
            return None
        with self.SessionLocal() as db:
            row = db.get(row_cls, key)
            if row is None:
                return None
            for name, value in _plain(fields).items():
                setattr(row, name, value)
            db.commit()
            db.refresh(row)
            return _to_entity(entity_cls, row)

    def _delete_room_rows(self, db, room_ids: List[int]) -> None:
        if room_ids:
            db.execute(delete(RoomAmenityRow).where(RoomAmenityRow.room_id.in_(room_ids)))
            db.execute(delete(RoomRow).where(RoomRow.id.in_(room_ids)))

    def _delete_hotel(self, key: Optional[int]) -> bool:
        if key is None:
            return False
        with self.SessionLocal() as db:
            hotel = db.get(HotelRow, key)
            if hotel is None:
                return False
            room_ids = list(db.scalars(select(RoomRow.id).where(RoomRow.hotel_id == key)))
            self._delete_room_rows(db, room_ids)
            db.execute(delete(HotelAmenityRow).where(HotelAmenityRow.hotel_id == key))
            db.delete(hotel)
            db.commit()
            return True

    def _delete_room(self, key: Optional[int]) -> bool:
        if key is None:
            return False
        with self.SessionLocal() as db:
            if db.get(RoomRow, key) is None:
                return False
            self._delete_room_rows(db, [key])
            db.commit()
            return True

    def _user_by_username(self, username: str) -> Optional[User]:
        with self.SessionLocal() as db:
            row = db.scalars(select(UserRow).where(UserRow.username == username)).first()
            return _to_entity(User, row) if row is not None else None

    # ============== Users ==============

    async def get_user(self, user_id: EntityId) -> Optional[User]:
        return await self._run("get_user", self._get, UserRow, User, _row_key(user_id))

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self._run("get_user_by_username", self._user_by_username, username)

    async def create_user(self, data: Dict[str, Any]) -> User:
        return await self._run("create_user", self._create, UserRow, User, data)

    # ============== Hotels ==============

    async def get_all_hotels(self) -> List[Hotel]:
        return await self._run("get_all_hotels", self._list, HotelRow, Hotel)

    async def get_hotel(self, hotel_id: EntityId) -> Optional[Hotel]:
        return await self._run("get_hotel", self._get, HotelRow, Hotel, _row_key(hotel_id))

    async def create_hotel(self, data: Dict[str, Any]) -> Hotel:
        return await self._run("create_hotel", self._create, HotelRow, Hotel, data)

    async def update_hotel(self, hotel_id: EntityId, fields: Dict[str, Any]) -> Optional[Hotel]:
        return await self._run("update_hotel", self._update, HotelRow, Hotel, _row_key(hotel_id), fields)

    async def delete_hotel(self, hotel_id: EntityId) -> bool:
        return await self._run("delete_hotel", self._delete_hotel, _row_key(hotel_id))

    # ============== Hotel amenities ==============

    async def get_hotel_amenities(self, hotel_id: EntityId) -> List[HotelAmenity]:
        key = _row_key(hotel_id)
        if key is None:
            return []
        return await self._run("get_hotel_amenities", self._list, HotelAmenityRow, HotelAmenity,
                               HotelAmenityRow.hotel_id == key)

    async def create_hotel_amenity(self, data: Dict[str, Any]) -> HotelAmenity:
        fields = {**data, "hotel_id": _row_key(data["hotel_id"])}
        return await self._run("create_hotel_amenity", self._create, HotelAmenityRow, HotelAmenity, fields)

    # ============== Rooms ==============

    async def get_rooms_for_hotel(self, hotel_id: EntityId) -> List[Room]:
        key = _row_key(hotel_id)
        if key is None:
            return []
        return await self._run("get_rooms_for_hotel", self._list, RoomRow, Room, RoomRow.hotel_id == key)

    async def get_room(self, room_id: EntityId) -> Optional[Room]:
        return await self._run("get_room", self._get, RoomRow, Room, _row_key(room_id))

    async def create_room(self, data: Dict[str, Any]) -> Room:
        fields = {**data, "hotel_id": _row_key(data["hotel_id"])}
        return await self._run("create_room", self._create, RoomRow, Room, fields)

    async def update_room(self, room_id: EntityId, fields: Dict[str, Any]) -> Optional[Room]:
        if "hotel_id" in fields:
            fields = {**fields, "hotel_id": _row_key(fields["hotel_id"])}
        return await self._run("update_room", self._update, RoomRow, Room, _row_key(room_id), fields)

    async def delete_room(self, room_id: EntityId) -> bool:
        return await self._run("delete_room", self._delete_room, _row_key(room_id))

    # ============== Room amenities ==============

    async def get_room_amenities(self, room_id: EntityId) -> List[RoomAmenity]:
        key = _row_key(room_id)
        if key is None:
            return []
        return await self._run("get_room_amenities", self._list, RoomAmenityRow, RoomAmenity,
                               RoomAmenityRow.room_id == key)

    async def create_room_amenity(self, data: Dict[str, Any]) -> RoomAmenity:
        fields = {**data, "room_id": _row_key(data["room_id"])}
        return await self._run("create_room_amenity", self._create, RoomAmenityRow, RoomAmenity, fields)

    # ============== Bookings ==============

    async def get_booking(self, booking_id: EntityId) -> Optional[Booking]:
        return await self._run("get_booking", self._get, BookingRow, Booking, _row_key(booking_id))

    async def get_user_bookings(self, user_id: EntityId) -> List[Booking]:
        key = _row_key(user_id)
        if key is None:
            return []
        return await self._run("get_user_bookings", self._list, BookingRow, Booking, BookingRow.user_id == key)

    async def get_all_bookings(self) -> List[Booking]:
        return await self._run("get_all_bookings", self._list, BookingRow, Booking)

    async def create_booking(self, data: Dict[str, Any]) -> Booking:
        fields = {
            **data,
            "user_id": _row_key(data["user_id"]),
            "hotel_id": _row_key(data["hotel_id"]),
            "room_id": _row_key(data["room_id"]),
            "created_at": datetime.now(UTC),
        }
        return await self._run("create_booking", self._create, BookingRow, Booking, fields)

    async def update_booking_status(self, booking_id: EntityId, status: str) -> Optional[Booking]:
        return await self._run("update_booking_status", self._update, BookingRow, Booking,
                               _row_key(booking_id), {"status": status})
