"""
Relational tables
Persistence shapes for the SQLAlchemy storage adapter. Bookings keep plain
hotel/room id columns: their references are checked by the booking service,
not by the database.
"""
from datetime import datetime, UTC
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Date,
    ForeignKey, Text, Boolean
)
from stayease.database import Base


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, nullable=False)
    password_hash = Column(String(256), nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    email = Column(String(120))
    is_admin = Column(Boolean, default=False, nullable=False)


class HotelRow(Base):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    location = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(500))
    rating = Column(Float, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    price_per_night = Column(Float, nullable=False)
    discount_percentage = Column(Float, default=0, nullable=False)
    status = Column(String(20), default="active", nullable=False)


class HotelAmenityRow(Base):
    __tablename__ = "hotel_amenities"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    icon = Column(String(100))


class RoomRow(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(500))
    max_guests = Column(Integer, nullable=False)
    bed_type = Column(String(100), nullable=False)
    size = Column(String(50))
    view = Column(String(100))
    price_per_night = Column(Float, nullable=False)
    discount_percentage = Column(Float, default=0, nullable=False)


class RoomAmenityRow(Base):
    __tablename__ = "room_amenities"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    icon = Column(String(100))


class BookingRow(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    hotel_id = Column(Integer, nullable=False)
    room_id = Column(Integer, nullable=False)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    guest_count = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False)
    status = Column(String(20), default="confirmed", nullable=False)
    special_requests = Column(Text)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
