"""
Entity records
Shared by every storage adapter. Attributes are snake_case, the wire and
document formats are camelCase.
"""
from datetime import date, datetime, UTC
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Opaque identifier: int for the in-memory and relational adapters,
# str for the document store. Only meaningful inside its own adapter.
EntityId = Union[int, str]


# ============== Enums ==============

class HotelStatus(str, Enum):
    """Hotel listing status"""
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class BookingStatus(str, Enum):
    """Booking status"""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    PENDING_PAYMENT = "pending_payment"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============== Entities ==============

class User(CamelModel):
    id: EntityId
    username: str
    password_hash: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False


class Hotel(CamelModel):
    id: EntityId
    name: str
    location: str
    description: str
    image: Optional[str] = None
    rating: float
    review_count: int = 0
    price_per_night: float
    discount_percentage: float = 0
    status: HotelStatus = HotelStatus.ACTIVE


class HotelAmenity(CamelModel):
    id: EntityId
    hotel_id: EntityId
    name: str
    icon: Optional[str] = None


class Room(CamelModel):
    id: EntityId
    hotel_id: EntityId
    name: str
    description: str
    image: Optional[str] = None
    max_guests: int
    bed_type: str
    size: Optional[str] = None
    view: Optional[str] = None
    price_per_night: float
    discount_percentage: float = 0


class RoomAmenity(CamelModel):
    id: EntityId
    room_id: EntityId
    name: str
    icon: Optional[str] = None


class Booking(CamelModel):
    id: EntityId
    user_id: EntityId
    hotel_id: EntityId
    room_id: EntityId
    check_in_date: date
    check_out_date: date
    guest_count: int
    total_price: float
    status: BookingStatus = BookingStatus.CONFIRMED
    special_requests: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
