"""
Pydantic schemas
Request validation and response shapes for the REST API
"""
from datetime import date, datetime
from typing import Any, List, Optional
from pydantic import Field, field_validator, model_validator
from stayease.models.entities import (
    CamelModel, EntityId, HotelStatus, BookingStatus,
    Booking, Hotel, HotelAmenity, Room, RoomAmenity,
)


def _check_half_step(value: Optional[float]) -> Optional[float]:
    if value is not None and not float(value * 2).is_integer():
        raise ValueError("Rating must be a whole or half number")
    return value


def _reject_nulls(model: CamelModel, required: tuple) -> None:
    """Partial updates may omit a required field but not blank it out"""
    for name in model.model_fields_set:
        if name in required and getattr(model, name) is None:
            alias = type(model).model_fields[name].alias or name
            raise ValueError(f"{alias} cannot be null")


# ============== Amenity Schemas ==============

class AmenityInput(CamelModel):
    name: str = Field(..., min_length=1)
    icon: Optional[str] = None


# ============== Hotel Schemas ==============

class HotelBase(CamelModel):
    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    description: str
    image: Optional[str] = None
    rating: float = Field(..., ge=1, le=5)
    review_count: int = Field(default=0, ge=0)
    price_per_night: float = Field(..., gt=0)
    discount_percentage: float = Field(default=0, ge=0, le=100)
    status: HotelStatus = HotelStatus.ACTIVE

    @field_validator("rating")
    @classmethod
    def check_rating_steps(cls, value):
        return _check_half_step(value)


class HotelCreate(HotelBase):
    amenities: List[AmenityInput] = Field(default_factory=list)


class HotelUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    rating: Optional[float] = Field(None, ge=1, le=5)
    review_count: Optional[int] = Field(None, ge=0)
    price_per_night: Optional[float] = Field(None, gt=0)
    discount_percentage: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[HotelStatus] = None

    @field_validator("rating")
    @classmethod
    def check_rating_steps(cls, value):
        return _check_half_step(value)

    @model_validator(mode="after")
    def check_no_null_required(self):
        _reject_nulls(self, (
            "name", "location", "description", "rating", "review_count",
            "price_per_night", "discount_percentage", "status",
        ))
        return self


# ============== Room Schemas ==============

class RoomBase(CamelModel):
    hotel_id: EntityId
    name: str = Field(..., min_length=1)
    description: str
    image: Optional[str] = None
    max_guests: int = Field(..., gt=0)
    bed_type: str = Field(..., min_length=1)
    size: Optional[str] = None
    view: Optional[str] = None
    price_per_night: float = Field(..., gt=0)
    discount_percentage: float = Field(default=0, ge=0, le=100)


class RoomCreate(RoomBase):
    amenities: List[AmenityInput] = Field(default_factory=list)


class RoomUpdate(CamelModel):
    hotel_id: Optional[EntityId] = None
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    max_guests: Optional[int] = Field(None, gt=0)
    bed_type: Optional[str] = Field(None, min_length=1)
    size: Optional[str] = None
    view: Optional[str] = None
    price_per_night: Optional[float] = Field(None, gt=0)
    discount_percentage: Optional[float] = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def check_no_null_required(self):
        _reject_nulls(self, (
            "hotel_id", "name", "description", "max_guests", "bed_type",
            "price_per_night", "discount_percentage",
        ))
        return self


# ============== Booking Schemas ==============

class BookingCreate(CamelModel):
    hotel_id: EntityId
    room_id: EntityId
    check_in_date: date
    check_out_date: date
    guest_count: int = Field(..., gt=0)
    total_price: float = Field(..., gt=0)
    status: Optional[BookingStatus] = None
    special_requests: Optional[str] = None

    @field_validator("check_in_date", "check_out_date", mode="before")
    @classmethod
    def parse_timestamp_dates(cls, value: Any) -> Any:
        # Browsers send Date objects as full ISO timestamps
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value).date()
        if isinstance(value, datetime):
            return value.date()
        return value

    @field_validator("status")
    @classmethod
    def check_initial_status(cls, value: Optional[BookingStatus]) -> Optional[BookingStatus]:
        if value not in (None, BookingStatus.CONFIRMED, BookingStatus.PENDING_PAYMENT):
            raise ValueError("A new booking must be confirmed or pending_payment")
        return value

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out_date <= self.check_in_date:
            raise ValueError("Check-out date must be after check-in date")
        return self


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


# ============== Account Schemas ==============

class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class LoginRequest(CamelModel):
    username: str
    password: str


class PublicUser(CamelModel):
    """User projection safe to send to clients"""
    id: EntityId
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False


# ============== Projections ==============

class HotelSummary(CamelModel):
    id: EntityId
    name: str
    location: str
    image: Optional[str] = None
    rating: float


class RoomSummary(CamelModel):
    id: EntityId
    name: str
    bed_type: str
    max_guests: int


class BookingDetail(Booking):
    """Booking joined with hotel and room summaries"""
    hotel: Optional[HotelSummary] = None
    room: Optional[RoomSummary] = None


class RoomWithAmenities(Room):
    amenities: List[RoomAmenity] = Field(default_factory=list)


class HotelDetail(Hotel):
    """Hotel with its amenities and rooms"""
    amenities: List[HotelAmenity] = Field(default_factory=list)
    rooms: List[RoomWithAmenities] = Field(default_factory=list)


class PriceQuote(CamelModel):
    nights: int
    nightly_rate: float
    subtotal: float
    taxes: float
    discount_amount: float
    total: float
