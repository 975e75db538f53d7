# Business Services
from stayease.services.hotel_service import HotelService
from stayease.services.booking_service import BookingService
from stayease.services.user_service import UserService

__all__ = ['HotelService', 'BookingService', 'UserService']
