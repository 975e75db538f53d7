# API Routers
from stayease.routers import auth, hotels, bookings, admin

__all__ = ['auth', 'hotels', 'bookings', 'admin']
