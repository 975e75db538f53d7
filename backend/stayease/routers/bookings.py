"""
Booking routes for logged-in users
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from stayease.exceptions import (
    NotFoundError, ForbiddenError, BookingStateError, InvalidBookingError
)
from stayease.models.entities import User, Booking
from stayease.models.schemas import BookingCreate, BookingDetail
from stayease.services.booking_service import BookingService
from stayease.security.auth import get_current_user
from stayease.storage import Storage, get_storage

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """Book a room"""
    service = BookingService(storage)
    try:
        return await service.create_booking(current_user, data)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidBookingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=List[BookingDetail])
async def list_bookings(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """The current user's bookings"""
    service = BookingService(storage)
    return await service.list_user_bookings(current_user)


@router.get("/{booking_id}", response_model=BookingDetail)
async def get_booking(
    booking_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """One booking, for its owner or an admin"""
    service = BookingService(storage)
    try:
        booking = await service.get_booking_for(current_user, booking_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return await service.to_detail(booking)


@router.patch("/{booking_id}/cancel", response_model=Booking)
async def cancel_booking(
    booking_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """Cancel a booking"""
    service = BookingService(storage)
    try:
        return await service.cancel_booking(current_user, booking_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except BookingStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
