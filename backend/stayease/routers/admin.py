"""
Admin routes: hotel and room management, all bookings
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Response
from stayease.exceptions import NotFoundError
from stayease.models.entities import User, Hotel, Room, Booking
from stayease.models.schemas import (
    HotelCreate, HotelUpdate, RoomCreate, RoomUpdate,
    BookingDetail, BookingStatusUpdate
)
from stayease.services.booking_service import BookingService
from stayease.services.hotel_service import HotelService
from stayease.security.auth import require_admin
from stayease.storage import Storage, get_storage

router = APIRouter(prefix="/admin", tags=["Admin"])


# ============== Hotels ==============

@router.post("/hotels", response_model=Hotel, status_code=status.HTTP_201_CREATED)
async def create_hotel(
    data: HotelCreate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Create a hotel"""
    return await HotelService(storage).create_hotel(data)


@router.put("/hotels/{hotel_id}", response_model=Hotel)
async def update_hotel(
    hotel_id: str,
    data: HotelUpdate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Update a hotel"""
    try:
        return await HotelService(storage).update_hotel(hotel_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/hotels/{hotel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_hotel(
    hotel_id: str,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Delete a hotel"""
    try:
        await HotelService(storage).delete_hotel(hotel_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Rooms ==============

@router.post("/rooms", response_model=Room, status_code=status.HTTP_201_CREATED)
async def create_room(
    data: RoomCreate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Create a room"""
    try:
        return await HotelService(storage).create_room(data)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/rooms/{room_id}", response_model=Room)
async def update_room(
    room_id: str,
    data: RoomUpdate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Update a room"""
    try:
        return await HotelService(storage).update_room(room_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/rooms/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(
    room_id: str,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Delete a room"""
    try:
        await HotelService(storage).delete_room(room_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Bookings ==============

@router.get("/bookings", response_model=List[BookingDetail])
async def list_all_bookings(
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Every booking"""
    return await BookingService(storage).list_all_bookings()


@router.patch("/bookings/{booking_id}/status", response_model=Booking)
async def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin)
):
    """Set a booking's status"""
    try:
        return await BookingService(storage).update_status(booking_id, data.status)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
