"""
Public catalogue routes
"""
from datetime import date
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from stayease.exceptions import NotFoundError
from stayease.models.entities import Hotel
from stayease.models.schemas import HotelDetail, PriceQuote
from stayease.services.hotel_service import HotelService
from stayease.services.price_service import quote_stay
from stayease.storage import Storage, get_storage

router = APIRouter(tags=["Hotels"])

SortOption = Literal["recommended", "price_low", "price_high", "rating"]


@router.get("/hotels", response_model=List[Hotel])
async def list_hotels(
    location: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    rating: Optional[List[int]] = Query(None),
    sort: Optional[SortOption] = None,
    storage: Storage = Depends(get_storage)
):
    """List hotels"""
    service = HotelService(storage)
    return await service.list_hotels(location, min_price, max_price, rating, sort)


@router.get("/hotels/{hotel_id}", response_model=HotelDetail)
async def get_hotel(hotel_id: str, storage: Storage = Depends(get_storage)):
    """Hotel detail with amenities and rooms"""
    service = HotelService(storage)
    try:
        return await service.get_hotel_detail(hotel_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/rooms/{room_id}/quote", response_model=PriceQuote)
async def quote_room(
    room_id: str,
    check_in: date = Query(..., alias="checkIn"),
    check_out: date = Query(..., alias="checkOut"),
    discount: float = Query(0, ge=0, le=100),
    storage: Storage = Depends(get_storage)
):
    """Price breakdown for a stay in a room"""
    if check_out <= check_in:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Check-out date must be after check-in date"
        )

    service = HotelService(storage)
    try:
        room = await service.get_room(room_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return quote_stay(room, check_in, check_out, discount)
