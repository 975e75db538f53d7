"""
Price service
Nightly rates, stay length and the booking price breakdown
"""
import math
from datetime import date, timedelta
from typing import Union
from stayease.models.entities import Room, Hotel
from stayease.models.schemas import PriceQuote

TAX_RATE = 0.12


def discounted_price(base_price: float, discount_percentage: float = 0) -> float:
    """Nightly price after the listing discount"""
    if not discount_percentage:
        return base_price
    return base_price * (1 - discount_percentage / 100)


def count_nights(check_in: date, check_out: date) -> int:
    """Whole nights between two dates, at least one"""
    nights = math.ceil((check_out - check_in) / timedelta(days=1))
    return max(1, nights)


def quote_stay(listing: Union[Room, Hotel], check_in: date, check_out: date,
               booking_discount: float = 0) -> PriceQuote:
    """Price breakdown for a stay, rounded to cents"""
    nightly_rate = discounted_price(listing.price_per_night, listing.discount_percentage)
    nights = count_nights(check_in, check_out)

    subtotal = nightly_rate * nights
    taxes = subtotal * TAX_RATE
    discount_amount = subtotal * (booking_discount / 100)
    total = subtotal + taxes - discount_amount

    return PriceQuote(
        nights=nights,
        nightly_rate=round(nightly_rate, 2),
        subtotal=round(subtotal, 2),
        taxes=round(taxes, 2),
        discount_amount=round(discount_amount, 2),
        total=round(total, 2),
    )
