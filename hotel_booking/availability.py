# availability.py
"""
Room availability for a stay.

A booking holds its room for every night between its arrival and departure
dates, both inclusive, until a manager rejects it. Pending bookings
(is_approved is None) hold the room just like approved ones.
"""
import logging
from datetime import date
from typing import Iterable, List, Optional

import sqlalchemy

from hotel_booking.database import database
from hotel_booking.models import rooms, bookings

logger = logging.getLogger(__name__)


class InvalidDateRange(ValueError):
    """Raised when a requested stay cannot be evaluated."""


def is_rejected(booking) -> bool:
    return booking.is_approved is False


def blocks(booking, start: date, end: date) -> bool:
    """True if the booking keeps its room unavailable for [start, end]."""
    if is_rejected(booking):
        return False
    return booking.arrival_date <= end and booking.departure_date >= start


def validate_range(start: Optional[date], end: Optional[date]) -> None:
    if start is None or end is None:
        raise InvalidDateRange("Both arrival_date and departure_date are required")
    if start > end:
        raise InvalidDateRange("arrival_date must not be after departure_date")


def available_rooms(room_list: Iterable, booking_list: Iterable, start: date, end: date) -> List:
    """Return the rooms from room_list that no booking blocks for [start, end]."""
    validate_range(start, end)
    taken = {b.room_id for b in booking_list if blocks(b, start, end)}
    return [room for room in room_list if room.id not in taken]


def not_rejected():
    return sqlalchemy.or_(bookings.c.is_approved.is_(None), bookings.c.is_approved.is_(True))


def blocking_bookings_query(start: date, end: date):
    """Non-rejected bookings overlapping [start, end]."""
    return bookings.select().where(
        bookings.c.arrival_date <= end,
        bookings.c.departure_date >= start,
        not_rejected(),
    )


async def find_available_rooms(start: date, end: date):
    """
    Query the store for rooms free over [start, end].

    Returns a pair (all_rooms, free_rooms) so callers can tell an empty
    hotel from a fully booked one.
    """
    validate_range(start, end)
    all_rooms = await database.fetch_all(rooms.select().order_by(rooms.c.number))
    if not all_rooms:
        return all_rooms, []

    candidates = await database.fetch_all(blocking_bookings_query(start, end))
    free = available_rooms(all_rooms, candidates, start, end)
    logger.debug("%d of %d rooms free between %s and %s", len(free), len(all_rooms), start, end)
    return all_rooms, free


async def is_room_available(room_id: int, start: date, end: date, exclude_booking_id: Optional[int] = None) -> bool:
    query = blocking_bookings_query(start, end).where(bookings.c.room_id == room_id)
    if exclude_booking_id is not None:
        query = query.where(bookings.c.id != exclude_booking_id)
    return await database.fetch_one(query) is None


async def has_active_booking(room_id: int) -> bool:
    """True if any booking for the room has not been rejected, whatever its dates."""
    query = bookings.select().where(
        bookings.c.room_id == room_id,
        not_rejected(),
    )
    return await database.fetch_one(query) is not None
