# schemas.py
"""
Request and response schemas for the hotel API.

Each table in models.py has a create model (what a caller submits) and a
read model (what the API returns).
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class RoomCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=50, description="Room category, e.g. single or suite")
    number: int = Field(..., ge=1, description="Room number as shown on the door")
    description: Optional[str] = Field(None, max_length=1024)
    number_of_beds: int = Field(..., ge=1, le=20)


class Room(RoomCreate):
    id: int


class BookingCreate(BaseModel):
    room_id: int
    arrival_date: date
    departure_date: date

    @model_validator(mode="after")
    def check_dates(self):
        if self.arrival_date > self.departure_date:
            raise ValueError("arrival_date must not be after departure_date")
        return self


class Booking(BaseModel):
    """
    Bookings collection schema

    is_approved is tri-state: None while the booking waits for a manager,
    True once approved, False once rejected.
    """
    id: int
    user_id: int
    room_id: int
    arrival_date: date
    departure_date: date
    is_approved: Optional[bool] = None


class BookingApproval(BaseModel):
    is_approved: bool
