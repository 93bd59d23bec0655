# main.py
import asyncio
import logging
from datetime import date, timedelta
from typing import List, Optional

import fastapi
from fastapi import Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm

from hotel_booking.availability import (
    InvalidDateRange,
    find_available_rooms,
    has_active_booking,
    is_room_available,
)
from hotel_booking.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    LOG_LEVEL,
    MANAGER_EMAIL,
    MANAGER_PASSWORD,
)
from hotel_booking.database import as_dict, database, engine, metadata
from hotel_booking.models import bookings, rooms, users
from hotel_booking.schemas import Booking, BookingApproval, BookingCreate, Room, RoomCreate
from hotel_booking.auth import (
    MANAGER,
    Token,
    User,
    UserCreate,
    authenticate_user,
    create_access_token,
    create_user,
    get_current_active_user,
    get_user,
    pwd_context,
    require_client,
    require_manager,
)

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

#FastAPI Setup
app = fastapi.FastAPI(title="Hotel Booking API")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred."},
    )


async def _get_room_or_404(room_id: int):
    room = await database.fetch_one(rooms.select().where(rooms.c.id == room_id))
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="The room was not found")
    return room


# Signup / login

@app.post("/signup", response_model=User, status_code=status.HTTP_201_CREATED)
async def signup(user: UserCreate):
    if await get_user(user.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered."
        )
    user_id = await create_user(user)
    logger.info("Registered client %s", user.email)
    return User(id=user_id, name=user.name, email=user.email)


@app.post("/login", response_model=Token)
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    user = await authenticate_user(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(
        data={"sub": user.email, "role": user.role},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": access_token, "token_type": "bearer"}


@app.get("/users/me", response_model=User)
async def read_users_me(current_user: User = Depends(get_current_active_user)):
    """
    Get the current authenticated user's profile data.
    """
    return current_user


# Rooms

@app.get("/room", response_model=List[Room])
async def list_rooms(
    arrival_date: Optional[date] = None,
    departure_date: Optional[date] = None,
    current_user: User = Depends(require_client),
):
    """
    List every room, or only the rooms free for the given stay when
    arrival_date and departure_date are supplied.
    """
    if arrival_date is None and departure_date is None:
        all_rooms = await database.fetch_all(rooms.select().order_by(rooms.c.number))
        return [as_dict(r) for r in all_rooms]

    try:
        all_rooms, free = await find_available_rooms(arrival_date, departure_date)
    except InvalidDateRange as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not all_rooms:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="There are no rooms")
    if not free:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="There are no available rooms in the provided dates",
        )
    return [as_dict(r) for r in free]


@app.get("/room/{room_id}", response_model=Room)
async def get_room(room_id: int, current_user: User = Depends(require_manager)):
    return as_dict(await _get_room_or_404(room_id))


@app.post("/room", response_model=Room, status_code=status.HTTP_201_CREATED)
async def create_room(room: RoomCreate, current_user: User = Depends(require_manager)):
    room_id = await database.execute(rooms.insert().values(**room.model_dump()))
    logger.info("Room %s created by %s", room.number, current_user.email)
    return {"id": room_id, **room.model_dump()}


@app.put("/room/{room_id}", response_model=Room)
async def update_room(room_id: int, room: RoomCreate, current_user: User = Depends(require_manager)):
    await _get_room_or_404(room_id)
    query = rooms.update().where(rooms.c.id == room_id).values(**room.model_dump())
    await database.execute(query)
    return {"id": room_id, **room.model_dump()}


@app.delete("/room/{room_id}", response_model=Room)
async def delete_room(room_id: int, current_user: User = Depends(require_manager)):
    room = await _get_room_or_404(room_id)

    # Pending and approved bookings keep the room, whatever their dates
    if await has_active_booking(room_id):
        logger.warning("Refused to delete room %s: it has active bookings", room_id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete room, because it is currently booked!",
        )

    await database.execute(rooms.delete().where(rooms.c.id == room_id))
    logger.info("Room %s deleted by %s", room_id, current_user.email)
    return as_dict(room)


# Bookings

def _booking_lock(request: Request) -> asyncio.Lock:
    # Availability checks and the writes that depend on them run one at a time
    return request.app.state.booking_lock


@app.post("/booking", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    current_user: User = Depends(require_client),
    lock: asyncio.Lock = Depends(_booking_lock),
):
    await _get_room_or_404(payload.room_id)

    values = {
        "user_id": current_user.id,
        "room_id": payload.room_id,
        "arrival_date": payload.arrival_date,
        "departure_date": payload.departure_date,
        "is_approved": None,
    }
    async with lock:
        if not await is_room_available(payload.room_id, payload.arrival_date, payload.departure_date):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="The room is not available in the provided dates",
            )
        booking_id = await database.execute(bookings.insert().values(**values))

    logger.info(
        "Booking %s: room %s for %s from %s to %s",
        booking_id, payload.room_id, current_user.email, payload.arrival_date, payload.departure_date,
    )
    return {"id": booking_id, **values}


@app.get("/booking", response_model=List[Booking])
async def my_bookings(current_user: User = Depends(get_current_active_user)):
    query = bookings.select().where(bookings.c.user_id == current_user.id).order_by(bookings.c.arrival_date)
    return [as_dict(b) for b in await database.fetch_all(query)]


@app.get("/bookingHistory", response_model=List[Booking])
async def booking_history(
    user_id: Optional[int] = None,
    room_id: Optional[int] = None,
    current_user: User = Depends(require_manager),
):
    query = bookings.select()
    if user_id is not None:
        query = query.where(bookings.c.user_id == user_id)
    if room_id is not None:
        query = query.where(bookings.c.room_id == room_id)
    query = query.order_by(bookings.c.arrival_date, bookings.c.id)
    return [as_dict(b) for b in await database.fetch_all(query)]


@app.put("/bookingApprove/{booking_id}", response_model=Booking)
async def approve_booking(
    booking_id: int,
    approval: BookingApproval,
    current_user: User = Depends(require_manager),
    lock: asyncio.Lock = Depends(_booking_lock),
):
    async with lock:
        booking = await database.fetch_one(bookings.select().where(bookings.c.id == booking_id))
        if booking is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="The booking was not found")

        # A rejected booking no longer holds its room, which may have been let since
        reinstating = booking.is_approved is False and approval.is_approved
        if reinstating and not await is_room_available(
            booking.room_id, booking.arrival_date, booking.departure_date, exclude_booking_id=booking_id
        ):
            logger.warning("Refused to approve booking %s: room %s was booked again", booking_id, booking.room_id)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="The room is no longer available in the booked dates",
            )

        query = bookings.update().where(bookings.c.id == booking_id).values(is_approved=approval.is_approved)
        await database.execute(query)

    logger.info(
        "Booking %s %s by %s",
        booking_id, "approved" if approval.is_approved else "rejected", current_user.email,
    )
    return {**as_dict(booking), "is_approved": approval.is_approved}


@app.on_event("startup")
async def startup():
    await database.connect()
    app.state.booking_lock = asyncio.Lock()
    # Create tables if they don't exist
    metadata.create_all(bind=engine)

    async with database.transaction():
        query = users.select().where(users.c.email == MANAGER_EMAIL)
        if not await database.fetch_one(query):
            manager = {
                "name": "Hotel Manager",
                "email": MANAGER_EMAIL,
                "hashed_password": pwd_context.hash(MANAGER_PASSWORD),
                "role": MANAGER,
            }
            await database.execute(query=users.insert(), values=manager)
            logger.info("Created default manager account %s", MANAGER_EMAIL)


@app.on_event("shutdown")
async def shutdown():
    await database.disconnect()
