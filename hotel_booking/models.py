# models.py
import sqlalchemy
from hotel_booking.database import metadata

#'users' table
users = sqlalchemy.Table(
    "users",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("name", sqlalchemy.String),
    sqlalchemy.Column("email", sqlalchemy.String, unique=True, index=True),
    sqlalchemy.Column("hashed_password", sqlalchemy.String),
    sqlalchemy.Column("role", sqlalchemy.String, default="client"),
)

#'rooms' table
rooms = sqlalchemy.Table(
    "rooms",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("type", sqlalchemy.String),
    sqlalchemy.Column("number", sqlalchemy.Integer),
    sqlalchemy.Column("description", sqlalchemy.Text, nullable=True),
    sqlalchemy.Column("number_of_beds", sqlalchemy.Integer),
)

bookings = sqlalchemy.Table(
    "bookings",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.Integer, primary_key=True),
    sqlalchemy.Column("user_id", sqlalchemy.Integer, sqlalchemy.ForeignKey("users.id")),
    sqlalchemy.Column("room_id", sqlalchemy.Integer, sqlalchemy.ForeignKey("rooms.id")),
    sqlalchemy.Column("arrival_date", sqlalchemy.Date),
    sqlalchemy.Column("departure_date", sqlalchemy.Date),

    # NULL = pending, True = approved, False = rejected
    sqlalchemy.Column("is_approved", sqlalchemy.Boolean, nullable=True, default=None),
)
