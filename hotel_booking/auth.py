# auth.py

from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, EmailStr, Field
from hotel_booking.config import SECRET_KEY, ALGORITHM
from hotel_booking.database import database
from hotel_booking.models import users

CLIENT = "client"
MANAGER = "manager"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login")


# Pydantic Models
class User(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    role: str = CLIENT

class Token(BaseModel):
    access_token: str
    token_type: str

# User creation model
class UserCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=5, max_length=255)

async def get_user(email: str):
    query = users.select().where(users.c.email == email)
    return await database.fetch_one(query)

def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

# Function to create a user in the database
async def create_user(user: UserCreate, role: str = CLIENT) -> int:
    hashed_password = pwd_context.hash(user.password)
    query = users.insert().values(
        name=user.name,
        email=user.email,
        hashed_password=hashed_password,
        role=role
    )
    return await database.execute(query)


async def authenticate_user(email: str, password: str):
    user = await get_user(email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


async def _decode_token_and_get_user(token: str) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = await get_user(email=email)
    if user is None:
        raise credentials_exception

    return User(id=user.id, name=user.name, email=user.email, role=user.role)


async def get_current_active_user(token: str = Depends(oauth2_scheme)) -> User:
    return await _decode_token_and_get_user(token)

# Clients and managers may both browse rooms and book them
async def require_client(current_user: User = Depends(get_current_active_user)) -> User:
    if current_user.role not in (CLIENT, MANAGER):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return current_user

async def require_manager(current_user: User = Depends(get_current_active_user)) -> User:
    if current_user.role != MANAGER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return current_user
