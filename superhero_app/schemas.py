# schemas.py
from pydantic import BaseModel, EmailStr, Field


class SuperheroCreate(BaseModel):
    name: str = Field(..., min_length=3)
    power: str = Field(..., min_length=3)


class Superhero(SuperheroCreate):
    id: int


class UserCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=5, max_length=1024)


class User(BaseModel):
    id: int
    name: str
    email: str


class Credentials(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=5)


class Token(BaseModel):
    access_token: str
    token_type: str
