# main.py
import logging
from datetime import timedelta
from typing import List

import fastapi
from fastapi import Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from superhero_app.auth import (
    create_access_token,
    get_current_user,
    get_user,
    pwd_context,
    verify_password,
)
from superhero_app.config import ACCESS_TOKEN_EXPIRE_MINUTES, LOG_LEVEL
from superhero_app.database import as_dict, database, engine, metadata
from superhero_app.models import superheroes, users
from superhero_app.schemas import Credentials, Superhero, SuperheroCreate, Token, User, UserCreate

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = fastapi.FastAPI(title="Superhero Registry API")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred."},
    )


async def _get_superhero_or_404(superhero_id: int):
    superhero = await database.fetch_one(superheroes.select().where(superheroes.c.id == superhero_id))
    if superhero is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="The superhero was not found")
    return superhero


@app.get("/api/superhero", response_model=List[Superhero])
async def list_superheroes():
    rows = await database.fetch_all(superheroes.select().order_by(superheroes.c.id))
    return [as_dict(r) for r in rows]


@app.get("/api/superhero/{superhero_id}", response_model=Superhero)
async def get_superhero(superhero_id: int):
    return as_dict(await _get_superhero_or_404(superhero_id))


@app.post("/api/superhero", response_model=Superhero, status_code=status.HTTP_201_CREATED)
async def create_superhero(superhero: SuperheroCreate):
    superhero_id = await database.execute(superheroes.insert().values(**superhero.model_dump()))
    return {"id": superhero_id, **superhero.model_dump()}


@app.put("/api/superhero/{superhero_id}", response_model=Superhero)
async def update_superhero(superhero_id: int, superhero: SuperheroCreate):
    await _get_superhero_or_404(superhero_id)
    query = superheroes.update().where(superheroes.c.id == superhero_id).values(**superhero.model_dump())
    await database.execute(query)
    return {"id": superhero_id, **superhero.model_dump()}


@app.delete("/api/superhero/{superhero_id}", response_model=Superhero)
async def delete_superhero(superhero_id: int):
    superhero = await _get_superhero_or_404(superhero_id)
    await database.execute(superheroes.delete().where(superheroes.c.id == superhero_id))
    logger.info("Deleted superhero %s", superhero_id)
    return as_dict(superhero)


# Registration endpoint
@app.post("/api/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate):
    if await get_user(user.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    query = users.insert().values(
        name=user.name,
        email=user.email,
        hashed_password=pwd_context.hash(user.password),
    )
    user_id = await database.execute(query)
    logger.info("Registered user %s", user.email)
    return User(id=user_id, name=user.name, email=user.email)


@app.post("/api/auth", response_model=Token)
async def login(credentials: Credentials):
    user = await get_user(credentials.email)
    # Same answer for unknown email and wrong password
    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password")

    access_token = create_access_token(
        data={"sub": str(user.id)},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": access_token, "token_type": "bearer"}


@app.get("/api/users/me", response_model=User)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


@app.on_event("startup")
async def startup():
    await database.connect()
    metadata.create_all(bind=engine)
    logger.info("Connected to %s", database.url.database)


@app.on_event("shutdown")
async def shutdown():
    await database.disconnect()
