# config.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("SUPERHERO_DATABASE_URL", "sqlite:///./superhero_app/superhero.db")

SECRET_KEY = os.getenv("SUPERHERO_SECRET_KEY", "jwtkey")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
