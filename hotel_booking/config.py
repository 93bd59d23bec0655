# config.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./hotel_booking/hotel.db")

# This should be a long, random string in a real deployment
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30))

# Default manager account created on startup
MANAGER_EMAIL = os.getenv("MANAGER_EMAIL", "manager@hotel.local")
MANAGER_PASSWORD = os.getenv("MANAGER_PASSWORD", "manager123")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
