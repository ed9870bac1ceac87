# config.py
from dotenv import load_dotenv
import os

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE = os.getenv("MONGODB_DATABASE", "railway_services")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
APP_HOST = os.getenv("APP_HOST", "127.0.0.1")
APP_PORT = int(os.getenv("APP_PORT", "8000"))

# Login sessions expire after this many hours
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "24"))
# Retries when a generated tracking number collides with an existing one
TRACKING_NUMBER_ATTEMPTS = int(os.getenv("TRACKING_NUMBER_ATTEMPTS", "5"))
