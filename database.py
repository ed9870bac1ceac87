# database.py
import logging

import pymongo
from pymongo import MongoClient

from config import MONGODB_URI, MONGODB_DATABASE

logger = logging.getLogger(__name__)

client = MongoClient(MONGODB_URI)
db = client[MONGODB_DATABASE]

# Collections
trains = db.trains
bookings = db.bookings
cargos = db.cargos
season_passes = db.seasonPasses
complaints = db.complaints
users = db.users
sessions = db.sessions


def get_db():
    """FastAPI dependency returning the database handlers work against."""
    return db


def ensure_indexes(database):
    database.users.create_index("email", unique=True)
    database.sessions.create_index("token", unique=True)
    database.sessions.create_index("expires_at", expireAfterSeconds=0)
    database.cargos.create_index("tracking_number", unique=True)

    for name in ("bookings", "cargos", "seasonPasses", "complaints"):
        database[name].create_index([("user_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)])
    database.bookings.create_index([("user_id", pymongo.ASCENDING), ("booked_at", pymongo.DESCENDING)])
    database.trains.create_index([
        ("departure_station", pymongo.ASCENDING),
        ("arrival_station", pymongo.ASCENDING),
        ("departure_date", pymongo.ASCENDING),
    ])
    logger.info("Indexes ensured on database %s", database.name)
