from datetime import timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import ensure_indexes, get_db
from main import app
from services.accounts import open_session
from utils.dates import start_of_day, utcnow


@pytest.fixture
def db():
    database = mongomock.MongoClient().railway_test
    ensure_indexes(database)
    return database


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email, role="passenger", name="Test User"):
    # Password hashes are irrelevant here; login goes through open_session
    user = {"name": name, "email": email, "password": "x", "role": role, "created_at": utcnow()}
    user["_id"] = db.users.insert_one(user).inserted_id
    return user


@pytest.fixture
def passenger(db):
    return make_user(db, "nimal@example.com", name="Nimal")


@pytest.fixture
def other_passenger(db):
    return make_user(db, "kamala@example.com", name="Kamala")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", role="admin", name="Admin")


def headers_for(db, user):
    return {"X-Session-Token": open_session(db, user)["token"]}


@pytest.fixture
def passenger_headers(db, passenger):
    return headers_for(db, passenger)


@pytest.fixture
def other_headers(db, other_passenger):
    return headers_for(db, other_passenger)


@pytest.fixture
def admin_headers(db, admin):
    return headers_for(db, admin)


@pytest.fixture
def train(db):
    doc = {
        "name": "Udarata Manike",
        "train_number": "1015",
        "departure_station": "Colombo Fort",
        "arrival_station": "Badulla",
        "departure_date": start_of_day(utcnow()) + timedelta(days=1, hours=6),
        "departure_time": "06:00",
        "total_seats": 2,
        "available_seats": 2,
        "created_at": utcnow(),
    }
    doc["_id"] = db.trains.insert_one(doc).inserted_id
    return doc
