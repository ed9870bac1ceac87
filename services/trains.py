# services/trains.py
import logging

from pymongo import ReturnDocument

from services.common import load_document
from utils.dates import end_of_day, start_of_day, to_datetime, utcnow
from utils.errors import BadRequestError, InvalidTransitionError, NotFoundError, provider_errors

logger = logging.getLogger(__name__)


def _train_doc(train_in):
    departure = to_datetime(train_in.departure_date, field="departure date")
    if train_in.departure_time:
        hours, minutes = train_in.departure_time.split(":")
        departure = departure.replace(hour=int(hours), minute=int(minutes))
    return {
        "name": train_in.name,
        "train_number": train_in.train_number,
        "departure_station": train_in.departure_station,
        "arrival_station": train_in.arrival_station,
        "departure_date": departure,
        "departure_time": train_in.departure_time,
        "arrival_time": train_in.arrival_time,
        "total_seats": train_in.total_seats,
    }


def search_trains(db, from_station, to_station, travel_date):
    """Trains between two stations departing on the given calendar day."""
    if not from_station or not to_station or not travel_date:
        raise BadRequestError("Departure station, arrival station and date are required.")
    day = to_datetime(travel_date, field="date")
    query = {
        "departure_station": from_station,
        "arrival_station": to_station,
        "departure_date": {"$gte": start_of_day(day), "$lte": end_of_day(day)},
    }
    with provider_errors("Failed to search for trains. Please check the criteria and try again."):
        return list(db.trains.find(query).sort("departure_date", 1))


def get_available_trains(db):
    today = start_of_day(utcnow())
    with provider_errors("Failed to fetch available trains. Please try again later."):
        return list(db.trains.find({"departure_date": {"$gte": today}}).sort("departure_date", 1))


def get_train(db, train_id):
    return load_document(db.trains, train_id, "train")


def create_train(db, train_in):
    doc = _train_doc(train_in)
    # New trains start with every seat free
    doc["available_seats"] = train_in.total_seats
    doc["created_at"] = utcnow()
    with provider_errors("Failed to save train. Please try again."):
        result = db.trains.insert_one(doc)
        doc["_id"] = result.inserted_id
    logger.info("Train %s (%s) created", result.inserted_id, doc["train_number"])
    return doc


def update_train(db, train_id, train_in):
    """Replace a train's details and resize it without touching seats already sold.

    Capacity changes are applied as an ``$inc`` of the difference, guarded on
    the total read here, so bookings made in between are kept.
    """
    train = load_document(db.trains, train_id, "train")
    doc = _train_doc(train_in)
    doc["updated_at"] = utcnow()

    old_total = train.get("total_seats", 0)
    delta = train_in.total_seats - old_total
    with provider_errors("Failed to save train. Please try again."):
        updated = db.trains.find_one_and_update(
            {"_id": train["_id"], "total_seats": old_total, "available_seats": {"$gte": max(0, -delta)}},
            {"$set": doc, "$inc": {"available_seats": delta}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            current = db.trains.find_one({"_id": train["_id"]})
    if updated is None:
        if current is None:
            raise NotFoundError("Train not found.")
        if current.get("total_seats") != old_total:
            raise InvalidTransitionError("The train was modified by someone else. Please reload and try again.")
        sold = current["total_seats"] - current["available_seats"]
        raise BadRequestError(f"Total seats cannot be lower than seats already booked ({sold}).")

    logger.info("Train %s updated (%+d seats)", train["_id"], delta)
    return updated


def delete_train(db, train_id):
    train = load_document(db.trains, train_id, "train")
    with provider_errors("Failed to delete train. Please try again."):
        if db.bookings.count_documents({"train_id": train["_id"], "status": "Confirmed"}, limit=1):
            raise BadRequestError("Train still has confirmed bookings.")
        result = db.trains.delete_one({"_id": train["_id"]})
    if result.deleted_count == 0:
        raise NotFoundError("Train not found.")
    logger.info("Train %s deleted", train["_id"])
