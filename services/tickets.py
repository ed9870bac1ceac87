# services/tickets.py
import logging

from pymongo import ReturnDocument

from services.common import load_document, list_documents, require_owner
from services.lifecycle import BOOKING, apply_transition
from utils.dates import utcnow
from utils.errors import BadRequestError, NotFoundError, ProviderError, provider_errors

logger = logging.getLogger(__name__)


def _release_seat(db, train_id):
    with provider_errors("Failed to release the seat. Please contact support."):
        db.trains.update_one({"_id": train_id}, {"$inc": {"available_seats": 1}})


def book_ticket(db, train_id, user, seat=None):
    """Reserve one seat on a train and record a Confirmed booking.

    The seat count is decremented with a conditional update so two
    passengers can't both take the last seat.
    """
    if not user or not user.get("_id"):
        raise BadRequestError("User information is required to book a ticket.")
    if not train_id:
        raise BadRequestError("Train information is required to book a ticket.")

    train = load_document(db.trains, train_id, "train")

    with provider_errors("Failed to book ticket. Please try again."):
        reserved = db.trains.find_one_and_update(
            {"_id": train["_id"], "available_seats": {"$gt": 0}},
            {"$inc": {"available_seats": -1}},
            return_document=ReturnDocument.AFTER,
        )
    if reserved is None:
        raise BadRequestError("No seats available on this train.")

    booking_doc = {
        "user_id": user["_id"],
        "user_email": user.get("email") or "N/A",
        "train_id": train["_id"],
        "train_name": train.get("name") or "Unknown Train",
        "from_station": train["departure_station"],
        "to_station": train["arrival_station"],
        "date": train["departure_date"],
        "seat": seat or "Not Assigned",
        "status": "Confirmed",
        "booked_at": utcnow(),
    }
    try:
        with provider_errors("Failed to book ticket. Please try again."):
            result = db.bookings.insert_one(booking_doc)
            booking_doc["_id"] = result.inserted_id
    except ProviderError:
        _release_seat(db, train["_id"])
        raise

    logger.info("Booking %s created on train %s (%d seats left)",
                result.inserted_id, train["_id"], reserved["available_seats"])
    return booking_doc


def get_user_tickets(db, user):
    return list_documents(
        db.bookings, {"user_id": user["_id"]}, sort_field="booked_at",
        error_message="Failed to load your tickets. Please try again later.",
    )


def list_bookings(db, status=None):
    if status:
        BOOKING.validate_status(status)
    return list_documents(
        db.bookings, {"status": status} if status else {}, sort_field="booked_at",
        error_message="Failed to load bookings. Please try again later.",
    )


def cancel_ticket(db, ticket_id, user):
    """Passenger cancellation: the booking document is deleted."""
    booking = load_document(db.bookings, ticket_id, "booking")
    require_owner(booking, user, "You do not have permission to cancel this ticket.")

    with provider_errors("Failed to cancel ticket. Please try again."):
        result = db.bookings.delete_one({"_id": booking["_id"]})
    if result.deleted_count == 0:
        raise NotFoundError("Booking not found.")

    logger.info("Ticket %s cancelled and removed", booking["_id"])
    if booking["status"] == "Confirmed":
        try:
            _release_seat(db, booking["train_id"])
        except ProviderError:
            # The ticket is already gone; the seat count needs fixing by hand
            logger.error("Seat on train %s not released after cancelling ticket %s",
                         booking["train_id"], booking["_id"])


def admin_cancel_booking(db, booking_id):
    """Back-office cancellation keeps the record and flips it to Cancelled."""
    booking = load_document(db.bookings, booking_id, "booking")
    updated = apply_transition(
        db.bookings, booking, BOOKING, "cancel",
        error_message="Failed to cancel booking. Please try again.",
    )
    _release_seat(db, booking["train_id"])
    return updated
