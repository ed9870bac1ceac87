# services/cargo.py
import logging

from pymongo.errors import DuplicateKeyError

from config import TRACKING_NUMBER_ATTEMPTS
from services.common import load_document, list_documents, require_owner
from services.lifecycle import CARGO, apply_transition
from services.pricing import calculate_shipping_cost
from services.tracking import generate_tracking_number
from utils.dates import to_datetime, utcnow
from utils.errors import BadRequestError, ProviderError, provider_errors

logger = logging.getLogger(__name__)


def book_cargo(db, cargo_in, user):
    if not cargo_in.from_station or not cargo_in.to_station or not cargo_in.shipping_date:
        raise BadRequestError("Origin, destination and shipping date are required.")

    weight = cargo_in.weight if cargo_in.weight is not None else 1
    cost = calculate_shipping_cost(weight, cargo_in.cargo_type, cargo_in.from_station, cargo_in.to_station)

    cargo_doc = {
        "user_id": user["_id"],
        "user_email": user.get("email") or "N/A",
        "sender_name": cargo_in.sender_name or "Not Provided",
        "recipient_name": cargo_in.recipient_name or "Not Provided",
        "from_station": cargo_in.from_station,
        "to_station": cargo_in.to_station,
        "shipping_date": to_datetime(cargo_in.shipping_date, field="shipping date"),
        "cargo_type": cargo_in.cargo_type or "general",
        "weight": weight,
        "special_instructions": cargo_in.special_instructions or "",
        "status": "Pending",
        "cost": cost,
        "created_at": utcnow(),
    }

    # tracking_number has a unique index; draw again on collision
    with provider_errors("Failed to book cargo shipment. Please try again."):
        for attempt in range(1, TRACKING_NUMBER_ATTEMPTS + 1):
            cargo_doc.pop("_id", None)
            cargo_doc["tracking_number"] = generate_tracking_number()
            try:
                result = db.cargos.insert_one(cargo_doc)
                break
            except DuplicateKeyError:
                logger.warning("Tracking number %s already taken (attempt %d)", cargo_doc["tracking_number"], attempt)
        else:
            raise ProviderError("Failed to allocate a tracking number. Please try again.")

    logger.info("Cargo booking %s created with tracking number %s", result.inserted_id, cargo_doc["tracking_number"])
    cargo_doc["_id"] = result.inserted_id
    return cargo_doc


def get_user_cargos(db, user):
    return list_documents(
        db.cargos, {"user_id": user["_id"]},
        error_message="Failed to load your cargo shipments. Please try again later.",
    )


def list_cargos(db, status=None):
    if status:
        CARGO.validate_status(status)
    return list_documents(
        db.cargos, {"status": status} if status else {},
        error_message="Failed to load cargo shipments. Please try again later.",
    )


def track_cargo(db, tracking_number):
    """Look a shipment up by tracking number; None when there is no match."""
    if not tracking_number:
        raise BadRequestError("Tracking number is required.")
    with provider_errors("Failed to track cargo. Please try again with a valid tracking number."):
        return db.cargos.find_one({"tracking_number": tracking_number.strip().upper()})


def get_cargo(db, cargo_id, user):
    cargo = load_document(db.cargos, cargo_id, "cargo booking")
    require_owner(cargo, user, "You do not have permission to view this cargo booking.")
    return cargo


def cancel_cargo(db, cargo_id, user):
    cargo = load_document(db.cargos, cargo_id, "cargo booking")
    require_owner(cargo, user, "You do not have permission to cancel this cargo booking.")
    return apply_transition(
        db.cargos, cargo, CARGO, "cancel",
        error_message="Failed to cancel cargo. Please try again.",
    )


def update_cargo_status(db, cargo_id, new_status):
    if not new_status:
        raise BadRequestError("New status is required.")
    cargo = load_document(db.cargos, cargo_id, "cargo booking")
    event = CARGO.event_for(cargo["status"], new_status)
    return apply_transition(
        db.cargos, cargo, CARGO, event,
        error_message="Failed to update cargo status. Please try again.",
    )
