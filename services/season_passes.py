# services/season_passes.py
import logging
from datetime import timedelta

from services.common import load_document, list_documents, require_owner
from services.lifecycle import SEASON_PASS, apply_transition
from services.pricing import calculate_pass_cost
from services.validity import calculate_end_date
from utils.dates import start_of_day, to_datetime, utcnow
from utils.errors import BadRequestError, ProviderError, provider_errors

logger = logging.getLogger(__name__)


def expire_lapsed_passes(db, query):
    """Persist Active -> Expired for passes in ``query`` whose validity ended."""
    now = utcnow()
    expired = SEASON_PASS.next_status("Active", "expire")
    with provider_errors("Failed to load season passes. Please try again later."):
        result = db.seasonPasses.update_many(
            {**query, "status": "Active", "valid_to": {"$lt": now}},
            {"$set": {"status": expired, "updated_at": now}},
        )
    if result.modified_count:
        logger.info("Expired %d lapsed season pass(es)", result.modified_count)


def _restore_active(db, season_pass):
    with provider_errors("Failed to renew season pass. Please contact support."):
        db.seasonPasses.update_one(
            {"_id": season_pass["_id"], "status": "Expired"},
            {"$set": {"status": "Active", "updated_at": utcnow()}},
        )
    logger.warning("Renewal of season pass %s failed, status restored to Active", season_pass["_id"])


def apply_for_pass(db, pass_in, user):
    if not pass_in.full_name or not pass_in.id_number or not pass_in.from_station or not pass_in.to_station:
        raise BadRequestError("Full name, ID number, and route information are required.")

    pass_type = pass_in.pass_type or "monthly"
    travel_class = pass_in.travel_class or "economy"
    valid_from = to_datetime(pass_in.valid_from, field="start date") if pass_in.valid_from else start_of_day(utcnow())

    pass_doc = {
        "user_id": user["_id"],
        "user_email": user.get("email") or "N/A",
        "full_name": pass_in.full_name,
        "id_number": pass_in.id_number,
        "phone": pass_in.phone or "N/A",
        "from_station": pass_in.from_station,
        "to_station": pass_in.to_station,
        "pass_type": pass_type,
        "travel_class": travel_class,
        "valid_from": valid_from,
        "valid_to": calculate_end_date(valid_from, pass_type),
        "status": "Pending",
        "cost": calculate_pass_cost(pass_type, travel_class, pass_in.from_station, pass_in.to_station),
        "comments": pass_in.comments or "",
        "created_at": utcnow(),
    }

    with provider_errors("Failed to submit season pass application. Please try again."):
        result = db.seasonPasses.insert_one(pass_doc)
        pass_doc["_id"] = result.inserted_id

    logger.info("Season pass application %s created for %s", result.inserted_id, pass_doc["user_email"])
    return pass_doc


def get_user_passes(db, user):
    expire_lapsed_passes(db, {"user_id": user["_id"]})
    return list_documents(
        db.seasonPasses, {"user_id": user["_id"]},
        error_message="Failed to load your season passes. Please try again later.",
    )


def list_passes(db, status=None):
    if status:
        SEASON_PASS.validate_status(status)
    expire_lapsed_passes(db, {})
    return list_documents(
        db.seasonPasses, {"status": status} if status else {},
        error_message="Failed to load season passes. Please try again later.",
    )


def get_pass(db, pass_id, user):
    season_pass = load_document(db.seasonPasses, pass_id, "season pass")
    require_owner(season_pass, user, "You do not have permission to view this season pass.")
    if season_pass["status"] == "Active" and season_pass["valid_to"] < utcnow():
        expire_lapsed_passes(db, {"_id": season_pass["_id"]})
        season_pass = load_document(db.seasonPasses, pass_id, "season pass")
    return season_pass


def renew_pass(db, pass_id, user, new_pass_type=None, custom_start_date=None):
    """Issue a follow-on pass for an Active or Expired one.

    The new pass starts the day after the old one ends unless a start date
    is given, keeps the route and class, and points back through
    ``renewed_from``. An Active original is marked Expired first.
    """
    old_pass = load_document(db.seasonPasses, pass_id, "season pass")
    require_owner(old_pass, user, "You do not have permission to renew this season pass.")
    SEASON_PASS.next_status(old_pass["status"], "renew")

    if custom_start_date:
        new_start = to_datetime(custom_start_date, field="start date")
    else:
        new_start = to_datetime(old_pass["valid_to"]) + timedelta(days=1)

    pass_type = new_pass_type or old_pass["pass_type"]
    new_end = calculate_end_date(new_start, pass_type)
    cost = calculate_pass_cost(pass_type, old_pass["travel_class"], old_pass["from_station"], old_pass["to_station"])

    if old_pass["status"] == "Active":
        apply_transition(
            db.seasonPasses, old_pass, SEASON_PASS, "renew",
            error_message="Failed to renew season pass. Please try again.",
        )

    renewal_doc = {
        "user_id": old_pass["user_id"],
        "user_email": old_pass.get("user_email"),
        "full_name": old_pass["full_name"],
        "id_number": old_pass["id_number"],
        "phone": old_pass.get("phone"),
        "from_station": old_pass["from_station"],
        "to_station": old_pass["to_station"],
        "pass_type": pass_type,
        "travel_class": old_pass["travel_class"],
        "valid_from": new_start,
        "valid_to": new_end,
        "status": "Active",
        "cost": cost,
        "comments": old_pass.get("comments", ""),
        "created_at": utcnow(),
        "renewed_from": old_pass["_id"],
    }

    try:
        with provider_errors("Failed to renew season pass. Please try again."):
            result = db.seasonPasses.insert_one(renewal_doc)
            renewal_doc["_id"] = result.inserted_id
    except ProviderError:
        if old_pass["status"] == "Active":
            _restore_active(db, old_pass)
        raise

    logger.info("Season pass %s renewed as %s", old_pass["_id"], result.inserted_id)
    return renewal_doc


def update_pass_status(db, pass_id, new_status):
    if not new_status:
        raise BadRequestError("New status is required.")
    season_pass = load_document(db.seasonPasses, pass_id, "season pass")
    event = SEASON_PASS.event_for(season_pass["status"], new_status)
    return apply_transition(
        db.seasonPasses, season_pass, SEASON_PASS, event,
        error_message="Failed to update season pass status. Please try again.",
    )
