# services/complaints.py
import logging

from pymongo import ReturnDocument

from services.common import load_document, list_documents, require_owner
from services.lifecycle import COMPLAINT, apply_transition
from utils.dates import utcnow
from utils.errors import BadRequestError, ForbiddenError, InvalidTransitionError, provider_errors

logger = logging.getLogger(__name__)


def submit_complaint(db, complaint_in, user):
    if not complaint_in.type or not complaint_in.subject or not complaint_in.description:
        raise BadRequestError("Complaint type, subject, and description are required.")

    complaint_doc = {
        "user_id": user["_id"],
        "user_email": user.get("email") or "N/A",
        "type": complaint_in.type,
        "subject": complaint_in.subject,
        "description": complaint_in.description,
        "contact_info": complaint_in.contact_info or "",
        "status": "Pending",
        "created_at": utcnow(),
    }
    with provider_errors("Failed to submit complaint. Please try again."):
        result = db.complaints.insert_one(complaint_doc)
        complaint_doc["_id"] = result.inserted_id

    logger.info("Complaint %s submitted by %s", result.inserted_id, complaint_doc["user_email"])
    return complaint_doc


def get_user_complaints(db, user):
    return list_documents(
        db.complaints, {"user_id": user["_id"]},
        error_message="Failed to load your complaints. Please try again later.",
    )


def list_complaints(db, status=None):
    if status:
        COMPLAINT.validate_status(status)
    return list_documents(
        db.complaints, {"status": status} if status else {},
        error_message="Failed to load complaints. Please try again later.",
    )


def get_complaint(db, complaint_id, user):
    complaint = load_document(db.complaints, complaint_id, "complaint")
    require_owner(complaint, user, "You do not have permission to view this complaint.")
    return complaint


def update_complaint_status(db, complaint_id, new_status, response=None, admin_id=None):
    if not new_status:
        raise BadRequestError("New status is required.")
    complaint = load_document(db.complaints, complaint_id, "complaint")
    event = COMPLAINT.event_for(complaint["status"], new_status)

    extra = {}
    if response:
        extra["response"] = response
    if admin_id:
        extra["admin_id"] = admin_id
    return apply_transition(
        db.complaints, complaint, COMPLAINT, event, extra=extra,
        error_message="Failed to update complaint status. Please try again.",
    )


def add_follow_up(db, complaint_id, message, user):
    """Append a user message to the complaint thread.

    A Resolved complaint goes back to In Progress; other statuses are kept.
    """
    if not message or not message.strip():
        raise BadRequestError("Complaint ID and follow-up message are required.")

    complaint = load_document(db.complaints, complaint_id, "complaint")
    if complaint["user_id"] != user["_id"]:
        raise ForbiddenError("You do not have permission to follow up on this complaint.")

    current = complaint["status"]
    new_status = COMPLAINT.next_status(current, "reopen") if current == "Resolved" else current
    now = utcnow()
    entry = {"message": message.strip(), "sender": "user", "timestamp": now}

    with provider_errors("Failed to add follow-up. Please try again."):
        updated = db.complaints.find_one_and_update(
            {"_id": complaint["_id"], "status": current},
            {"$push": {"conversation": entry}, "$set": {"status": new_status, "updated_at": now}},
            return_document=ReturnDocument.AFTER,
        )
    if updated is None:
        raise InvalidTransitionError("The complaint was modified by someone else. Please reload and try again.")

    logger.info("Follow-up added to complaint %s (%s -> %s)", complaint["_id"], current, new_status)
    return updated
