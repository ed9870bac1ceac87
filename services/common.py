# services/common.py
from utils.errors import ForbiddenError, NotFoundError, provider_errors
from utils.serialize import parse_object_id


def is_admin(user):
    return user is not None and user.get("role") == "admin"


def load_document(collection, doc_id, label, error_message=None):
    """Fetch one document by its string id or raise NotFoundError."""
    obj_id = parse_object_id(doc_id, field=f"{label} id")
    with provider_errors(error_message or f"Failed to load {label}. Please try again."):
        doc = collection.find_one({"_id": obj_id})
    if not doc:
        raise NotFoundError(f"{label.capitalize()} not found.")
    return doc


def require_owner(doc, user, message):
    if doc.get("user_id") != user["_id"] and not is_admin(user):
        raise ForbiddenError(message)


def list_documents(collection, query, sort_field="created_at", error_message="Failed to load records."):
    with provider_errors(error_message):
        return list(collection.find(query).sort(sort_field, -1))
