# utils/serialize.py
from bson import ObjectId

from utils.errors import BadRequestError


def convert_obj_id(obj):
    if isinstance(obj, ObjectId):
        return str(obj)
    if isinstance(obj, dict):
        return {k: convert_obj_id(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [convert_obj_id(i) for i in obj]
    return obj


def to_out(doc, exclude=()):
    """Turn a stored document into a response dict with a string ``id``."""
    if doc is None:
        return None
    out = convert_obj_id({k: v for k, v in doc.items() if k not in exclude})
    if "_id" in out:
        out["id"] = out.pop("_id")
    return out


def parse_object_id(value, field="id"):
    if not ObjectId.is_valid(value):
        raise BadRequestError(f"{field} is not valid (must be a 24 character hex string)")
    return ObjectId(value)
