# services/accounts.py
import logging
import secrets
from datetime import timedelta

from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError

from config import SESSION_TTL_HOURS
from services.common import load_document
from utils.dates import utcnow
from utils.errors import BadRequestError, ForbiddenError, UnauthorizedError, provider_errors

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ROLES = ("passenger", "admin")


def public_user(user):
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "email": user["email"],
        "phone": user.get("phone"),
        "role": user.get("role", "passenger"),
    }


def register_user(db, user_in, role="passenger"):
    if role not in ROLES:
        raise BadRequestError(f"Invalid role. Must be one of: {', '.join(ROLES)}")

    email = user_in.email.lower()
    user_doc = {
        "name": user_in.name,
        "email": email,
        "password": pwd_context.hash(user_in.password),
        "phone": user_in.phone,
        "role": role,
        "created_at": utcnow(),
    }
    with provider_errors("Failed to create account. Please try again."):
        if db.users.find_one({"email": email}):
            raise BadRequestError("Email is already in use")
        try:
            result = db.users.insert_one(user_doc)
            user_doc["_id"] = result.inserted_id
        except DuplicateKeyError:
            raise BadRequestError("Email is already in use")

    logger.info("Registered %s account %s", role, email)
    return user_doc


def authenticate(db, email, password):
    with provider_errors("Login failed. Please try again."):
        user = db.users.find_one({"email": email.lower()})
    if not user or not pwd_context.verify(password, user["password"]):
        raise UnauthorizedError("Invalid email or password")
    return user


def open_session(db, user):
    now = utcnow()
    session = {
        "token": secrets.token_urlsafe(32),
        "user_id": user["_id"],
        "created_at": now,
        "expires_at": now + timedelta(hours=SESSION_TTL_HOURS),
    }
    with provider_errors("Login failed. Please try again."):
        db.sessions.insert_one(session)
    logger.info("Session opened for %s", user["email"])
    return session


def login(db, email, password):
    user = authenticate(db, email, password)
    return user, open_session(db, user)


def admin_login(db, email, password):
    """Like login, but only admins get a session."""
    user = authenticate(db, email, password)
    if user.get("role") != "admin":
        logger.warning("Non-admin %s refused at admin login", user["email"])
        raise ForbiddenError("Unauthorized access. Admin privileges required.")
    return user, open_session(db, user)


def logout(db, token):
    with provider_errors("Logout failed. Please try again."):
        db.sessions.delete_one({"token": token})


def resolve_session(db, token):
    """Return the user behind a session token, or raise UnauthorizedError."""
    with provider_errors("Failed to verify your session. Please try again."):
        session = db.sessions.find_one({"token": token})
        if not session or session["expires_at"] < utcnow():
            raise UnauthorizedError("Session expired or invalid. Please log in again.")
        user = db.users.find_one({"_id": session["user_id"]})
    if not user:
        raise UnauthorizedError("Session expired or invalid. Please log in again.")
    return user


def update_profile(db, user, profile_in):
    update_fields = {}
    if profile_in.name is not None:
        if not profile_in.name.strip():
            raise BadRequestError("Name cannot be empty")
        update_fields["name"] = profile_in.name.strip()
    if profile_in.phone is not None:
        update_fields["phone"] = profile_in.phone.strip()
    if not update_fields:
        raise BadRequestError("No profile fields were sent")

    update_fields["updated_at"] = utcnow()
    with provider_errors("Failed to update profile. Please try again."):
        db.users.update_one({"_id": user["_id"]}, {"$set": update_fields})
    return {**user, **update_fields}


def list_users(db):
    with provider_errors("Failed to load users. Please try again later."):
        return list(db.users.find({}, {"password": 0}).sort("created_at", -1))


def get_user(db, user_id):
    return load_document(db.users, user_id, "user")


def delete_user(db, user_id):
    user = load_document(db.users, user_id, "user")
    with provider_errors("Failed to delete user. Please try again."):
        db.sessions.delete_many({"user_id": user["_id"]})
        db.users.delete_one({"_id": user["_id"]})
    logger.info("Deleted user %s", user["email"])
