# utils/auth.py
from fastapi import Depends, Header

from database import get_db
from services.accounts import resolve_session
from utils.errors import ForbiddenError, UnauthorizedError


def get_session_token(x_session_token: str = Header(None, alias="X-Session-Token")):
    if not x_session_token:
        raise UnauthorizedError("Header X-Session-Token is required")
    return x_session_token


def get_current_user(token: str = Depends(get_session_token), db=Depends(get_db)):
    return resolve_session(db, token)


def get_current_user_admin(user=Depends(get_current_user)):
    if user.get("role") != "admin":
        raise ForbiddenError("Admin access only")
    return user
