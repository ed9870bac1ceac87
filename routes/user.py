# routes/user.py
from fastapi import APIRouter, Depends
from typing import List

from database import get_db
from models.user import UserCreate, UserLogin, ProfileUpdate
from services import accounts
from utils.auth import get_current_user, get_current_user_admin, get_session_token

router = APIRouter()


def _session_response(message, user, session):
    return {
        "msg": message,
        "token": session["token"],
        "expires_at": session["expires_at"],
        "user": accounts.public_user(user),
    }


# === POST: Register passenger ===
@router.post("/register")
def register(user_in: UserCreate, db=Depends(get_db)):
    user = accounts.register_user(db, user_in)
    return {"msg": "User created", "user": accounts.public_user(user)}


# === POST: Register admin (admin only) ===
@router.post("/register_admin")
def register_admin(user_in: UserCreate, db=Depends(get_db), current_admin=Depends(get_current_user_admin)):
    user = accounts.register_user(db, user_in, role="admin")
    return {"msg": "Admin created", "user": accounts.public_user(user)}


@router.post("/login")
def login(user_in: UserLogin, db=Depends(get_db)):
    user, session = accounts.login(db, user_in.email, user_in.password)
    return _session_response("Login successful", user, session)


@router.post("/admin/login")
def admin_login(user_in: UserLogin, db=Depends(get_db)):
    user, session = accounts.admin_login(db, user_in.email, user_in.password)
    return _session_response("Admin login successful", user, session)


@router.post("/logout")
def logout(token: str = Depends(get_session_token), db=Depends(get_db)):
    accounts.logout(db, token)
    return {"msg": "Logged out"}


# === GET: Current session state ===
@router.get("/me")
def me(current_user=Depends(get_current_user)):
    return {
        "user": accounts.public_user(current_user),
        "is_admin": current_user.get("role") == "admin",
    }


@router.put("/me")
def update_me(profile_in: ProfileUpdate, db=Depends(get_db), current_user=Depends(get_current_user)):
    user = accounts.update_profile(db, current_user, profile_in)
    return {"msg": "Profile updated", "user": accounts.public_user(user)}


# === Admin: user management ===
@router.get("/", response_model=List[dict])
def get_users(db=Depends(get_db), current_admin=Depends(get_current_user_admin)):
    return [accounts.public_user(u) for u in accounts.list_users(db)]


@router.get("/{user_id}", response_model=dict)
def get_user(user_id: str, db=Depends(get_db), current_admin=Depends(get_current_user_admin)):
    return accounts.public_user(accounts.get_user(db, user_id))


@router.delete("/{user_id}")
def delete_user(user_id: str, db=Depends(get_db), current_admin=Depends(get_current_user_admin)):
    accounts.delete_user(db, user_id)
    return {"message": "User deleted"}
