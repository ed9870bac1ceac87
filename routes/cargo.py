# routes/cargo.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from database import get_db
from models.cargo import CargoCreate, CargoStatusUpdate
from services import cargo as cargo_service
from utils.auth import get_current_user, get_current_user_admin
from utils.errors import NotFoundError
from utils.serialize import to_out

router = APIRouter()


# === POST: Book a cargo shipment ===
@router.post("/")
def book_cargo(cargo_in: CargoCreate, db=Depends(get_db), current_user=Depends(get_current_user)):
    cargo = cargo_service.book_cargo(db, cargo_in, current_user)
    return {
        "id": str(cargo["_id"]),
        "tracking_number": cargo["tracking_number"],
        "cost": cargo["cost"],
        "message": "Cargo booked successfully",
    }


@router.get("/mine", response_model=List[dict])
def get_my_cargos(db=Depends(get_db), current_user=Depends(get_current_user)):
    return [to_out(c) for c in cargo_service.get_user_cargos(db, current_user)]


# === GET: Public tracking ===
@router.get("/track/{tracking_number}", response_model=dict)
def track_cargo(tracking_number: str, db=Depends(get_db)):
    cargo = cargo_service.track_cargo(db, tracking_number)
    if not cargo:
        raise NotFoundError(f"No shipment found with tracking number {tracking_number}")
    # Tracking is public; owner details stay private
    return to_out(cargo, exclude=("user_id", "user_email"))


@router.get("/{cargo_id}", response_model=dict)
def get_cargo(cargo_id: str, db=Depends(get_db), current_user=Depends(get_current_user)):
    return to_out(cargo_service.get_cargo(db, cargo_id, current_user))


@router.put("/{cargo_id}/cancel", response_model=dict)
def cancel_cargo(cargo_id: str, db=Depends(get_db), current_user=Depends(get_current_user)):
    return to_out(cargo_service.cancel_cargo(db, cargo_id, current_user))


# === Admin ===
@router.get("/", response_model=List[dict])
def get_cargos(status: Optional[str] = Query(None), db=Depends(get_db),
               current_admin=Depends(get_current_user_admin)):
    return [to_out(c) for c in cargo_service.list_cargos(db, status)]


@router.put("/{cargo_id}/status", response_model=dict)
def update_cargo_status(cargo_id: str, status_in: CargoStatusUpdate, db=Depends(get_db),
                        current_admin=Depends(get_current_user_admin)):
    return to_out(cargo_service.update_cargo_status(db, cargo_id, status_in.status))
