# routes/season_pass.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from database import get_db
from models.season_pass import SeasonPassCreate, SeasonPassRenew, SeasonPassStatusUpdate
from services import season_passes
from utils.auth import get_current_user, get_current_user_admin
from utils.serialize import to_out

router = APIRouter()


# === POST: Apply for a season pass ===
@router.post("/")
def apply_for_pass(pass_in: SeasonPassCreate, db=Depends(get_db), current_user=Depends(get_current_user)):
    season_pass = season_passes.apply_for_pass(db, pass_in, current_user)
    return {
        "id": str(season_pass["_id"]),
        "cost": season_pass["cost"],
        "valid_from": season_pass["valid_from"],
        "valid_to": season_pass["valid_to"],
        "message": "Season pass application submitted",
    }


@router.get("/mine", response_model=List[dict])
def get_my_passes(db=Depends(get_db), current_user=Depends(get_current_user)):
    return [to_out(p) for p in season_passes.get_user_passes(db, current_user)]


@router.get("/{pass_id}", response_model=dict)
def get_pass(pass_id: str, db=Depends(get_db), current_user=Depends(get_current_user)):
    return to_out(season_passes.get_pass(db, pass_id, current_user))


# === POST: Renew ===
@router.post("/{pass_id}/renew")
def renew_pass(pass_id: str, renew_in: Optional[SeasonPassRenew] = None,
               db=Depends(get_db), current_user=Depends(get_current_user)):
    renew_in = renew_in or SeasonPassRenew()
    renewal = season_passes.renew_pass(
        db, pass_id, current_user,
        new_pass_type=renew_in.pass_type,
        custom_start_date=renew_in.start_date,
    )
    return {"id": str(renewal["_id"]), "message": "Season pass renewed", "pass": to_out(renewal)}


# === Admin: approval and status ===
@router.get("/", response_model=List[dict])
def get_passes(status: Optional[str] = Query(None), db=Depends(get_db),
               current_admin=Depends(get_current_user_admin)):
    return [to_out(p) for p in season_passes.list_passes(db, status)]


@router.put("/{pass_id}/status", response_model=dict)
def update_pass_status(pass_id: str, status_in: SeasonPassStatusUpdate, db=Depends(get_db),
                       current_admin=Depends(get_current_user_admin)):
    return to_out(season_passes.update_pass_status(db, pass_id, status_in.status))
