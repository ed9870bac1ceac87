# routes/train.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from database import get_db
from models.train import TrainCreate
from services import trains
from utils.auth import get_current_user_admin
from utils.serialize import to_out

router = APIRouter()


# === GET: Search trains by route and day ===
@router.get("/search", response_model=List[dict])
def search_trains(
    from_station: str = Query(..., alias="from"),
    to_station: str = Query(..., alias="to"),
    travel_date: date = Query(..., alias="date"),
    db=Depends(get_db),
):
    return [to_out(t) for t in trains.search_trains(db, from_station, to_station, travel_date)]


# === GET: Upcoming trains ===
@router.get("/", response_model=List[dict])
def get_available_trains(db=Depends(get_db)):
    return [to_out(t) for t in trains.get_available_trains(db)]


@router.get("/{train_id}", response_model=dict)
def get_train(train_id: str, db=Depends(get_db)):
    return to_out(trains.get_train(db, train_id))


# === Admin: train management ===
@router.post("/", response_model=dict)
def create_train(train_in: TrainCreate, db=Depends(get_db), current_admin=Depends(get_current_user_admin)):
    train = trains.create_train(db, train_in)
    return {"id": str(train["_id"]), "message": "Train added successfully"}


@router.put("/{train_id}", response_model=dict)
def update_train(train_id: str, train_in: TrainCreate, db=Depends(get_db),
                 current_admin=Depends(get_current_user_admin)):
    return to_out(trains.update_train(db, train_id, train_in))


@router.delete("/{train_id}")
def delete_train(train_id: str, db=Depends(get_db), current_admin=Depends(get_current_user_admin)):
    trains.delete_train(db, train_id)
    return {"message": "Train deleted successfully"}
