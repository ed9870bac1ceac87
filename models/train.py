# models/train.py
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class TrainCreate(BaseModel):
    name: str
    train_number: str
    departure_station: str
    arrival_station: str
    departure_date: date
    departure_time: Optional[str] = Field(None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")   # HH:MM
    arrival_time: Optional[str] = Field(None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    total_seats: int = Field(..., ge=1)
