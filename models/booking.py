# models/booking.py
from typing import Optional

from pydantic import BaseModel


class BookingCreate(BaseModel):
    train_id: str
    seat: Optional[str] = None
