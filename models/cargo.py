# models/cargo.py
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

CargoType = Literal["general", "fragile", "perishable", "dangerous"]


class CargoCreate(BaseModel):
    sender_name: Optional[str] = None
    recipient_name: Optional[str] = None
    from_station: Optional[str] = None
    to_station: Optional[str] = None
    shipping_date: Optional[date] = None
    cargo_type: CargoType = "general"
    weight: Optional[float] = Field(None, ge=0, description="Weight in kg")
    special_instructions: Optional[str] = None


class CargoStatusUpdate(BaseModel):
    status: str     # Pending, In Transit, Delivered, Cancelled
