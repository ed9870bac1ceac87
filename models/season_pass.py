# models/season_pass.py
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel

PassType = Literal["monthly", "quarterly", "biannual", "annual"]
TravelClass = Literal["economy", "business", "first"]


class SeasonPassCreate(BaseModel):
    full_name: Optional[str] = None
    id_number: Optional[str] = None
    phone: Optional[str] = None
    from_station: Optional[str] = None
    to_station: Optional[str] = None
    pass_type: PassType = "monthly"
    travel_class: TravelClass = "economy"
    valid_from: Optional[date] = None      # defaults to today
    comments: Optional[str] = None


class SeasonPassRenew(BaseModel):
    pass_type: Optional[PassType] = None   # keep the current plan when empty
    start_date: Optional[date] = None      # day after current expiry when empty


class SeasonPassStatusUpdate(BaseModel):
    status: str     # Pending, Active, Expired, Cancelled
