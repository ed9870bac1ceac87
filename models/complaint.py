# models/complaint.py
from typing import Literal, Optional

from pydantic import BaseModel

ComplaintType = Literal["schedule", "service", "facility", "staff", "other"]


class ComplaintCreate(BaseModel):
    type: Optional[ComplaintType] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    contact_info: Optional[str] = None


class ComplaintFollowUp(BaseModel):
    message: str


class ComplaintStatusUpdate(BaseModel):
    status: str                      # Pending, In Progress, Resolved, Rejected
    response: Optional[str] = None
