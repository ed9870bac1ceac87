# routes/complaint.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from database import get_db
from models.complaint import ComplaintCreate, ComplaintFollowUp, ComplaintStatusUpdate
from services import complaints
from utils.auth import get_current_user, get_current_user_admin
from utils.serialize import to_out

router = APIRouter()


# === POST: Submit complaint ===
@router.post("/")
def submit_complaint(complaint_in: ComplaintCreate, db=Depends(get_db), current_user=Depends(get_current_user)):
    complaint = complaints.submit_complaint(db, complaint_in, current_user)
    return {"id": str(complaint["_id"]), "message": "Complaint submitted"}


@router.get("/mine", response_model=List[dict])
def get_my_complaints(db=Depends(get_db), current_user=Depends(get_current_user)):
    return [to_out(c) for c in complaints.get_user_complaints(db, current_user)]


@router.get("/{complaint_id}", response_model=dict)
def get_complaint(complaint_id: str, db=Depends(get_db), current_user=Depends(get_current_user)):
    return to_out(complaints.get_complaint(db, complaint_id, current_user))


# === POST: Follow-up from the passenger ===
@router.post("/{complaint_id}/follow-up", response_model=dict)
def add_follow_up(complaint_id: str, follow_up: ComplaintFollowUp, db=Depends(get_db),
                  current_user=Depends(get_current_user)):
    return to_out(complaints.add_follow_up(db, complaint_id, follow_up.message, current_user))


# === Admin: respond ===
@router.get("/", response_model=List[dict])
def get_complaints(status: Optional[str] = Query(None), db=Depends(get_db),
                   current_admin=Depends(get_current_user_admin)):
    return [to_out(c) for c in complaints.list_complaints(db, status)]


@router.put("/{complaint_id}/status", response_model=dict)
def update_complaint_status(complaint_id: str, status_in: ComplaintStatusUpdate, db=Depends(get_db),
                            current_admin=Depends(get_current_user_admin)):
    complaint = complaints.update_complaint_status(
        db, complaint_id, status_in.status,
        response=status_in.response,
        admin_id=current_admin["_id"],
    )
    return to_out(complaint)
