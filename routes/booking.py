# routes/booking.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from database import get_db
from models.booking import BookingCreate
from services import tickets
from utils.auth import get_current_user, get_current_user_admin
from utils.serialize import to_out

router = APIRouter()


# === POST: Book a ticket ===
@router.post("/")
def create_booking(booking_in: BookingCreate, db=Depends(get_db), current_user=Depends(get_current_user)):
    booking = tickets.book_ticket(db, booking_in.train_id, current_user, seat=booking_in.seat)
    return {"id": str(booking["_id"]), "message": "Ticket booked successfully", "booking": to_out(booking)}


# === GET: My tickets ===
@router.get("/mine", response_model=List[dict])
def get_my_bookings(db=Depends(get_db), current_user=Depends(get_current_user)):
    return [to_out(b) for b in tickets.get_user_tickets(db, current_user)]


# === DELETE: Cancel my ticket ===
@router.delete("/{booking_id}")
def cancel_booking(booking_id: str, db=Depends(get_db), current_user=Depends(get_current_user)):
    tickets.cancel_ticket(db, booking_id, current_user)
    return {"message": "Ticket cancelled"}


# === Admin: booking moderation ===
@router.get("/", response_model=List[dict])
def get_bookings(status: Optional[str] = Query(None), db=Depends(get_db),
                 current_admin=Depends(get_current_user_admin)):
    return [to_out(b) for b in tickets.list_bookings(db, status)]


@router.put("/{booking_id}/cancel", response_model=dict)
def admin_cancel_booking(booking_id: str, db=Depends(get_db), current_admin=Depends(get_current_user_admin)):
    return to_out(tickets.admin_cancel_booking(db, booking_id))
