# services/stats.py
from utils.dates import start_of_day, utcnow
from utils.errors import provider_errors


def overview(db):
    """Counters for the admin dashboard."""
    today = start_of_day(utcnow())
    with provider_errors("Failed to load dashboard statistics"):
        return {
            "total_trains": db.trains.count_documents({"departure_date": {"$gte": today}}),
            "active_bookings": db.bookings.count_documents({"status": "Confirmed", "date": {"$gte": today}}),
            "total_users": db.users.count_documents({"role": {"$ne": "admin"}}),
            "pending_complaints": db.complaints.count_documents({"status": "Pending"}),
            "pending_passes": db.seasonPasses.count_documents({"status": "Pending"}),
            "cargo_in_transit": db.cargos.count_documents({"status": "In Transit"}),
        }
