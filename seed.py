# seed.py
from datetime import timedelta

from database import db, ensure_indexes
from services.accounts import pwd_context
from services.pricing import calculate_pass_cost, calculate_shipping_cost
from services.tracking import generate_tracking_number
from services.validity import calculate_end_date
from utils.dates import start_of_day, utcnow

print("Resetting railway_services collections...\n")
for name in ("trains", "bookings", "cargos", "seasonPasses", "complaints", "users", "sessions"):
    db[name].delete_many({})
ensure_indexes(db)

now = utcnow()
today = start_of_day(now)

# ================== 1. USERS ==================
users_data = [
    {"name": "Admin", "email": "admin@railway.test", "password": pwd_context.hash("admin123"), "role": "admin"},
    {"name": "Nimal Perera", "email": "nimal@railway.test", "password": pwd_context.hash("nimal123"), "role": "passenger", "phone": "0771234567"},
    {"name": "Kamala Silva", "email": "kamala@railway.test", "password": pwd_context.hash("kamala123"), "role": "passenger", "phone": "0719876543"},
]
for u in users_data:
    u["created_at"] = now
db.users.insert_many(users_data)
print(f"{len(users_data)} users created (admin@railway.test / admin123)\n")

nimal = db.users.find_one({"email": "nimal@railway.test"})
kamala = db.users.find_one({"email": "kamala@railway.test"})

# ================== 2. TRAINS ==================
trains_data = [
    {"name": "Udarata Manike", "train_number": "1015", "departure_station": "Colombo Fort", "arrival_station": "Badulla",
     "departure_date": today + timedelta(days=1, hours=5, minutes=55), "departure_time": "05:55", "arrival_time": "16:00", "total_seats": 120},
    {"name": "Podi Menike", "train_number": "1005", "departure_station": "Colombo Fort", "arrival_station": "Badulla",
     "departure_date": today + timedelta(days=2, hours=5, minutes=45), "departure_time": "05:45", "arrival_time": "17:30", "total_seats": 100},
    {"name": "Yal Devi", "train_number": "4077", "departure_station": "Colombo Fort", "arrival_station": "Jaffna",
     "departure_date": today + timedelta(days=3, hours=11, minutes=50), "departure_time": "11:50", "arrival_time": "19:40", "total_seats": 150},
    {"name": "Ruhunu Kumari", "train_number": "8058", "departure_station": "Matara", "arrival_station": "Colombo Fort",
     "departure_date": today + timedelta(days=1, hours=6, minutes=25), "departure_time": "06:25", "arrival_time": "09:40", "total_seats": 80},
]
for t in trains_data:
    t["available_seats"] = t["total_seats"]
    t["created_at"] = now
train_ids = db.trains.insert_many(trains_data).inserted_ids
print(f"{len(train_ids)} trains created\n")

# ================== 3. BOOKING ==================
first_train = db.trains.find_one_and_update({"_id": train_ids[0]}, {"$inc": {"available_seats": -1}})
db.bookings.insert_one({
    "user_id": nimal["_id"],
    "user_email": nimal["email"],
    "train_id": first_train["_id"],
    "train_name": first_train["name"],
    "from_station": first_train["departure_station"],
    "to_station": first_train["arrival_station"],
    "date": first_train["departure_date"],
    "seat": "A12",
    "status": "Confirmed",
    "booked_at": now,
})
print("1 booking created\n")

# ================== 4. CARGO ==================
db.cargos.insert_one({
    "user_id": kamala["_id"],
    "user_email": kamala["email"],
    "sender_name": "Kamala Silva",
    "recipient_name": "Sunil Silva",
    "from_station": "Colombo Fort",
    "to_station": "Kandy",
    "shipping_date": today + timedelta(days=2),
    "cargo_type": "fragile",
    "weight": 12,
    "special_instructions": "Glassware, keep upright",
    "tracking_number": generate_tracking_number(),
    "status": "Pending",
    "cost": calculate_shipping_cost(12, "fragile"),
    "created_at": now,
})
print("1 cargo shipment created\n")

# ================== 5. SEASON PASS ==================
db.seasonPasses.insert_one({
    "user_id": nimal["_id"],
    "user_email": nimal["email"],
    "full_name": "Nimal Perera",
    "id_number": "901234567V",
    "phone": "0771234567",
    "from_station": "Gampaha",
    "to_station": "Colombo Fort",
    "pass_type": "quarterly",
    "travel_class": "economy",
    "valid_from": today,
    "valid_to": calculate_end_date(today, "quarterly"),
    "status": "Pending",
    "cost": calculate_pass_cost("quarterly", "economy"),
    "comments": "",
    "created_at": now,
})
print("1 season pass application created\n")

# ================== 6. COMPLAINT ==================
db.complaints.insert_one({
    "user_id": kamala["_id"],
    "user_email": kamala["email"],
    "type": "schedule",
    "subject": "Train 8058 delayed",
    "description": "Ruhunu Kumari arrived 40 minutes late three days in a row.",
    "contact_info": "",
    "status": "Pending",
    "created_at": now,
})
print("1 complaint created\n")

print("Seed complete.")
