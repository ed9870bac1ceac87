from datetime import timedelta

import pytest

from models.train import TrainCreate
from services import tickets, trains
from utils.dates import start_of_day, utcnow
from utils.errors import BadRequestError, InvalidTransitionError

NEW_TRAIN = {
    "name": "Yal Devi",
    "train_number": "4077",
    "departure_station": "Colombo Fort",
    "arrival_station": "Jaffna",
    "departure_date": "2030-06-01",
    "departure_time": "11:50",
    "arrival_time": "19:40",
    "total_seats": 150,
}


def test_search_matches_route_and_day(client, train):
    day = train["departure_date"].date().isoformat()

    resp = client.get("/api/trains/search", params={"from": "Colombo Fort", "to": "Badulla", "date": day})
    assert [t["id"] for t in resp.json()] == [str(train["_id"])]

    next_day = (train["departure_date"] + timedelta(days=1)).date().isoformat()
    resp = client.get("/api/trains/search", params={"from": "Colombo Fort", "to": "Badulla", "date": next_day})
    assert resp.json() == []

    resp = client.get("/api/trains/search", params={"from": "Badulla", "to": "Colombo Fort", "date": day})
    assert resp.json() == []


def test_available_trains_skip_past_departures(client, db, train):
    db.trains.insert_one({**{k: v for k, v in train.items() if k != "_id"},
                          "departure_date": start_of_day(utcnow()) - timedelta(days=2)})

    resp = client.get("/api/trains/")
    assert [t["id"] for t in resp.json()] == [str(train["_id"])]


def test_admin_creates_train_with_all_seats_free(client, db, admin_headers):
    resp = client.post("/api/trains/", json=NEW_TRAIN, headers=admin_headers)

    assert resp.status_code == 200
    stored = client.get(f"/api/trains/{resp.json()['id']}").json()
    assert stored["available_seats"] == 150
    assert stored["departure_date"].startswith("2030-06-01T11:50")


def test_passenger_cannot_create_train(client, passenger_headers):
    assert client.post("/api/trains/", json=NEW_TRAIN, headers=passenger_headers).status_code == 403


def test_update_keeps_sold_seats(client, db, train, passenger_headers, admin_headers):
    client.post("/api/bookings/", json={"train_id": str(train["_id"])}, headers=passenger_headers)

    resp = client.put(f"/api/trains/{train['_id']}", json={**NEW_TRAIN, "total_seats": 10}, headers=admin_headers)
    assert resp.json()["available_seats"] == 9

    resp = client.put(f"/api/trains/{train['_id']}", json={**NEW_TRAIN, "total_seats": 0}, headers=admin_headers)
    assert resp.status_code == 422


def test_delete_refused_with_confirmed_bookings(client, db, train, passenger_headers, admin_headers):
    booking_id = client.post("/api/bookings/", json={"train_id": str(train["_id"])}, headers=passenger_headers).json()["id"]

    assert client.delete(f"/api/trains/{train['_id']}", headers=admin_headers).status_code == 400

    client.delete(f"/api/bookings/{booking_id}", headers=passenger_headers)
    assert client.delete(f"/api/trains/{train['_id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/trains/{train['_id']}").status_code == 404


def test_update_keeps_booking_made_after_load(db, train, passenger, monkeypatch):
    load_document = trains.load_document

    def load_then_book(collection, doc_id, label, error_message=None):
        doc = load_document(collection, doc_id, label, error_message)
        if label == "train":
            tickets.book_ticket(db, str(train["_id"]), passenger)
        return doc

    monkeypatch.setattr(trains, "load_document", load_then_book)

    updated = trains.update_train(db, str(train["_id"]), TrainCreate(**{**NEW_TRAIN, "total_seats": 2}))

    assert updated["available_seats"] == 1
    assert db.trains.find_one({"_id": train["_id"]})["available_seats"] == 1


def test_update_refused_when_total_changed_concurrently(db, train, monkeypatch):
    load_document = trains.load_document

    def load_then_resize(collection, doc_id, label, error_message=None):
        doc = load_document(collection, doc_id, label, error_message)
        db.trains.update_one({"_id": train["_id"]}, {"$set": {"total_seats": 5}, "$inc": {"available_seats": 3}})
        return doc

    monkeypatch.setattr(trains, "load_document", load_then_resize)

    with pytest.raises(InvalidTransitionError):
        trains.update_train(db, str(train["_id"]), TrainCreate(**{**NEW_TRAIN, "total_seats": 10}))
    assert db.trains.find_one({"_id": train["_id"]})["total_seats"] == 5


def test_update_cannot_shrink_below_sold_seats(db, train, passenger, other_passenger):
    tickets.book_ticket(db, str(train["_id"]), passenger)
    tickets.book_ticket(db, str(train["_id"]), other_passenger)

    with pytest.raises(BadRequestError, match=r"already booked \(2\)"):
        trains.update_train(db, str(train["_id"]), TrainCreate(**{**NEW_TRAIN, "total_seats": 1}))
    assert db.trains.find_one({"_id": train["_id"]})["available_seats"] == 0
