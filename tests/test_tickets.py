import logging

import mongomock
import pytest
from pymongo.errors import PyMongoError

from services import tickets
from utils.errors import BadRequestError, ForbiddenError, InvalidTransitionError


def book(client, headers, train_id, **extra):
    return client.post("/api/bookings/", json={"train_id": str(train_id), **extra}, headers=headers)


def test_book_ticket_copies_route_and_takes_seat(client, db, train, passenger_headers):
    resp = book(client, passenger_headers, train["_id"], seat="A12")

    assert resp.status_code == 200
    booking = resp.json()["booking"]
    assert booking["status"] == "Confirmed"
    assert booking["from_station"] == "Colombo Fort"
    assert booking["to_station"] == "Badulla"
    assert booking["train_name"] == "Udarata Manike"
    assert booking["seat"] == "A12"
    assert db.trains.find_one({"_id": train["_id"]})["available_seats"] == 1


def test_seat_defaults_to_not_assigned(db, train, passenger):
    booking = tickets.book_ticket(db, str(train["_id"]), passenger)
    assert booking["seat"] == "Not Assigned"


def test_sold_out_train_is_refused(db, train, passenger, other_passenger):
    tickets.book_ticket(db, str(train["_id"]), passenger)
    tickets.book_ticket(db, str(train["_id"]), other_passenger)

    with pytest.raises(BadRequestError, match="No seats available"):
        tickets.book_ticket(db, str(train["_id"]), passenger)
    assert db.trains.find_one({"_id": train["_id"]})["available_seats"] == 0
    assert db.bookings.count_documents({}) == 2


def test_book_unknown_train(client, passenger_headers):
    assert book(client, passenger_headers, "a" * 24).status_code == 404
    assert book(client, passenger_headers, "nope").status_code == 400


def test_cancel_deletes_booking_and_returns_seat(client, db, train, passenger_headers):
    booking_id = book(client, passenger_headers, train["_id"]).json()["id"]

    resp = client.delete(f"/api/bookings/{booking_id}", headers=passenger_headers)

    assert resp.status_code == 200
    assert db.bookings.count_documents({}) == 0
    assert db.trains.find_one({"_id": train["_id"]})["available_seats"] == 2
    assert client.delete(f"/api/bookings/{booking_id}", headers=passenger_headers).status_code == 404


def test_cannot_cancel_someone_elses_ticket(db, train, passenger, other_passenger):
    booking = tickets.book_ticket(db, str(train["_id"]), passenger)
    with pytest.raises(ForbiddenError):
        tickets.cancel_ticket(db, str(booking["_id"]), other_passenger)


def test_my_tickets(client, train, passenger_headers, other_headers):
    book(client, passenger_headers, train["_id"])
    book(client, other_headers, train["_id"])

    mine = client.get("/api/bookings/mine", headers=passenger_headers).json()
    assert len(mine) == 1
    assert mine[0]["user_email"] == "nimal@example.com"


def test_admin_cancel_flips_status(client, db, train, passenger_headers, admin_headers):
    booking_id = book(client, passenger_headers, train["_id"]).json()["id"]

    resp = client.put(f"/api/bookings/{booking_id}/cancel", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["status"] == "Cancelled"
    assert resp.json()["cancelled_at"]
    assert db.trains.find_one({"_id": train["_id"]})["available_seats"] == 2

    again = client.put(f"/api/bookings/{booking_id}/cancel", headers=admin_headers)
    assert again.status_code == 409


def test_passenger_delete_of_cancelled_booking_keeps_seats(db, train, passenger):
    booking = tickets.book_ticket(db, str(train["_id"]), passenger)
    tickets.admin_cancel_booking(db, str(booking["_id"]))

    tickets.cancel_ticket(db, str(booking["_id"]), passenger)
    assert db.trains.find_one({"_id": train["_id"]})["available_seats"] == 2


def test_admin_booking_list_is_admin_only(client, train, passenger_headers, admin_headers):
    book(client, passenger_headers, train["_id"])
    assert client.get("/api/bookings/", headers=passenger_headers).status_code == 403
    assert len(client.get("/api/bookings/", headers=admin_headers).json()) == 1
    resp = client.get("/api/bookings/", params={"status": "Cancelled"}, headers=admin_headers)
    assert resp.json() == []


def test_admin_cancel_already_cancelled_raises(db, train, passenger):
    booking = tickets.book_ticket(db, str(train["_id"]), passenger)
    tickets.admin_cancel_booking(db, str(booking["_id"]))
    with pytest.raises(InvalidTransitionError, match="already cancelled"):
        tickets.admin_cancel_booking(db, str(booking["_id"]))


def test_cancel_succeeds_when_seat_release_fails(client, db, train, passenger_headers, monkeypatch, caplog):
    booking_id = book(client, passenger_headers, train["_id"]).json()["id"]
    update_one = mongomock.collection.Collection.update_one

    def failing_update(self, *args, **kwargs):
        if self.name == "trains":
            raise PyMongoError("write failed")
        return update_one(self, *args, **kwargs)

    monkeypatch.setattr(mongomock.collection.Collection, "update_one", failing_update)

    with caplog.at_level(logging.ERROR, logger="services.tickets"):
        resp = client.delete(f"/api/bookings/{booking_id}", headers=passenger_headers)

    assert resp.status_code == 200
    assert db.bookings.count_documents({}) == 0
    assert "not released" in caplog.text
