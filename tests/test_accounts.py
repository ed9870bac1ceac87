from datetime import timedelta

from services.accounts import open_session
from utils.dates import utcnow

NEW_USER = {"name": "Sunil", "email": "Sunil@Example.com", "password": "secret123", "phone": "0700000000"}


def register_and_login(client):
    client.post("/api/users/register", json=NEW_USER)
    resp = client.post("/api/users/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]})
    assert resp.status_code == 200
    return {"X-Session-Token": resp.json()["token"]}


def test_register_creates_passenger(client, db):
    resp = client.post("/api/users/register", json=NEW_USER)

    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "passenger"
    stored = db.users.find_one({"email": "sunil@example.com"})
    assert stored["password"] != NEW_USER["password"]


def test_register_duplicate_email(client):
    client.post("/api/users/register", json=NEW_USER)
    resp = client.post("/api/users/register", json=NEW_USER)
    assert resp.status_code == 400
    assert "already" in resp.json()["detail"]


def test_login_and_session_state(client):
    headers = register_and_login(client)

    me = client.get("/api/users/me", headers=headers).json()
    assert me["user"]["email"] == "sunil@example.com"
    assert me["is_admin"] is False


def test_wrong_password(client):
    client.post("/api/users/register", json=NEW_USER)
    resp = client.post("/api/users/login", json={"email": NEW_USER["email"], "password": "nope"})
    assert resp.status_code == 401


def test_logout_ends_session(client):
    headers = register_and_login(client)
    assert client.post("/api/users/logout", headers=headers).status_code == 200
    assert client.get("/api/users/me", headers=headers).status_code == 401


def test_missing_or_expired_token(client, db, passenger):
    assert client.get("/api/users/me").status_code == 401
    session = open_session(db, passenger)
    db.sessions.update_one({"_id": session["_id"]}, {"$set": {"expires_at": utcnow() - timedelta(minutes=1)}})
    assert client.get("/api/users/me", headers={"X-Session-Token": session["token"]}).status_code == 401


def test_admin_login_rejects_passengers(client):
    client.post("/api/users/register", json=NEW_USER)
    resp = client.post("/api/users/admin/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]})
    assert resp.status_code == 403


def test_admin_registers_admin_who_can_log_in(client, admin_headers):
    resp = client.post("/api/users/register_admin", json=NEW_USER, headers=admin_headers)
    assert resp.json()["user"]["role"] == "admin"

    resp = client.post("/api/users/admin/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]})
    assert resp.status_code == 200
    me = client.get("/api/users/me", headers={"X-Session-Token": resp.json()["token"]}).json()
    assert me["is_admin"] is True


def test_passenger_cannot_register_admin(client, passenger_headers):
    assert client.post("/api/users/register_admin", json=NEW_USER, headers=passenger_headers).status_code == 403


def test_update_profile(client, passenger_headers):
    resp = client.put("/api/users/me", json={"name": "Nimal P.", "phone": "0711111111"}, headers=passenger_headers)
    assert resp.json()["user"]["name"] == "Nimal P."
    assert client.put("/api/users/me", json={}, headers=passenger_headers).status_code == 400


def test_admin_user_management(client, db, passenger, admin_headers):
    users = client.get("/api/users/", headers=admin_headers).json()
    assert {u["email"] for u in users} == {"nimal@example.com", "admin@example.com"}
    assert all("password" not in u for u in users)

    assert client.get(f"/api/users/{passenger['_id']}", headers=admin_headers).json()["name"] == "Nimal"
    assert client.delete(f"/api/users/{passenger['_id']}", headers=admin_headers).status_code == 200
    assert db.users.find_one({"_id": passenger["_id"]}) is None
    assert client.get(f"/api/users/{passenger['_id']}", headers=admin_headers).status_code == 404


def test_sessions_expire_through_ttl_index(db):
    indexes = db.sessions.index_information()
    ttl = [info for info in indexes.values() if info["key"] == [("expires_at", 1)]]
    assert ttl and ttl[0]["expireAfterSeconds"] == 0
