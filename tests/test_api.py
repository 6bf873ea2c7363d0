"""
Integration tests for the REST API endpoints.

Runs the real application against an in-memory SQLite database and an
in-process session store (see ``conftest.py``).
"""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from tripshare.config import settings
from tripshare.services.catalog import TripCatalog

FRONTEND = "http://localhost:3000"

ALPS = {"trip_name": "Alps Trek", "destination": "Alps"}


# ── Helpers ───────────────────────────────────────────────────────────


async def register(client: AsyncClient, email: str, password: str, name: str):
    return await client.post(
        "/register", data={"username": email, "password": password, "name": name}
    )


async def login(client: AsyncClient, email: str, password: str):
    return await client.post("/login", data={"username": email, "password": password})


async def add_trip(client: AsyncClient, trip_name: str, destination: str, **extra):
    data = {
        "tripName": trip_name,
        "destination": destination,
        "startDate": "2027-07-01",
        "endDate": "2027-07-10",
        "amount": "850.5",
        "details": "Hut to hut",
        **extra,
    }
    files = {"image": ("alps.jpg", b"\xff\xd8fake-jpeg", "image/jpeg")}
    return await client.post("/api/travel/addTrip", data=data, files=files)


async def user_ids(client: AsyncClient, endpoint: str, params: dict) -> list[int]:
    resp = await client.get(f"/api/travel/{endpoint}", params=params)
    assert resp.status_code == 200
    return [u["user_id"] for u in resp.json()["users"]]


# ── Auth ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"status": True}


@pytest.mark.asyncio
async def test_login_status_anonymous(client: AsyncClient):
    resp = await client.get("/api/login")
    assert resp.json() == {"status": True, "loggedIn": False}


@pytest.mark.asyncio
async def test_register_issues_session(client: AsyncClient):
    resp = await register(client, "a@x.com", "pw", "Ann")
    assert resp.status_code == 303
    assert resp.headers["location"] == f"{FRONTEND}/login"

    status = await client.get("/api/login")
    assert status.json() == {"status": True, "loggedIn": True, "name": "Ann"}


@pytest.mark.asyncio
async def test_duplicate_register_redirects_home_without_session(
    client: AsyncClient, other_client: AsyncClient
):
    await register(client, "a@x.com", "pw", "Ann")
    resp = await register(other_client, "a@x.com", "other", "Impostor")
    assert resp.status_code == 303
    assert resp.headers["location"] == f"{FRONTEND}/home"
    assert "set-cookie" not in resp.headers

    status = await other_client.get("/api/login")
    assert status.json()["loggedIn"] is False


@pytest.mark.asyncio
async def test_login_success_and_failure(client: AsyncClient, other_client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")

    bad = await login(other_client, "a@x.com", "wrong")
    assert bad.headers["location"] == f"{FRONTEND}/login"
    unknown = await login(other_client, "nobody@x.com", "pw")
    assert unknown.headers["location"] == f"{FRONTEND}/login"
    assert (await other_client.get("/api/login")).json()["loggedIn"] is False

    good = await login(other_client, "a@x.com", "pw")
    assert good.status_code == 303
    assert good.headers["location"] == f"{FRONTEND}/dashboard"
    assert (await other_client.get("/api/login")).json()["name"] == "Ann"


@pytest.mark.asyncio
async def test_session_cookie_lifetime_is_seven_days(client: AsyncClient, fake_redis):
    resp = await register(client, "a@x.com", "pw", "Ann")
    assert "max-age=604800" in resp.headers["set-cookie"].lower()
    assert list(fake_redis.ttl.values()) == [604800]


@pytest.mark.asyncio
async def test_protected_routes_require_session(client: AsyncClient):
    resp = await client.get("/api/travel/hostedTrips")
    assert resp.status_code == 401
    assert resp.json()["status"] is False
    assert resp.json()["loggedIn"] is False

    resp = await client.post("/api/travel/applyToJoin", json=ALPS)
    assert resp.status_code == 401


# ── Trips ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_add_trip_and_serve_image(client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    resp = await add_trip(client, "Alps Trek", "Alps")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] is True
    assert body["tripId"] > 0

    trips = (await client.get("/api/travel/trips")).json()["trips"]
    assert len(trips) == 1
    trip = trips[0]
    assert trip["trip_name"] == "Alps Trek"
    assert trip["user_name"] == "Ann"
    assert trip["start_date"] == "2027-07-01"
    assert trip["amount"] == 850.5
    assert trip["image_url"].startswith("/uploads/")
    assert trip["image_url"].endswith(".jpg")

    image = await client.get(trip["image_url"])
    assert image.status_code == 200
    assert image.content == b"\xff\xd8fake-jpeg"


@pytest.mark.asyncio
async def test_add_trip_without_image(client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    resp = await client.post(
        "/api/travel/addTrip", data={"tripName": "Day hike", "destination": "Jura"}
    )
    assert resp.status_code == 200

    trip = (await client.get("/api/travel/trips")).json()["trips"][0]
    assert trip["image_url"] is None
    assert trip["start_date"] is None


@pytest.mark.asyncio
async def test_failed_trip_insert_removes_uploaded_image(client: AsyncClient, monkeypatch):
    await register(client, "a@x.com", "pw", "Ann")

    async def _store_down(catalog, *args, **kwargs):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(TripCatalog, "create", _store_down)
    resp = await add_trip(client, "Alps Trek", "Alps")

    assert resp.status_code == 500
    assert resp.json()["status"] is False
    assert list(Path(settings.upload_dir).iterdir()) == []


@pytest.mark.asyncio
async def test_hosted_specific_and_search(client: AsyncClient, other_client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    await register(other_client, "b@x.com", "pw", "Bea")
    await add_trip(client, "Alps Trek", "Alps")
    await add_trip(client, "Lakes", "Swiss ALPS")
    await add_trip(other_client, "Beach", "Nice")

    hosted = (await client.get("/api/travel/hostedTrips")).json()["trips"]
    assert sorted(t["trip_name"] for t in hosted) == ["Alps Trek", "Lakes"]

    specific = (await client.get("/api/travel/specificTrip", params=ALPS)).json()["trips"]
    assert [t["trip_name"] for t in specific] == ["Alps Trek"]

    found = (await client.get("/api/travel/searchTrip", params={"search": "alps"})).json()
    assert found["status"] is True
    assert sorted(t["trip_name"] for t in found["trips"]) == ["Alps Trek", "Lakes"]


# ── Membership workflow ───────────────────────────────────────────────


@pytest.mark.asyncio
async def test_join_request_scenario(client: AsyncClient, other_client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    await login(client, "a@x.com", "pw")
    trip_id = (await add_trip(client, "Alps Trek", "Alps")).json()["tripId"]

    resp = await client.get("/api/travel/userStatus", params=ALPS)
    assert resp.json()["userStatus"] == "admin"

    await register(other_client, "b@x.com", "pw", "Bea")
    resp = await other_client.get("/api/travel/userStatus", params=ALPS)
    assert resp.json()["userStatus"] == "new"

    resp = await other_client.post("/api/travel/applyToJoin", json=ALPS)
    assert resp.json() == {"status": True, "loggedIn": True}
    assert (await other_client.get("/api/travel/userStatus", params=ALPS)).json()["userStatus"] == "applied"

    applied = (await client.get("/api/travel/appliedUsers", params=ALPS)).json()["users"]
    assert [u["user_name"] for u in applied] == ["Bea"]
    bea_id = applied[0]["user_id"]

    resp = await client.post(
        "/api/travel/addUserToTrip", json={"trip_id": trip_id, "user_id": bea_id}
    )
    assert resp.status_code == 200
    assert resp.json()["userStatus"] == "joined"

    assert await user_ids(client, "joinedUsers", ALPS) == [bea_id]
    assert await user_ids(client, "appliedUsers", ALPS) == []
    resp = await other_client.get("/api/travel/userStatus", params={"trip_id": trip_id})
    assert resp.json()["userStatus"] == "joined"


@pytest.mark.asyncio
async def test_duplicate_apply_is_rejected(client: AsyncClient, other_client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    await add_trip(client, "Alps Trek", "Alps")
    await register(other_client, "b@x.com", "pw", "Bea")

    await other_client.post("/api/travel/applyToJoin", json=ALPS)
    resp = await other_client.post("/api/travel/applyToJoin", json=ALPS)
    assert resp.status_code == 409
    assert resp.json() == {
        "status": False,
        "error": "You have already applied to join this trip.",
    }


@pytest.mark.asyncio
async def test_decline_flow(client: AsyncClient, other_client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    trip_id = (await add_trip(client, "Alps Trek", "Alps")).json()["tripId"]
    await register(other_client, "b@x.com", "pw", "Bea")
    await other_client.post("/api/travel/applyToJoin", json={"trip_id": trip_id})
    bea_id = (await user_ids(client, "appliedUsers", {"trip_id": trip_id}))[0]

    resp = await client.post(
        "/api/travel/declineUserToTrip", json={**ALPS, "user_id": bea_id}
    )
    assert resp.json()["userStatus"] == "declined"
    assert await user_ids(client, "declinedUsers", ALPS) == [bea_id]

    again = await other_client.post("/api/travel/applyToJoin", json=ALPS)
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_only_trip_admin_can_accept(client: AsyncClient, other_client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    trip_id = (await add_trip(client, "Alps Trek", "Alps")).json()["tripId"]
    await register(other_client, "b@x.com", "pw", "Bea")
    await other_client.post("/api/travel/applyToJoin", json=ALPS)
    bea_id = (await user_ids(client, "appliedUsers", ALPS))[0]

    resp = await other_client.post(
        "/api/travel/addUserToTrip", json={"trip_id": trip_id, "user_id": bea_id}
    )
    assert resp.status_code == 403
    assert resp.json()["status"] is False


@pytest.mark.asyncio
async def test_accept_without_application_is_not_found(client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    trip_id = (await add_trip(client, "Alps Trek", "Alps")).json()["tripId"]

    resp = await client.post(
        "/api/travel/addUserToTrip", json={"trip_id": trip_id, "user_id": 999}
    )
    assert resp.status_code == 404
    assert resp.json()["status"] is False


@pytest.mark.asyncio
async def test_unknown_and_ambiguous_trip_refs(client: AsyncClient, other_client: AsyncClient):
    await register(client, "a@x.com", "pw", "Ann")
    await register(other_client, "b@x.com", "pw", "Bea")

    resp = await client.get("/api/travel/appliedUsers", params={"trip_id": 42})
    assert resp.status_code == 404

    await add_trip(client, "Alps Trek", "Alps")
    await add_trip(other_client, "Alps Trek", "Alps")
    resp = await client.get("/api/travel/userStatus", params=ALPS)
    assert resp.status_code == 409
    assert "trip_id" in resp.json()["error"]
