"""Tour-guide role elevation: request → admin decision.

Learn: The state machine under test:

    none ──request──▶ requested ──approved──▶ role := requestRole
                          └─────rejected────▶ role unchanged

Both decisions clear requestRole; deciding with nothing pending is a
conflict, not a silent no-op.
"""

import pytest

from conftest import auth_headers, seed_user


async def _request(client, user):
    return await client.post(
        "/api/request-tour-guide",
        json={"email": user["email"]},
        headers=auth_headers(user["email"]),
    )


@pytest.mark.asyncio
async def test_request_tour_guide(client, db):
    user = await seed_user(db)
    r = await _request(client, user)
    assert r.status_code == 200
    assert r.json()["message"] == "Request sent successfully"

    stored = await db.users.find_one({"_id": user["_id"]})
    assert stored["requestRole"] == "tourguide"
    assert stored["role"] == "tourist"


@pytest.mark.asyncio
async def test_request_for_someone_else_forbidden(client, db):
    me = await seed_user(db)
    other = await seed_user(db)
    r = await client.post(
        "/api/request-tour-guide",
        json={"email": other["email"]},
        headers=auth_headers(me["email"]),
    )
    assert r.status_code == 403
    stored = await db.users.find_one({"_id": other["_id"]})
    assert stored["requestRole"] is None


@pytest.mark.asyncio
async def test_guide_cannot_request_again(client, db):
    guide = await seed_user(db, role="tourguide")
    r = await _request(client, guide)
    assert r.status_code == 400
    assert r.json()["error"] == "conflict"


@pytest.mark.asyncio
async def test_admin_sees_pending_requests(client, db, admin):
    pending = await seed_user(db)
    await seed_user(db)
    await _request(client, pending)

    r = await client.get("/api/users/requests", headers=admin["headers"])
    assert r.status_code == 200
    rows = r.json()
    assert [u["email"] for u in rows] == [pending["email"]]
    assert rows[0]["requestRole"] == "tourguide"


@pytest.mark.asyncio
async def test_approve_request(client, db, admin):
    user = await seed_user(db)
    await _request(client, user)

    r = await client.patch(
        f"/api/users/{user['_id']}/request",
        json={"decision": "approved"},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "tourguide"
    assert body["requestRole"] is None

    r = await client.get("/api/users/requests", headers=admin["headers"])
    assert r.json() == []


@pytest.mark.asyncio
async def test_reject_request(client, db, admin):
    user = await seed_user(db)
    await _request(client, user)

    r = await client.patch(
        f"/api/users/{user['_id']}/request",
        json={"decision": "rejected"},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    assert r.json()["role"] == "tourist"
    assert r.json()["requestRole"] is None


@pytest.mark.asyncio
async def test_decide_without_pending_request(client, db, admin):
    user = await seed_user(db)
    r = await client.patch(
        f"/api/users/{user['_id']}/request",
        json={"decision": "approved"},
        headers=admin["headers"],
    )
    assert r.status_code == 400
    assert r.json()["error"] == "conflict"
    stored = await db.users.find_one({"_id": user["_id"]})
    assert stored["role"] == "tourist"


@pytest.mark.asyncio
async def test_decide_twice(client, db, admin):
    """The second decision finds nothing pending."""
    user = await seed_user(db)
    await _request(client, user)
    url = f"/api/users/{user['_id']}/request"

    r1 = await client.patch(url, json={"decision": "rejected"}, headers=admin["headers"])
    r2 = await client.patch(url, json={"decision": "approved"}, headers=admin["headers"])
    assert r1.status_code == 200
    assert r2.status_code == 400
    stored = await db.users.find_one({"_id": user["_id"]})
    assert stored["role"] == "tourist"


@pytest.mark.asyncio
async def test_invalid_decision(client, db, admin):
    user = await seed_user(db)
    await _request(client, user)
    r = await client.patch(
        f"/api/users/{user['_id']}/request",
        json={"decision": "maybe"},
        headers=admin["headers"],
    )
    assert r.status_code == 400
    stored = await db.users.find_one({"_id": user["_id"]})
    assert stored["requestRole"] == "tourguide"


@pytest.mark.asyncio
async def test_unknown_user_id(client, admin):
    r = await client.patch(
        "/api/users/000000000000000000000000/request",
        json={"decision": "approved"},
        headers=admin["headers"],
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_non_admin_cannot_decide(client, db):
    user = await seed_user(db)
    await _request(client, user)
    r = await client.patch(
        f"/api/users/{user['_id']}/request",
        json={"decision": "approved"},
        headers=auth_headers(user["email"]),
    )
    assert r.status_code == 403
    stored = await db.users.find_one({"_id": user["_id"]})
    assert stored["role"] == "tourist"
