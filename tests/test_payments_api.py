"""Payment intents and recorded payments.

Learn: The `gateway` fixture is a recording fake, so these tests assert
on the exact minor-unit amount handed to the provider.
"""

import pytest
from bson import ObjectId

from conftest import auth_headers, seed_package, seed_user


async def _booking(client, db):
    tourist = await seed_user(db)
    pkg = await seed_package(db)
    r = await client.post(
        "/api/bookings",
        json={"packageId": str(pkg["_id"]), "email": tourist["email"], "startDate": "2026-12-01T09:00:00Z"},
        headers=auth_headers(tourist["email"]),
    )
    return tourist, r.json()


def _payment(tourist, booking, **overrides):
    body = {
        "email": tourist["email"],
        "bookingId": booking["id"],
        "transactionId": "pi_123",
        "price": 250,
        "packageName": booking["packageName"],
    }
    body.update(overrides)
    return body


# ═══════════════════════════════════════════════════════════
# Intents
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_intent_minor_units(client, db, gateway):
    user = await seed_user(db)
    r = await client.post(
        "/api/create-payment-intent", json={"price": 19.99}, headers=auth_headers(user["email"])
    )
    assert r.status_code == 200
    assert r.json() == {"clientSecret": "pi_test_1_secret"}
    assert gateway.calls == [(1999, "usd")]


@pytest.mark.asyncio
async def test_create_intent_currency(client, db, gateway):
    user = await seed_user(db)
    await client.post(
        "/api/create-payment-intent",
        json={"price": "100.5", "currency": "BDT"},
        headers=auth_headers(user["email"]),
    )
    assert gateway.calls == [(10050, "bdt")]


@pytest.mark.asyncio
async def test_create_intent_requires_positive_price(client, db, gateway):
    user = await seed_user(db)
    r = await client.post(
        "/api/create-payment-intent", json={"price": 0}, headers=auth_headers(user["email"])
    )
    assert r.status_code == 400
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_create_intent_requires_auth(client, gateway):
    r = await client.post("/api/create-payment-intent", json={"price": 10})
    assert r.status_code == 401
    assert gateway.calls == []


# ═══════════════════════════════════════════════════════════
# Recorded payments
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_record_payment_marks_booking_paid(client, db):
    tourist, booking = await _booking(client, db)
    headers = auth_headers(tourist["email"])

    r = await client.post("/api/payments", json=_payment(tourist, booking), headers=headers)
    assert r.status_code == 201
    assert r.json()["transactionId"] == "pi_123"

    r = await client.get("/api/bookings", params={"email": tourist["email"]}, headers=headers)
    assert r.json()[0]["status"] == "Paid"

    r = await client.get(f"/api/payments/{tourist['email']}", headers=headers)
    assert [p["bookingId"] for p in r.json()] == [booking["id"]]


@pytest.mark.asyncio
async def test_record_payment_twice(client, db):
    tourist, booking = await _booking(client, db)
    headers = auth_headers(tourist["email"])
    await client.post("/api/payments", json=_payment(tourist, booking), headers=headers)

    r = await client.post("/api/payments", json=_payment(tourist, booking), headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "conflict"
    assert await db.payments.count_documents({}) == 1


@pytest.mark.asyncio
async def test_transaction_id_is_unique(client, db):
    """One provider transaction can't settle two bookings."""
    tourist, first = await _booking(client, db)
    headers = auth_headers(tourist["email"])
    pkg = await seed_package(db)
    r = await client.post(
        "/api/bookings",
        json={"packageId": str(pkg["_id"]), "email": tourist["email"], "startDate": "2026-12-05T09:00:00Z"},
        headers=headers,
    )
    second = r.json()

    await client.post("/api/payments", json=_payment(tourist, first), headers=headers)
    r = await client.post("/api/payments", json=_payment(tourist, second), headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Payment already recorded"
    stored = await db.bookings.find_one({"_id": ObjectId(second["id"])})
    assert stored["status"] == "In Review"


@pytest.mark.asyncio
async def test_record_payment_for_someone_else(client, db):
    tourist, booking = await _booking(client, db)
    intruder = await seed_user(db)
    r = await client.post(
        "/api/payments", json=_payment(tourist, booking), headers=auth_headers(intruder["email"])
    )
    assert r.status_code == 403
    assert await db.payments.count_documents({}) == 0


@pytest.mark.asyncio
async def test_record_payment_against_foreign_booking(client, db):
    """Paying with your own email for another tourist's booking is refused."""
    _, booking = await _booking(client, db)
    payer = await seed_user(db)
    r = await client.post(
        "/api/payments", json=_payment(payer, booking), headers=auth_headers(payer["email"])
    )
    assert r.status_code == 403
    assert await db.payments.count_documents({}) == 0


@pytest.mark.asyncio
async def test_record_payment_unknown_booking(client, db):
    tourist = await seed_user(db)
    r = await client.post(
        "/api/payments",
        json=_payment(tourist, {"id": "000000000000000000000000", "packageName": "X"}),
        headers=auth_headers(tourist["email"]),
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_payment_history_is_private(client, db):
    tourist = await seed_user(db)
    other = await seed_user(db)
    r = await client.get(f"/api/payments/{tourist['email']}", headers=auth_headers(other["email"]))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_rejected_booking_cannot_be_paid(client, db):
    guide = await seed_user(db, role="tourguide")
    tourist = await seed_user(db)
    pkg = await seed_package(db, guide=guide["email"])
    r = await client.post(
        "/api/bookings",
        json={"packageId": str(pkg["_id"]), "email": tourist["email"], "startDate": "2026-12-01T09:00:00Z"},
        headers=auth_headers(tourist["email"]),
    )
    booking = r.json()
    await client.patch(
        f"/api/bookings/{booking['id']}/status",
        json={"status": "Rejected"},
        headers=auth_headers(guide["email"]),
    )

    r = await client.post(
        "/api/payments", json=_payment(tourist, booking), headers=auth_headers(tourist["email"])
    )
    assert r.status_code == 400
    assert r.json()["error"] == "conflict"
    assert await db.payments.count_documents({}) == 0
    stored = await db.bookings.find_one({"_id": ObjectId(booking["id"])})
    assert stored["status"] == "Rejected"


@pytest.mark.asyncio
async def test_accepted_booking_can_be_paid(client, db):
    guide = await seed_user(db, role="tourguide")
    tourist = await seed_user(db)
    pkg = await seed_package(db, guide=guide["email"])
    r = await client.post(
        "/api/bookings",
        json={"packageId": str(pkg["_id"]), "email": tourist["email"], "startDate": "2026-12-01T09:00:00Z"},
        headers=auth_headers(tourist["email"]),
    )
    booking = r.json()
    await client.patch(
        f"/api/bookings/{booking['id']}/status",
        json={"status": "Accepted"},
        headers=auth_headers(guide["email"]),
    )

    r = await client.post(
        "/api/payments", json=_payment(tourist, booking), headers=auth_headers(tourist["email"])
    )
    assert r.status_code == 201
    stored = await db.bookings.find_one({"_id": ObjectId(booking["id"])})
    assert stored["status"] == "Paid"
