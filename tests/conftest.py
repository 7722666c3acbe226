"""Test fixtures — an isolated in-memory database per test.

Learn: Testing pattern for FastAPI + MongoDB without a server:

1. Each test gets its own mongomock_motor client and a uniquely named
   database, with the same unique indexes production creates, so
   duplicate-key paths behave as they do against real MongoDB.
2. ASGITransport does not run the lifespan, so app.state is empty;
   get_db and get_payment_gateway are overridden instead.
3. Auth is NOT overridden. Tests mint real tokens with auth_headers()
   so the verifier and every policy run exactly as in production.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from tourhub.auth.jwt import create_access_token
from tourhub.db.mongo import Database, get_db
from tourhub.main import app
from tourhub.services.payment_gateway import get_payment_gateway


class FakeGateway:
    """Records payment intent calls instead of talking to Stripe."""

    def __init__(self):
        self.calls: list[tuple[int, str]] = []

    async def create_payment_intent(self, amount: int, currency: str) -> str:
        self.calls.append((amount, currency))
        return f"pi_test_{len(self.calls)}_secret"


def auth_headers(email: str, **claims) -> dict:
    """Bearer header for a freshly minted token."""
    token = create_access_token({"email": email, **claims})
    return {"Authorization": f"Bearer {token}"}


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


@pytest_asyncio.fixture()
async def db():
    database = Database(AsyncMongoMockClient(), f"test_{uuid.uuid4().hex[:8]}")
    await database.ensure_indexes()
    yield database


@pytest_asyncio.fixture()
async def gateway():
    return FakeGateway()


@pytest_asyncio.fixture()
async def client(db, gateway):
    """HTTP client wired to the per-test database and fake gateway."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ─── Seed helpers ───────────────────────────────────────


async def seed_user(
    db: Database,
    email: Optional[str] = None,
    role: str = "tourist",
    name: str = "Test User",
    **fields,
) -> dict:
    doc = {
        "email": email or unique_email(role),
        "name": name,
        "photoURL": None,
        "role": role,
        "requestRole": None,
        "reviews": [],
        "createdAt": datetime.now(timezone.utc),
        **fields,
    }
    await db.users.insert_one(doc)
    return doc


async def seed_package(db: Database, guide: Optional[str] = None, **fields) -> dict:
    doc = {
        "packageName": "Sundarbans Safari",
        "images": [],
        "about": "Three days in the mangroves",
        "tourPlan": [{"day": 1, "plan": "Boat ride"}],
        "guide": guide,
        "price": 250.0,
        "type": "Wildlife",
        "createdAt": datetime.now(timezone.utc),
        **fields,
    }
    await db.packages.insert_one(doc)
    return doc


@pytest_asyncio.fixture()
async def admin(db):
    """An admin user plus ready-made auth headers."""
    user = await seed_user(db, role="admin", name="Admin")
    return {"user": user, "headers": auth_headers(user["email"])}
