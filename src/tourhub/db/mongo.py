"""MongoDB client, collection handles, and request dependency.

Learn: One AsyncMongoClient per process (it owns the connection pool).
The lifespan in main.py builds a Database at startup, stores it on
app.state, and closes it at shutdown. Routes receive it through
Depends(get_db), so tests can swap in any client with the same
collection API (mongomock_motor in our suite).
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError

from tourhub.config import settings
from tourhub.errors import BadRequestError, InternalError

logger = structlog.get_logger()


class Database:
    """Collection handles for every resource type."""

    def __init__(self, client: Any, name: str):
        self.client = client
        self.db = client[name]
        self.users = self.db["users"]
        self.packages = self.db["packages"]
        self.bookings = self.db["bookings"]
        self.wishlist = self.db["wishlist"]
        self.payments = self.db["payments"]
        self.stories = self.db["stories"]
        self.community = self.db["community"]
        self.blogs = self.db["blogs"]

    async def ensure_indexes(self) -> None:
        """Unique keys backing the duplicate checks in the services."""
        await self.users.create_index([("email", ASCENDING)], unique=True)
        await self.wishlist.create_index(
            [("email", ASCENDING), ("packageId", ASCENDING)], unique=True
        )
        await self.bookings.create_index([("email", ASCENDING)])
        await self.bookings.create_index([("guide", ASCENDING)])
        await self.payments.create_index([("email", ASCENDING)])
        await self.payments.create_index([("transactionId", ASCENDING)], unique=True)

    async def ping(self) -> None:
        await self.db.command("ping")

    async def close(self) -> None:
        await self.client.close()


def connect(uri: Optional[str] = None, name: Optional[str] = None) -> Database:
    """Create the process-wide client. No I/O happens until first use."""
    client = AsyncMongoClient(uri or settings.mongodb_uri, tz_aware=True)
    return Database(client, name or settings.mongodb_database)


def get_db(request: Request) -> Database:
    """FastAPI dependency — the Database built in the lifespan."""
    return request.app.state.db


# ─── Helpers ────────────────────────────────────────────


def parse_object_id(value: str, resource: str = "resource") -> ObjectId:
    """Parse a path/body id, rejecting malformed ones as a bad request."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise BadRequestError(f"Invalid {resource} id", context={"id": value})


def to_document(doc: Optional[dict]) -> Optional[dict]:
    """Swap Mongo's `_id` ObjectId for a string `id`."""
    if doc is None:
        return None
    out = {**doc}
    if "_id" in out:
        out["id"] = str(out.pop("_id"))
    return out


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Convert driver failures into InternalError("Error <action>").

    The driver error is logged here with the action name; the client
    only sees the descriptive message.
    """
    try:
        yield
    except PyMongoError as e:
        logger.error("store.error", action=action, error=str(e))
        raise InternalError(f"Error {action}") from e
