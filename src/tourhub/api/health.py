"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running
and dependencies (MongoDB, Redis) are reachable. Redis is optional —
without it only rate limiting is off — so it never makes the service
"degraded".
"""

from fastapi import APIRouter, Depends

from tourhub import __version__
from tourhub.cache import get_redis
from tourhub.db.mongo import Database, get_db

router = APIRouter()


@router.get("/health")
async def health_check(db: Database = Depends(get_db)):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await db.ping()
        checks["mongodb"] = "ok"
    except Exception as e:
        checks["mongodb"] = f"error: {e}"

    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"unavailable: {e}"

    status = "healthy" if checks["mongodb"] == "ok" else "degraded"
    return {"status": status, **checks}
