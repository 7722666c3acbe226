"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Unlike a router-wide auth dependency, guards here are declared
per route — most resources mix open reads with protected writes, and
self-scoped routes need the identity object itself to run the
ownership check.
"""

from fastapi import APIRouter

from tourhub.api.auth import router as auth_router
from tourhub.api.bookings import router as bookings_router
from tourhub.api.content import router as content_router
from tourhub.api.health import router as health_router
from tourhub.api.packages import router as packages_router
from tourhub.api.payments import router as payments_router
from tourhub.api.users import router as users_router
from tourhub.api.wishlist import router as wishlist_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(users_router, tags=["users", "guides"])
api_router.include_router(packages_router, tags=["packages"])
api_router.include_router(wishlist_router, tags=["wishlist"])
api_router.include_router(bookings_router, tags=["bookings"])
api_router.include_router(payments_router, tags=["payments"])
api_router.include_router(content_router, tags=["stories", "community", "blogs"])
