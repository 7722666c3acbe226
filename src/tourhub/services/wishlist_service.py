"""Wishlist service — packages a tourist has saved.

Each (email, packageId) pair appears at most once: the service checks
first for a friendly error, and the unique index catches concurrent adds.
"""

from datetime import datetime, timezone

import structlog
from pymongo.errors import DuplicateKeyError

from tourhub.db.mongo import Database, parse_object_id, store_errors, to_document
from tourhub.errors import ConflictError, NotFoundError

logger = structlog.get_logger()


class WishlistService:
    def __init__(self, db: Database):
        self.db = db

    async def add(self, email: str, package_id: str) -> dict:
        oid = parse_object_id(package_id, "package")
        # Stored in ObjectId's canonical lowercase form so one package is one key
        package_id = str(oid)
        doc = {
            "email": email,
            "packageId": package_id,
            "createdAt": datetime.now(timezone.utc),
        }
        with store_errors("adding to wishlist"):
            if not await self.db.packages.find_one({"_id": oid}, {"_id": 1}):
                raise NotFoundError("Package not found")
            if await self.db.wishlist.find_one({"email": email, "packageId": package_id}):
                raise ConflictError("Package already in wishlist")
            try:
                await self.db.wishlist.insert_one(doc)
            except DuplicateKeyError:
                raise ConflictError("Package already in wishlist")

        logger.info("wishlist.added", email=email, package_id=package_id)
        return to_document(doc)

    async def remove(self, email: str, package_id: str) -> None:
        package_id = str(parse_object_id(package_id, "package"))
        with store_errors("removing from wishlist"):
            result = await self.db.wishlist.delete_one(
                {"email": email, "packageId": package_id}
            )
        if result.deleted_count == 0:
            raise NotFoundError("Package not found in wishlist")
        logger.info("wishlist.removed", email=email, package_id=package_id)

    async def list_for(self, email: str) -> list[dict]:
        with store_errors("fetching wishlist"):
            items = await self.db.wishlist.find({"email": email}).to_list(None)
        return [to_document(i) for i in items]
