"""Package service — tour package catalogue.

Learn: Images arrive as multipart uploads, are fully buffered in memory
by the route, and are stored as BSON binary inside the package document
(there is no separate blob store). Size and count limits are enforced
here so an oversized upload never reaches the database.
"""

import json
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

import structlog
from bson import Binary

from tourhub.config import settings
from tourhub.db.mongo import Database, parse_object_id, store_errors, to_document
from tourhub.errors import BadRequestError, NotFoundError

logger = structlog.get_logger()


def parse_tour_plan(raw: Optional[str]) -> list[dict[str, Any]]:
    """tourPlan is sent as a JSON array string inside the multipart form."""
    if raw is None or raw.strip() == "":
        return []
    try:
        plan = json.loads(raw)
    except json.JSONDecodeError:
        raise BadRequestError("tourPlan must be valid JSON", context={"field": "tourPlan"})
    if not isinstance(plan, list) or not all(isinstance(d, dict) for d in plan):
        raise BadRequestError(
            "tourPlan must be a JSON array of objects", context={"field": "tourPlan"}
        )
    return plan


class PackageService:
    """Business logic for tour packages."""

    def __init__(self, db: Database):
        self.db = db

    async def create_package(
        self,
        *,
        package_name: str,
        about: Optional[str],
        tour_plan: Optional[str],
        guide: Optional[str],
        price: Decimal,
        type: Optional[str],
        images: list[bytes],
    ) -> dict:
        if len(images) > settings.max_upload_images:
            raise BadRequestError(
                f"At most {settings.max_upload_images} images are allowed",
                context={"field": "images", "count": len(images)},
            )
        for image in images:
            if len(image) > settings.max_image_bytes:
                raise BadRequestError(
                    f"Each image must be at most {settings.max_image_bytes} bytes",
                    context={"field": "images", "size": len(image)},
                )

        doc = {
            "packageName": package_name,
            "images": [Binary(image) for image in images],
            "about": about,
            "tourPlan": parse_tour_plan(tour_plan),
            "guide": guide,
            "price": float(price),
            "type": type,
            "createdAt": datetime.now(timezone.utc),
        }
        with store_errors("adding package"):
            await self.db.packages.insert_one(doc)

        logger.info(
            "package.created",
            package_id=str(doc["_id"]),
            name=package_name,
            images=len(images),
        )
        return to_document(doc)

    async def list_packages(self) -> list[dict]:
        with store_errors("listing packages"):
            packages = await self.db.packages.find({}).to_list(None)
        return [to_document(p) for p in packages]

    async def get_package(self, package_id: str) -> dict:
        oid = parse_object_id(package_id, "package")
        with store_errors("fetching package"):
            package = await self.db.packages.find_one({"_id": oid})
        if not package:
            raise NotFoundError("Package not found")
        return to_document(package)

    async def get_packages(self, package_ids: list[str]) -> list[dict]:
        """Packages for the given ids; unknown ids are simply absent."""
        oids = [parse_object_id(pid, "package") for pid in package_ids]
        with store_errors("fetching packages"):
            packages = await self.db.packages.find({"_id": {"$in": oids}}).to_list(None)
        return [to_document(p) for p in packages]

    async def list_by_type(self, package_type: str) -> list[dict]:
        """Case-insensitive exact match on the package type."""
        pattern = f"^{re.escape(package_type)}$"
        with store_errors("listing packages by type"):
            packages = await self.db.packages.find(
                {"type": {"$regex": pattern, "$options": "i"}}
            ).to_list(None)
        return [to_document(p) for p in packages]
