"""Tour package routes.

Learn: Creation is multipart/form-data — scalar fields arrive as Form
parameters and images as a list of UploadFile. FastAPI validates the
form fields (price must be a non-negative decimal); the service parses
tourPlan and enforces image limits. Reads are open to everyone.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from tourhub.auth.dependencies import CurrentIdentity, require_admin
from tourhub.db.mongo import Database, get_db
from tourhub.schemas.package import PackageIdsBody, PackageRead
from tourhub.services.package_service import PackageService

router = APIRouter(prefix="/packages")


def _svc(db: Database = Depends(get_db)) -> PackageService:
    return PackageService(db)


@router.post("", response_model=PackageRead, status_code=201)
async def create_package(
    package_name: str = Form(..., alias="packageName", min_length=1),
    about: Optional[str] = Form(None),
    tour_plan: Optional[str] = Form(None, alias="tourPlan"),
    guide: Optional[str] = Form(None, description="Guide email"),
    price: Decimal = Form(..., ge=0),
    type: Optional[str] = Form(None),
    images: Optional[list[UploadFile]] = File(None),
    _: CurrentIdentity = Depends(require_admin),
    svc: PackageService = Depends(_svc),
):
    """Create a package with its images stored inline."""
    buffered = [await image.read() for image in images or []]
    return await svc.create_package(
        package_name=package_name,
        about=about,
        tour_plan=tour_plan,
        guide=guide,
        price=price,
        type=type,
        images=buffered,
    )


@router.get("", response_model=list[PackageRead])
async def list_packages(svc: PackageService = Depends(_svc)):
    return await svc.list_packages()


@router.post("/byIds", response_model=list[PackageRead])
async def get_packages_by_ids(body: PackageIdsBody, svc: PackageService = Depends(_svc)):
    """Fetch several packages at once (e.g. to render a wishlist)."""
    return await svc.get_packages(body.package_ids)


@router.get("/type/{package_type}", response_model=list[PackageRead])
async def list_packages_by_type(package_type: str, svc: PackageService = Depends(_svc)):
    return await svc.list_by_type(package_type)


@router.get("/{package_id}", response_model=PackageRead)
async def get_package(package_id: str, svc: PackageService = Depends(_svc)):
    return await svc.get_package(package_id)
