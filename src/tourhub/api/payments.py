"""Payment routes — intents, confirmations, and history."""

from typing import Optional

from fastapi import APIRouter, Depends

from tourhub.auth.dependencies import CurrentIdentity, get_current_identity
from tourhub.db.mongo import Database, get_db
from tourhub.schemas.payment import (
    PaymentCreate,
    PaymentIntentCreate,
    PaymentIntentRead,
    PaymentRead,
)
from tourhub.services.payment_gateway import StripeGateway, get_payment_gateway
from tourhub.services.payment_service import PaymentService

router = APIRouter()


def _svc(
    db: Database = Depends(get_db),
    gateway: Optional[StripeGateway] = Depends(get_payment_gateway),
) -> PaymentService:
    return PaymentService(db, gateway)


@router.post("/create-payment-intent", response_model=PaymentIntentRead)
async def create_payment_intent(
    body: PaymentIntentCreate,
    _: CurrentIdentity = Depends(get_current_identity),
    svc: PaymentService = Depends(_svc),
):
    client_secret = await svc.create_intent(body.price, body.currency)
    return PaymentIntentRead(client_secret=client_secret)


@router.post("/payments", response_model=PaymentRead, status_code=201)
async def record_payment(
    body: PaymentCreate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: PaymentService = Depends(_svc),
):
    """Save a client-confirmed payment and mark the booking Paid."""
    identity.ensure_self(body.email)
    return await svc.record_payment(body)


@router.get("/payments/{email}", response_model=list[PaymentRead])
async def list_payments(
    email: str,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: PaymentService = Depends(_svc),
):
    """Payment history — only the payer may read it."""
    identity.ensure_self(email)
    return await svc.list_for(email)
