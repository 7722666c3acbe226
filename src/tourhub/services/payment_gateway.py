"""Stripe payment gateway.

Learn: The gateway is built once in the lifespan (like the Database) and
injected with Depends(get_payment_gateway), so tests replace it with a
recording fake instead of patching the SDK.
"""

import stripe
import structlog
from fastapi import Request

from tourhub.errors import InternalError

logger = structlog.get_logger()


class StripeGateway:
    """Creates card PaymentIntents and hands back the client secret."""

    def __init__(self, api_key: str):
        self.api_key = api_key

    async def create_payment_intent(self, amount: int, currency: str) -> str:
        try:
            intent = await stripe.PaymentIntent.create_async(
                api_key=self.api_key,
                amount=amount,
                currency=currency,
                payment_method_types=["card"],
            )
        except stripe.StripeError as e:
            logger.error(
                "payments.intent_failed",
                amount=amount,
                currency=currency,
                error=str(e),
            )
            raise InternalError("Error creating payment intent") from e
        return intent.client_secret


def get_payment_gateway(request: Request) -> StripeGateway:
    """FastAPI dependency — the gateway built in the lifespan."""
    return request.app.state.payments
