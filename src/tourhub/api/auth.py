"""Auth API — token issuance.

Learn: POST /jwt is the Credential Issuer. The subject has already
signed in with the identity provider on the client, so the payload is
trusted as-is: we sign whatever identity fields were sent (email is
required) for a fixed one-hour window. Nothing is stored.
"""

from fastapi import APIRouter
from pydantic import BaseModel, EmailStr

from tourhub.auth.jwt import create_access_token

router = APIRouter()

# Registered JWT claims never come from the client
RESERVED_CLAIMS = frozenset({"iat", "exp", "nbf", "aud", "iss", "sub", "jti"})


class TokenRequest(BaseModel):
    """Identity payload — email plus any profile fields to carry as claims."""
    email: EmailStr

    model_config = {"extra": "allow"}


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


@router.post("/jwt", response_model=TokenResponse)
async def issue_token(body: TokenRequest):
    """Mint a signed, time-boxed identity assertion."""
    claims = {k: v for k, v in body.model_dump().items() if k not in RESERVED_CLAIMS}
    return TokenResponse(token=create_access_token(claims))
