"""Shared schema bits.

Learn: Stored documents and JSON bodies use camelCase (packageId,
photoURL, requestRole) because existing clients already speak it.
CamelModel keeps Python attributes snake_case and maps them with an
alias generator; populate_by_name lets services build models either way.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class MessageResponse(BaseModel):
    """Acknowledgement for writes that don't return a resource."""
    success: bool = True
    message: str
