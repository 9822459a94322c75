"""Authentication schemas."""

from pydantic import Field

from portfolio_api.schemas.common import BaseSchema


class LoginRequest(BaseSchema):
    """Login request schema. Admission numbers are five digits."""

    admission_number: str = Field(..., pattern=r"^\d{5}$")


class TokenResponse(BaseSchema):
    """Token response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
