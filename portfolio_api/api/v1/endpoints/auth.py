"""Authentication endpoints."""

import logging

from fastapi import APIRouter

from portfolio_api.core.config import settings
from portfolio_api.core.dependencies import CurrentAdmissionNo
from portfolio_api.core.security import create_access_token
from portfolio_api.schemas.auth import LoginRequest, TokenResponse
from portfolio_api.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """
    Start a student session for a five-digit admission number.
    """
    logger.info(f"Student session started for {request.admission_number}")
    return TokenResponse(
        access_token=create_access_token(request.admission_number),
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(admission_no: CurrentAdmissionNo):
    """
    End the session. Tokens are stateless, so the client discards its token.
    """
    logger.info(f"Student session ended for {admission_no}")
    return MessageResponse(message="Logged out")
