"""FastAPI dependency injection utilities."""

from pathlib import Path
from typing import Annotated

from fastapi import Depends, Header

from portfolio_api.core.config import settings
from portfolio_api.core.exceptions import AuthenticationError
from portfolio_api.core.security import verify_access_token
from portfolio_api.services.portfolio import PortfolioService
from portfolio_api.services.sheet_source import GoogleSheetsSource, SheetSource, WorkbookSource


def get_current_admission_no(
    authorization: str | None = Header(None, description="Bearer token"),
) -> str:
    """Extract the logged-in admission number from the JWT token."""
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Not authenticated")

    token = authorization[7:]  # Remove "Bearer " prefix
    payload = verify_access_token(token)

    if not payload:
        raise AuthenticationError("Invalid or expired token")

    admission_no = payload.get("sub")
    if not admission_no:
        raise AuthenticationError("Invalid token payload")

    return admission_no


def get_sheet_source() -> SheetSource:
    """Local workbook when WORKBOOK_PATH is set, Google Sheets otherwise."""
    if settings.WORKBOOK_PATH:
        return WorkbookSource(Path(settings.WORKBOOK_PATH))
    return GoogleSheetsSource(
        sheet_id=settings.GOOGLE_SHEETS_ID,
        api_key=settings.GOOGLE_SHEETS_API_KEY,
        base_url=settings.SHEETS_API_BASE_URL,
        timeout=settings.SHEETS_TIMEOUT_SECONDS,
    )


def get_portfolio_service(
    source: Annotated[SheetSource, Depends(get_sheet_source)],
) -> PortfolioService:
    return PortfolioService(
        source,
        key_column=settings.KEY_COLUMN,
        recent_tests_limit=settings.RECENT_TESTS_LIMIT,
        photo_placeholder_url=settings.PHOTO_PLACEHOLDER_URL,
    )


# Type aliases for cleaner dependency injection
CurrentAdmissionNo = Annotated[str, Depends(get_current_admission_no)]
Portfolio = Annotated[PortfolioService, Depends(get_portfolio_service)]
