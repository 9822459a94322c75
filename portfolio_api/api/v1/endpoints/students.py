"""Student portfolio endpoints."""

from fastapi import APIRouter, Query

from portfolio_api.core.dependencies import CurrentAdmissionNo, Portfolio
from portfolio_api.schemas.student import StudentPortfolio

router = APIRouter()


@router.get("/student-data", response_model=StudentPortfolio)
async def get_student_data(
    admission_no: CurrentAdmissionNo,
    service: Portfolio,
    admission: str | None = Query(None, description="Admission number, defaults to the session's"),
):
    """Get the full portfolio document for a student."""
    return await service.get_portfolio(admission or admission_no)
