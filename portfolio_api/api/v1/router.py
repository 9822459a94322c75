"""Main API router aggregating all module routers."""

from fastapi import APIRouter

from portfolio_api.api.v1.endpoints import auth, students

api_router = APIRouter()

# Authentication (no session required)
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

# Student portfolio (session required)
api_router.include_router(
    students.router,
    tags=["Students"],
)


@api_router.get("/status", tags=["Health"])
async def api_status():
    """API status endpoint."""
    return {
        "status": "online",
        "message": "Student Portfolio API is running",
    }
