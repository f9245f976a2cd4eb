"""Primary API router definition."""

from fastapi import APIRouter

from . import auth, dashboard, groups, students, talents

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(students.router)
api_router.include_router(groups.router)
api_router.include_router(talents.router)
api_router.include_router(dashboard.router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}
