"""Role-dependent dashboard endpoint."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import AnyDashboard, ServiceResult
from ...services import dashboard_service
from .envelope import respond

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/{user_id}",
    response_model=ServiceResult[AnyDashboard],
    summary="Student, teacher or admin view for a user",
    responses={404: {"description": "User not found"}},
)
def get_dashboard(user_id: UUID, response: Response, db: Session = Depends(get_db)):
    """The payload's ``role`` field tells the client which layout to render."""

    return respond(dashboard_service.build_dashboard(db, user_id), response)
