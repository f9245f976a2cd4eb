"""Login endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import Identity, LoginRequest, ServiceResult
from ...services import auth_service
from .envelope import respond

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=ServiceResult[Identity],
    summary="Sign in with username and password",
    responses={401: {"description": "Invalid username or password"}},
)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> ServiceResult[Identity]:
    """Verify credentials and return the identity to keep on the device.

    Example request body::

        {"username": "minji", "password": "summer2025"}
    """

    return respond(auth_service.authenticate(db, payload.username, payload.password), response)
