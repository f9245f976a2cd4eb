"""Group lookup endpoint."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import ServiceResult, StudentTalentInfo
from ...services import user_service
from .envelope import respond

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get(
    "/{group_label}/members",
    response_model=ServiceResult[List[StudentTalentInfo]],
    summary="Students carrying a group label",
    responses={404: {"description": "No students in this group"}},
)
def group_members(
    group_label: str,
    response: Response,
    db: Session = Depends(get_db),
) -> ServiceResult[List[StudentTalentInfo]]:
    return respond(user_service.list_group_members(db, group_label), response)
