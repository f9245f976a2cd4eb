"""Student lookup endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import BalanceRead, Groupmate, ServiceResult, StudentTalentInfo
from ...services import talent_service, user_service
from .envelope import respond

router = APIRouter(prefix="/students", tags=["students"])


@router.get(
    "",
    response_model=ServiceResult[StudentTalentInfo],
    summary="Find a student by exact username",
    responses={404: {"description": "Student not found"}},
)
def search_student(
    response: Response,
    username: str = Query(..., description="Exact username to look up"),
    db: Session = Depends(get_db),
) -> ServiceResult[StudentTalentInfo]:
    return respond(user_service.find_student_by_username(db, username), response)


@router.get("/all", response_model=ServiceResult[List[StudentTalentInfo]], summary="All students by name")
def all_students(response: Response, db: Session = Depends(get_db)) -> ServiceResult[List[StudentTalentInfo]]:
    return respond(user_service.list_students(db), response)


@router.get(
    "/{student_id}/balance",
    response_model=ServiceResult[BalanceRead],
    summary="Current and max talent for a student",
    responses={404: {"description": "Student not found"}},
)
def student_balance(student_id: UUID, response: Response, db: Session = Depends(get_db)) -> ServiceResult[BalanceRead]:
    """Re-read balances after a grant or deduction."""

    return respond(talent_service.current_balances(db, student_id), response)


@router.get(
    "/{student_id}/groupmates",
    response_model=ServiceResult[List[Groupmate]],
    summary="Other students in the same group",
)
def student_groupmates(
    student_id: UUID,
    response: Response,
    db: Session = Depends(get_db),
) -> ServiceResult[List[Groupmate]]:
    return respond(user_service.list_groupmates(db, student_id), response)
