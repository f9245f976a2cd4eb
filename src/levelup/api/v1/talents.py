"""Talent grant, deduction and history endpoints."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import (
    GroupGrantCreate,
    GroupGrantSummary,
    HistoryEntry,
    ServiceResult,
    TalentGrantCreate,
    TransactionReceipt,
)
from ...services import talent_service
from .envelope import respond

router = APIRouter(prefix="/talents", tags=["talents"])

_TRANSACTION_RESPONSES = {
    400: {"description": "Validation or business rule violation"},
    404: {"description": "Student or actor not found"},
    500: {"description": "Storage failure"},
}


@router.post(
    "/give",
    response_model=ServiceResult[TransactionReceipt],
    summary="Grant talent to a student",
    responses={
        200: {
            "description": "Talent granted",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Granted 10 talent to Kim Minji!",
                        "error": None,
                        "data": {
                            "transaction_id": 42,
                            "student_id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
                            "student_name": "Kim Minji",
                            "amount": 10,
                            "current_talent": 130,
                            "max_talent": 150,
                        },
                    }
                }
            },
        },
        **_TRANSACTION_RESPONSES,
    },
)
def give_talent(payload: TalentGrantCreate, response: Response, db: Session = Depends(get_db)):
    """Grant talent to one student.

    Example request body::

        {
            "student_id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
            "actor_id": "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa",
            "amount": 10,
            "reason": "Led morning worship"
        }
    """

    result = talent_service.give(
        db,
        student_id=payload.student_id,
        actor_id=payload.actor_id,
        amount=payload.amount,
        reason=payload.reason,
    )
    return respond(result, response)


@router.post(
    "/take",
    response_model=ServiceResult[TransactionReceipt],
    summary="Deduct talent from a student",
    responses=_TRANSACTION_RESPONSES,
)
def take_talent(payload: TalentGrantCreate, response: Response, db: Session = Depends(get_db)):
    """Deduct talent; fails without changes when the balance is too low."""

    result = talent_service.take(
        db,
        student_id=payload.student_id,
        actor_id=payload.actor_id,
        amount=payload.amount,
        reason=payload.reason,
    )
    return respond(result, response)


@router.post(
    "/group-give",
    response_model=ServiceResult[GroupGrantSummary],
    summary="Split a lump sum across a group",
    responses={
        207: {"description": "Some members succeeded, some failed"},
        400: {"description": "Validation failure or every member failed"},
    },
)
def group_give_talent(payload: GroupGrantCreate, response: Response, db: Session = Depends(get_db)):
    """Grant ``floor(total_amount / len(members))`` to every member in order.

    Example request body::

        {
            "members": [
                {"id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb", "name": "Kim Minji"},
                {"id": "cccccccc-cccc-cccc-cccc-cccccccccccc", "name": "Lee Jun"}
            ],
            "actor_id": "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa",
            "total_amount": 20,
            "reason": "Won the relay",
            "group_label": "3"
        }
    """

    result = talent_service.group_give(
        db,
        members=payload.members,
        actor_id=payload.actor_id,
        total_amount=payload.total_amount,
        reason=payload.reason,
        group_label=payload.group_label,
    )
    return respond(result, response)


@router.get(
    "/history",
    response_model=ServiceResult[List[HistoryEntry]],
    summary="Ledger entries recorded by an actor",
)
def transaction_history(
    response: Response,
    actor_id: UUID = Query(..., description="Teacher whose transactions to list"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum entries to return"),
    db: Session = Depends(get_db),
):
    """Return the actor's transactions, newest first."""

    return respond(talent_service.history(db, actor_id=actor_id, limit=limit), response)
