"""Pydantic schemas for talent transactions and the ledger."""

import enum
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..models import TransactionType
from .user import GroupMemberRef


class TalentGrantCreate(BaseModel):
    """Request body for an individual grant or deduction.

    ``amount`` is always positive; the endpoint decides the sign.
    """

    student_id: UUID
    actor_id: UUID
    amount: int = Field(..., description="Talent to grant or deduct.")
    reason: str = Field(..., max_length=280)


class GroupGrantCreate(BaseModel):
    """Request body for splitting a lump sum across a group."""

    members: List[GroupMemberRef]
    actor_id: UUID
    total_amount: int = Field(..., description="Total talent, split evenly and rounded down.")
    reason: str = Field(..., max_length=280)
    group_label: str


class TransactionReceipt(BaseModel):
    """Outcome of a single applied transaction."""

    transaction_id: int
    student_id: UUID
    student_name: str
    amount: int
    current_talent: int
    max_talent: int


class MemberOutcome(BaseModel):
    """Per-member result inside a group grant."""

    student_id: UUID
    student_name: str
    success: bool
    message: str
    data: Optional[TransactionReceipt] = None


class GroupGrantStatus(str, enum.Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"


class GroupGrantSummary(BaseModel):
    """Aggregate result of a group grant."""

    group_label: str
    per_person: int
    status: GroupGrantStatus
    success_count: int
    failure_count: int
    results: List[MemberOutcome]


class LedgerStudent(BaseModel):
    """Student display fields joined onto a ledger row."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    username: str
    grade: Optional[str] = None
    group: Optional[str] = Field(None, validation_alias=AliasChoices("group", "group_label"))


class HistoryEntry(BaseModel):
    """Ledger row as returned by the history query."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    amount: int
    reason: str
    transaction_type: TransactionType
    created_at: datetime
    student: Optional[LedgerStudent] = None
