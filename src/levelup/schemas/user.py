"""Pydantic schemas for user projections."""

from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..models import UserRole


class StudentSummary(BaseModel):
    """Lightweight projection of student details.

    ORM rows expose the label as ``group_label``; JSON uses ``group``.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    name: str
    grade: Optional[str] = None
    group: Optional[str] = Field(None, validation_alias=AliasChoices("group", "group_label"))


class StudentTalentInfo(StudentSummary):
    """Student details plus balances, as shown on the teacher's search card."""

    church: Optional[str] = None
    current_talent: int = 0
    max_talent: int = 0


class GroupMemberRef(BaseModel):
    """Member reference submitted with a group grant."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class Groupmate(BaseModel):
    """What a student sees about the other members of their group."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    name: str
    grade: Optional[str] = None
    church: Optional[str] = None


class Identity(BaseModel):
    """Authenticated identity held by the client for the session lifetime."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    name: str
    role: UserRole
    grade: Optional[str] = None
    group: Optional[str] = Field(None, validation_alias=AliasChoices("group", "group_label"))
    church: Optional[str] = None
    current_talent: int = 0
    max_talent: int = 0


class BalanceRead(BaseModel):
    """Current balances for a single student."""

    student_id: UUID
    current_talent: int
    max_talent: int
