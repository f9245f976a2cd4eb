"""Role view payloads, one variant per role."""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .transaction import HistoryEntry
from .user import Groupmate, Identity

UNKNOWN = "Unknown"

TRANSACTION_LABELS = {
    "individual_give": "Individual grant",
    "individual_take": "Individual deduction",
    "group_give": "Group grant",
}


class LevelRead(BaseModel):
    level: int
    name: str
    color_band: str
    lower: int
    upper: Optional[int] = None
    progress_percent: int = Field(..., ge=0, le=100)


class HistoryRow(BaseModel):
    """History entry flattened for display; missing students become placeholders."""

    id: int
    student_name: str
    student_username: str
    student_grade: Optional[str] = None
    student_group: Optional[str] = None
    kind: str
    amount: int
    signed_amount: str
    reason: str
    created_at: datetime
    created_label: str

    @classmethod
    def from_entry(cls, entry: HistoryEntry, created_label: str) -> "HistoryRow":
        student = entry.student
        return cls(
            id=entry.id,
            student_name=student.name if student else UNKNOWN,
            student_username=student.username if student else UNKNOWN,
            student_grade=student.grade if student else None,
            student_group=student.group if student else None,
            kind=TRANSACTION_LABELS.get(entry.transaction_type.value, "Other"),
            amount=entry.amount,
            signed_amount=f"+{entry.amount}" if entry.amount > 0 else str(entry.amount),
            reason=entry.reason,
            created_at=entry.created_at,
            created_label=created_label,
        )


class StudentDashboard(BaseModel):
    role: Literal["student"] = "student"
    identity: Identity
    greeting: str
    group_label: str
    current_talent: int
    level: LevelRead
    groupmates: List[Groupmate]


class TeacherDashboard(BaseModel):
    role: Literal["teacher"] = "teacher"
    identity: Identity
    greeting: str
    recent_transactions: List[HistoryRow]


class AdminDashboard(BaseModel):
    role: Literal["admin"] = "admin"
    title: str = "Access restricted"
    message: str = "Administrator features are available only in the separate admin application."


AnyDashboard = Union[StudentDashboard, TeacherDashboard, AdminDashboard]

Dashboard = Annotated[AnyDashboard, Field(discriminator="role")]
