"""User domain model covering students, teachers and admins."""

import enum
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utc_now


class UserRole(str, enum.Enum):
    """Closed set of roles; view selection keys off this value."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class User(Base):
    """Represents a camp participant or staff member."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="users_username_unique"),
        CheckConstraint("current_talent >= 0", name="users_current_talent_non_negative"),
        CheckConstraint("max_talent >= 0", name="users_max_talent_non_negative"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(
        SAEnum(UserRole, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.STUDENT,
    )
    group_label = Column("group", String, index=True)
    grade = Column(String)
    church = Column(String)
    current_talent = Column(Integer, nullable=False, default=0)
    max_talent = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, nullable=False)

    transactions_received = relationship(
        "TalentTransaction",
        foreign_keys="TalentTransaction.student_id",
        back_populates="student",
        passive_deletes=True,
    )
    transactions_issued = relationship(
        "TalentTransaction",
        foreign_keys="TalentTransaction.teacher_id",
        back_populates="teacher",
        passive_deletes=True,
    )
