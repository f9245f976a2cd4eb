"""Talent ledger model capturing balance movements."""

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utc_now


class TransactionType(str, enum.Enum):
    """Ledger event classification."""

    INDIVIDUAL_GIVE = "individual_give"
    INDIVIDUAL_TAKE = "individual_take"
    GROUP_GIVE = "group_give"


class TalentTransaction(Base):
    """Append-only ledger of talent deltas, one row per balance change."""

    __tablename__ = "talent_transactions"
    __table_args__ = (
        CheckConstraint(
            "((transaction_type = 'individual_take' AND amount < 0) "
            "OR (transaction_type IN ('individual_give', 'group_give') AND amount > 0))",
            name="talent_transactions_amount_sign",
        ),
        CheckConstraint("length(reason) > 0", name="talent_transactions_reason_present"),
        Index("ix_talent_transactions_teacher_created", "teacher_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Nullable so ledger rows outlive deleted users
    student_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
    teacher_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"))
    amount = Column(Integer, nullable=False)
    reason = Column(String, nullable=False)
    transaction_type = Column(
        Enum(TransactionType, name="talent_transaction_type", values_callable=lambda kinds: [k.value for k in kinds]),
        nullable=False,
    )
    created_at = Column(DateTime, default=utc_now, nullable=False)

    student = relationship("User", foreign_keys=[student_id], back_populates="transactions_received")
    teacher = relationship("User", foreign_keys=[teacher_id], back_populates="transactions_issued")
