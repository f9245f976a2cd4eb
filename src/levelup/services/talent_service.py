"""Domain logic for talent grants, deductions and the ledger."""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import case, select, update
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.config import get_settings
from ..models import TalentTransaction, TransactionType, User, UserRole
from ..schemas import (
    GENERIC_ERROR_MESSAGE,
    BalanceRead,
    ErrorKind,
    GroupGrantStatus,
    GroupGrantSummary,
    HistoryEntry,
    MemberOutcome,
    ServiceResult,
    TransactionReceipt,
)
from ..utils.datetime import utc_now

logger = logging.getLogger(__name__)


class TalentRuleViolation(Exception):
    """Raised when business constraints are violated."""

    def __init__(self, detail: str, status_code: int = 400, error: ErrorKind = ErrorKind.RULE_VIOLATION) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.error = error


def _rejected(exc: TalentRuleViolation, data=None) -> ServiceResult:
    return ServiceResult.fail(exc.detail, exc.error, status_code=exc.status_code, data=data)


def _validate_amount(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise TalentRuleViolation("Amount must be a positive whole number.", error=ErrorKind.VALIDATION)
    return amount


def _validate_reason(reason: Optional[str]) -> str:
    reason = (reason or "").strip()
    if not reason:
        raise TalentRuleViolation("A reason is required.", error=ErrorKind.VALIDATION)
    return reason


def _ensure_actor(session: Session, actor_id: UUID) -> None:
    stmt = select(User.id).where(User.id == actor_id)
    if session.execute(stmt).scalar_one_or_none() is None:
        raise TalentRuleViolation(f"Actor {actor_id} not found", status_code=404, error=ErrorKind.NOT_FOUND)


def _apply_transaction(
    session: Session,
    *,
    student_id: UUID,
    teacher_id: UUID,
    amount: int,
    reason: str,
    transaction_type: TransactionType,
) -> TransactionReceipt:
    # Compare-and-set on the student's row: the balance check and the write
    # are one statement, so concurrent grants serialise on the row lock.
    new_current = User.current_talent + amount
    stmt = (
        update(User)
        .where(
            User.id == student_id,
            User.role == UserRole.STUDENT,
            User.current_talent + amount >= 0,
        )
        .values(
            current_talent=new_current,
            max_talent=case((new_current > User.max_talent, new_current), else_=User.max_talent),
            updated_at=utc_now(),
        )
        .execution_options(synchronize_session=False)
    )
    if session.execute(stmt).rowcount == 0:
        exists_stmt = select(User.id).where(User.id == student_id, User.role == UserRole.STUDENT)
        if session.execute(exists_stmt).scalar_one_or_none() is None:
            raise TalentRuleViolation("Student not found.", status_code=404, error=ErrorKind.NOT_FOUND)
        raise TalentRuleViolation("Insufficient talent balance for this deduction.")

    student = session.execute(
        select(User.name, User.current_talent, User.max_talent).where(User.id == student_id)
    ).one()

    entry = TalentTransaction(
        student_id=student_id,
        teacher_id=teacher_id,
        amount=amount,
        reason=reason,
        transaction_type=transaction_type,
    )
    session.add(entry)
    session.flush()

    return TransactionReceipt(
        transaction_id=entry.id,
        student_id=student_id,
        student_name=student.name,
        amount=amount,
        current_talent=student.current_talent,
        max_talent=student.max_talent,
    )


def process_talent_transaction(
    session: Session,
    *,
    student_id: UUID,
    teacher_id: UUID,
    amount: int,
    reason: str,
    transaction_type: TransactionType,
) -> ServiceResult[TransactionReceipt]:
    """Apply a signed amount to a student and append the ledger row atomically.

    Either both the balance update and the ledger entry are committed, or
    neither is. A deduction that would take ``current_talent`` below zero is
    rejected. Lock contention is retried with exponential backoff.
    """

    settings = get_settings()
    attempts = settings.transaction_retry_attempts

    attempt = 0
    while True:
        try:
            _ensure_actor(session, teacher_id)
            receipt = _apply_transaction(
                session,
                student_id=student_id,
                teacher_id=teacher_id,
                amount=amount,
                reason=reason,
                transaction_type=transaction_type,
            )
            session.commit()
        except TalentRuleViolation as exc:
            session.rollback()
            logger.info("talent transaction rejected for student %s: %s", student_id, exc.detail)
            return _rejected(exc)
        except OperationalError:
            session.rollback()
            attempt += 1
            if attempt >= attempts:
                logger.exception("talent transaction for student %s failed after %d attempts", student_id, attempts)
                return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)
            time.sleep(settings.transaction_retry_backoff * (2 ** (attempt - 1)))
            continue
        except SQLAlchemyError:
            session.rollback()
            logger.exception("talent transaction failed for student %s", student_id)
            return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)

        logger.info(
            "%s %+d talent for student %s by %s (balance %d)",
            transaction_type.value,
            amount,
            student_id,
            teacher_id,
            receipt.current_talent,
        )
        if amount > 0:
            message = f"Granted {amount} talent to {receipt.student_name}!"
        else:
            message = f"Deducted {abs(amount)} talent from {receipt.student_name}."
        return ServiceResult.ok(message, receipt)


def give(
    session: Session,
    *,
    student_id: UUID,
    actor_id: UUID,
    amount: int,
    reason: str,
) -> ServiceResult[TransactionReceipt]:
    """Grant talent to a single student."""

    try:
        amount = _validate_amount(amount)
        reason = _validate_reason(reason)
    except TalentRuleViolation as exc:
        return _rejected(exc)

    return process_talent_transaction(
        session,
        student_id=student_id,
        teacher_id=actor_id,
        amount=amount,
        reason=reason,
        transaction_type=TransactionType.INDIVIDUAL_GIVE,
    )


def take(
    session: Session,
    *,
    student_id: UUID,
    actor_id: UUID,
    amount: int,
    reason: str,
) -> ServiceResult[TransactionReceipt]:
    """Deduct talent from a single student; ``amount`` is given as a positive number."""

    try:
        amount = _validate_amount(amount)
        reason = _validate_reason(reason)
    except TalentRuleViolation as exc:
        return _rejected(exc)

    return process_talent_transaction(
        session,
        student_id=student_id,
        teacher_id=actor_id,
        amount=-amount,
        reason=reason,
        transaction_type=TransactionType.INDIVIDUAL_TAKE,
    )


def group_give(
    session: Session,
    *,
    members: Sequence,
    actor_id: UUID,
    total_amount: int,
    reason: str,
    group_label: str,
) -> ServiceResult[GroupGrantSummary]:
    """Split ``total_amount`` evenly (rounded down) across ``members``.

    Each member is processed independently in the order given, so the result
    may be a partial success. Members need ``id`` and ``name`` attributes.
    """

    try:
        if not members:
            raise TalentRuleViolation("The group has no members.", error=ErrorKind.VALIDATION)
        total_amount = _validate_amount(total_amount)
        reason = _validate_reason(reason)
        per_person = total_amount // len(members)
        if per_person <= 0:
            raise TalentRuleViolation("Per-person amount would be 0 talent.", error=ErrorKind.VALIDATION)
    except TalentRuleViolation as exc:
        return _rejected(exc)

    annotated_reason = f"{reason} (group grant: {group_label})"
    outcomes: List[MemberOutcome] = []

    for member in members:
        result = process_talent_transaction(
            session,
            student_id=member.id,
            teacher_id=actor_id,
            amount=per_person,
            reason=annotated_reason,
            transaction_type=TransactionType.GROUP_GIVE,
        )
        if not result.success:
            logger.warning("group grant to %s (%s) failed: %s", member.name, member.id, result.message)
        outcomes.append(
            MemberOutcome(
                student_id=member.id,
                student_name=member.name,
                success=result.success,
                message=result.message,
                data=result.data,
            )
        )

    success_count = sum(1 for outcome in outcomes if outcome.success)
    failure_count = len(outcomes) - success_count

    if failure_count == 0:
        status = GroupGrantStatus.COMPLETED
    elif success_count > 0:
        status = GroupGrantStatus.PARTIAL
    else:
        status = GroupGrantStatus.FAILED

    summary = GroupGrantSummary(
        group_label=group_label,
        per_person=per_person,
        status=status,
        success_count=success_count,
        failure_count=failure_count,
        results=outcomes,
    )

    if status is GroupGrantStatus.COMPLETED:
        return ServiceResult.ok(
            f"Group {group_label}: granted {per_person} talent each to {len(members)} members!",
            summary,
        )
    if status is GroupGrantStatus.PARTIAL:
        return ServiceResult.fail(
            f"Group {group_label}: {success_count} succeeded, {failure_count} failed",
            ErrorKind.PARTIAL_FAILURE,
            status_code=207,
            data=summary,
        )
    return ServiceResult.fail(
        f"Group {group_label}: all member transactions failed",
        ErrorKind.RULE_VIOLATION,
        data=summary,
    )


def history(
    session: Session,
    *,
    actor_id: UUID,
    limit: Optional[int] = None,
) -> ServiceResult[List[HistoryEntry]]:
    """Return the actor's ledger entries, newest first.

    Rows whose student has since been deleted are kept with ``student=None``.
    """

    settings = get_settings()
    if limit is None:
        limit = settings.history_default_limit
    if limit <= 0:
        return ServiceResult.fail("Limit must be a positive number.", ErrorKind.VALIDATION)
    limit = min(limit, settings.history_max_limit)

    stmt = (
        select(TalentTransaction)
        .options(joinedload(TalentTransaction.student))
        .where(TalentTransaction.teacher_id == actor_id)
        .order_by(TalentTransaction.created_at.desc(), TalentTransaction.id.desc())
        .limit(limit)
    )
    try:
        rows = session.execute(stmt).scalars().all()
    except SQLAlchemyError:
        logger.exception("history lookup failed for actor %s", actor_id)
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)

    return ServiceResult.ok(data=[HistoryEntry.model_validate(row) for row in rows])


def current_balances(session: Session, student_id: UUID) -> ServiceResult[BalanceRead]:
    """Re-read a student's balances after a mutation."""

    stmt = select(User.current_talent, User.max_talent).where(
        User.id == student_id,
        User.role == UserRole.STUDENT,
    )
    try:
        row = session.execute(stmt).one_or_none()
    except SQLAlchemyError:
        logger.exception("balance lookup failed for student %s", student_id)
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)

    if row is None:
        return ServiceResult.fail("Student not found.", ErrorKind.NOT_FOUND, status_code=404)
    return ServiceResult.ok(
        data=BalanceRead(student_id=student_id, current_talent=row.current_talent, max_talent=row.max_talent)
    )
