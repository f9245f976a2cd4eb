"""Ledger reconciliation against stored balances."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import TalentTransaction, User, UserRole

logger = logging.getLogger(__name__)


def reconcile_balances(session: Session) -> dict[str, int]:
    """Compare each student's balance with the sum of their ledger entries.

    Returns summary statistics useful for logging/testing. Nothing is written.
    """

    summary = {
        "students_checked": 0,
        "mismatches": 0,
        "max_violations": 0,
    }

    ledger_totals = (
        select(
            TalentTransaction.student_id.label("student_id"),
            func.sum(TalentTransaction.amount).label("total"),
        )
        .group_by(TalentTransaction.student_id)
        .subquery()
    )
    stmt = (
        select(
            User.id,
            User.username,
            User.current_talent,
            User.max_talent,
            func.coalesce(ledger_totals.c.total, 0),
        )
        .outerjoin(ledger_totals, ledger_totals.c.student_id == User.id)
        .where(User.role == UserRole.STUDENT)
    )

    for student_id, username, current, maximum, ledger_total in session.execute(stmt):
        summary["students_checked"] += 1
        if current != ledger_total:
            summary["mismatches"] += 1
            logger.warning(
                "balance drift for %s (%s): stored %d, ledger %d",
                username,
                student_id,
                current,
                ledger_total,
            )
        if maximum < current:
            summary["max_violations"] += 1
            logger.warning("max_talent below current_talent for %s (%s)", username, student_id)

    return summary
