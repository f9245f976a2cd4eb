import logging

from sqlalchemy import update

from levelup.jobs import run_reconcile_once
from levelup.models import User
from levelup.services import talent_service
from levelup.services.reconcile_service import reconcile_balances


def test_balances_built_from_ledger_reconcile(db_session, make_user, teacher):
    a = make_user("a")
    b = make_user("b")
    talent_service.give(db_session, student_id=a.id, actor_id=teacher.id, amount=10, reason="r")
    talent_service.take(db_session, student_id=a.id, actor_id=teacher.id, amount=4, reason="r")
    talent_service.give(db_session, student_id=b.id, actor_id=teacher.id, amount=3, reason="r")

    assert reconcile_balances(db_session) == {"students_checked": 2, "mismatches": 0, "max_violations": 0}


def test_drift_is_reported(db_session, make_user, teacher, caplog):
    a = make_user("a")
    talent_service.give(db_session, student_id=a.id, actor_id=teacher.id, amount=10, reason="r")
    db_session.execute(update(User).where(User.id == a.id).values(current_talent=99))
    db_session.commit()

    with caplog.at_level(logging.WARNING, logger="levelup.services.reconcile_service"):
        summary = reconcile_balances(db_session)

    assert summary["mismatches"] == 1
    assert summary["max_violations"] == 1
    assert "balance drift" in caplog.text


def test_run_reconcile_once_uses_its_own_session(db_session, make_user, teacher):
    a = make_user("a")
    talent_service.give(db_session, student_id=a.id, actor_id=teacher.id, amount=7, reason="r")

    assert run_reconcile_once() == {"students_checked": 1, "mismatches": 0, "max_violations": 0}
