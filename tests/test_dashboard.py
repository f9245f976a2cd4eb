import uuid

from levelup.models import UserRole
from levelup.schemas import AdminDashboard, StudentDashboard, TeacherDashboard
from levelup.services import dashboard_service, talent_service


def test_student_view_shows_level_and_groupmates(db_session, make_user):
    me = make_user("minji", name="Kim Minji", group="3", current_talent=800, max_talent=1250)
    make_user("bora", name="Bora", group="3", church="Hope")
    make_user("ahn", name="Ahn", group="3")
    make_user("other", name="Other", group="4")
    make_user("teacher_choi", role=UserRole.TEACHER, group="3")

    result = dashboard_service.build_dashboard(db_session, me.id)

    view = result.data
    assert isinstance(view, StudentDashboard)
    assert view.current_talent == 800
    assert view.group_label == "3"
    assert view.level.level == 2
    assert view.level.progress_percent == 25
    assert [mate.name for mate in view.groupmates] == ["Ahn", "Bora"]


def test_unassigned_student_has_no_groupmates(db_session, make_user):
    me = make_user("solo")
    make_user("other", group="1")

    view = dashboard_service.build_dashboard(db_session, me.id).data

    assert view.group_label == "Unassigned"
    assert view.groupmates == []


def test_teacher_view_lists_recent_transactions(db_session, make_user, teacher):
    student = make_user("jun", name="Lee Jun", grade="4", group="2")
    talent_service.give(db_session, student_id=student.id, actor_id=teacher.id, amount=5, reason="Helpful")
    talent_service.take(db_session, student_id=student.id, actor_id=teacher.id, amount=2, reason="Late")

    view = dashboard_service.build_dashboard(db_session, teacher.id).data

    assert isinstance(view, TeacherDashboard)
    rows = view.recent_transactions
    assert [row.signed_amount for row in rows] == ["-2", "+5"]
    assert rows[0].kind == "Individual deduction"
    assert rows[1].student_name == "Lee Jun"


def test_admin_view_is_inert(db_session, make_user):
    admin = make_user("root", role=UserRole.ADMIN)

    view = dashboard_service.build_dashboard(db_session, admin.id).data

    assert isinstance(view, AdminDashboard)
    assert view.title == "Access restricted"
    assert set(view.model_dump()) == {"role", "title", "message"}


def test_unknown_user(db_session):
    result = dashboard_service.build_dashboard(db_session, uuid.uuid4())

    assert result.success is False
    assert result.status_code == 404
