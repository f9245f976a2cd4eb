import uuid

from levelup.models import UserRole


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_login_success_and_failure(api, make_user):
    make_user("minji", password="summer2025", name="Kim Minji", group="3")

    ok = api.post("/auth/login", json={"username": "minji", "password": "summer2025"})
    bad = api.post("/auth/login", json={"username": "minji", "password": "wrong"})
    unknown = api.post("/auth/login", json={"username": "ghost", "password": "wrong"})

    assert ok.status_code == 200
    assert ok.json()["data"]["group"] == "3"
    assert ok.json()["data"]["role"] == "student"
    assert "password_hash" not in ok.json()["data"]
    assert bad.status_code == unknown.status_code == 401
    assert bad.json() == unknown.json()


def test_give_take_and_balance(api, make_user, teacher):
    student = make_user("jun", name="Lee Jun", current_talent=5)
    body = {"student_id": str(student.id), "actor_id": str(teacher.id), "amount": 10, "reason": "Cleanup"}

    given = api.post("/talents/give", json=body)
    overdraft = api.post("/talents/take", json={**body, "amount": 100})
    balance = api.get(f"/students/{student.id}/balance")

    assert given.status_code == 200
    assert given.json()["data"]["current_talent"] == 15
    assert overdraft.status_code == 400
    assert overdraft.json()["success"] is False
    assert overdraft.json()["error"] == "rule_violation"
    assert balance.json()["data"] == {"student_id": str(student.id), "current_talent": 15, "max_talent": 15}


def test_validation_errors_use_the_envelope(api, teacher):
    response = api.post("/talents/give", json={"actor_id": str(teacher.id), "amount": 1, "reason": "x"})

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert response.json()["error"] == "validation"
    assert "student_id" in response.json()["message"]


def test_non_positive_amount_is_rejected(api, make_user, teacher):
    student = make_user("amt")
    body = {"student_id": str(student.id), "actor_id": str(teacher.id), "amount": 0, "reason": "x"}

    response = api.post("/talents/give", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "validation"


def test_student_search_and_group_members(api, make_user):
    make_user("bora", name="Bora", group="5")
    make_user("ahn", name="Ahn", group="5")
    make_user("teacher_x", role=UserRole.TEACHER, group="5")

    found = api.get("/students", params={"username": "bora"})
    missing = api.get("/students", params={"username": "bor"})
    members = api.get("/groups/5/members")
    empty = api.get("/groups/99/members")

    assert found.json()["data"]["name"] == "Bora"
    assert missing.status_code == 404
    assert [m["name"] for m in members.json()["data"]] == ["Ahn", "Bora"]
    assert empty.status_code == 404
    assert empty.json()["message"] == "No students in this group."


def test_group_give_endpoint(api, make_user, teacher):
    members = [make_user(n, name=n, group="1") for n in ("a", "b", "c")]
    body = {
        "members": [{"id": str(m.id), "name": m.name} for m in members],
        "actor_id": str(teacher.id),
        "total_amount": 10,
        "reason": "Quiz",
        "group_label": "1",
    }

    response = api.post("/talents/group-give", json=body)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["per_person"] == 3
    assert data["status"] == "completed"
    assert len(data["results"]) == 3


def test_group_give_partial_is_207(api, make_user, teacher):
    member = make_user("real", group="1")
    body = {
        "members": [{"id": str(member.id), "name": "real"}, {"id": str(uuid.uuid4()), "name": "ghost"}],
        "actor_id": str(teacher.id),
        "total_amount": 4,
        "reason": "Quiz",
        "group_label": "1",
    }

    response = api.post("/talents/group-give", json=body)

    assert response.status_code == 207
    assert response.json()["data"]["status"] == "partial"


def test_history_endpoint(api, make_user, teacher):
    student = make_user("h", name="H", grade="6", group="2")
    for amount in (1, 2, 3):
        api.post(
            "/talents/give",
            json={"student_id": str(student.id), "actor_id": str(teacher.id), "amount": amount, "reason": "r"},
        )

    response = api.get("/talents/history", params={"actor_id": str(teacher.id), "limit": 2})

    entries = response.json()["data"]
    assert [e["amount"] for e in entries] == [3, 2]
    assert entries[0]["student"] == {"name": "H", "username": "h", "grade": "6", "group": "2"}
    assert entries[0]["transaction_type"] == "individual_give"


def test_dashboard_endpoint_branches_on_role(api, make_user, teacher):
    student = make_user("s", group="1", max_talent=2500, current_talent=100)
    admin = make_user("adm", role=UserRole.ADMIN)

    student_view = api.get(f"/dashboard/{student.id}").json()["data"]
    teacher_view = api.get(f"/dashboard/{teacher.id}").json()["data"]
    admin_view = api.get(f"/dashboard/{admin.id}").json()["data"]

    assert student_view["role"] == "student"
    assert student_view["level"]["level"] == 3
    assert teacher_view["role"] == "teacher"
    assert teacher_view["recent_transactions"] == []
    assert admin_view == {
        "role": "admin",
        "title": "Access restricted",
        "message": "Administrator features are available only in the separate admin application.",
    }
