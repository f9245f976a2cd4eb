import os
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="levelup-tests-"))
os.environ.setdefault("LEVELUP_DATABASE_URL", f"sqlite:///{_TMP / 'levelup.db'}")
os.environ.setdefault("LEVELUP_SCHEDULER_ENABLED", "false")
os.environ.setdefault("LEVELUP_SESSION_STORAGE_DIR", str(_TMP / "session"))
os.environ.setdefault("LEVELUP_TRANSACTION_RETRY_BACKOFF", "0.01")
os.environ.setdefault("LEVELUP_BCRYPT_ROUNDS", "4")

from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from levelup.core.database import Base, SessionLocal, engine  # noqa: E402
from levelup.main import app  # noqa: E402
from levelup.models import UserRole  # noqa: E402
from levelup.services.user_service import create_user  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db() -> Generator[None, None, None]:
    """Rebuild all tables so every test starts from an empty database."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session: Session):
    """Create and commit a user; balances can be seeded directly."""

    def _make(username: str, role: UserRole = UserRole.STUDENT, password: str = "pass1234", **fields):
        current = fields.pop("current_talent", 0)
        maximum = fields.pop("max_talent", current)
        user = create_user(db_session, username=username, password=password, role=role, **fields)
        user.current_talent = current
        user.max_talent = maximum
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def teacher(make_user):
    return make_user("teacher_kim", role=UserRole.TEACHER, name="Kim Teacher")


@pytest.fixture()
def api() -> Generator[TestClient, None, None]:
    with TestClient(app, base_url="http://testserver/api/v1") as client:
        yield client
