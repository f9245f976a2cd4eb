"""User lookups and creation."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import User, UserRole
from ..schemas import GENERIC_ERROR_MESSAGE, ErrorKind, Groupmate, ServiceResult, StudentTalentInfo
from .auth_service import hash_password

logger = logging.getLogger(__name__)


def create_user(
    session: Session,
    *,
    username: str,
    password: str,
    name: Optional[str] = None,
    role: UserRole = UserRole.STUDENT,
    group: Optional[str] = None,
    grade: Optional[str] = None,
    church: Optional[str] = None,
) -> User:
    """Insert a user with a bcrypt-hashed password.

    Raises ``ValueError`` when the username is already taken.
    """

    user = User(
        username=username,
        name=name or username,
        password_hash=hash_password(password),
        role=role,
        group_label=group,
        grade=grade,
        church=church,
        current_talent=0,
        max_talent=0,
    )
    session.add(user)
    try:
        session.flush()
    except IntegrityError as exc:
        session.rollback()
        raise ValueError(f"Username {username!r} is already taken") from exc
    logger.info("created %s account %s", role.value, username)
    return user


def _students():
    return select(User).where(User.role == UserRole.STUDENT)


def find_student_by_username(session: Session, username: str) -> ServiceResult[StudentTalentInfo]:
    """Exact-match student search used by the teacher's individual grant form."""

    username = (username or "").strip()
    if not username:
        return ServiceResult.fail("Enter a username to search.", ErrorKind.VALIDATION)

    try:
        student = session.execute(_students().where(User.username == username)).scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception("student search failed")
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)

    if student is None:
        return ServiceResult.fail("Student not found.", ErrorKind.NOT_FOUND, status_code=404)
    return ServiceResult.ok(data=StudentTalentInfo.model_validate(student))


def _group_query(group_label: str):
    return _students().where(User.group_label == group_label).order_by(User.name.asc())


def list_group_members(session: Session, group_label: str) -> ServiceResult[List[StudentTalentInfo]]:
    """Students carrying ``group_label``, ordered by name."""

    group_label = (group_label or "").strip()
    if not group_label:
        return ServiceResult.fail("Enter a group name to search.", ErrorKind.VALIDATION)

    try:
        members = session.execute(_group_query(group_label)).scalars().all()
    except SQLAlchemyError:
        logger.exception("group search failed for %s", group_label)
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)

    if not members:
        return ServiceResult.fail("No students in this group.", ErrorKind.NOT_FOUND, status_code=404, data=[])
    return ServiceResult.ok(data=[StudentTalentInfo.model_validate(member) for member in members])


def groupmates_of(session: Session, user: User) -> Sequence[User]:
    """Other students sharing ``user``'s group; empty when unassigned."""

    if not user.group_label:
        return []
    stmt = _group_query(user.group_label).where(User.username != user.username)
    return session.execute(stmt).scalars().all()


def list_groupmates(session: Session, user_id) -> ServiceResult[List[Groupmate]]:
    try:
        user = session.get(User, user_id)
        if user is None:
            return ServiceResult.fail("User not found.", ErrorKind.NOT_FOUND, status_code=404)
        mates = groupmates_of(session, user)
    except SQLAlchemyError:
        logger.exception("groupmate lookup failed for %s", user_id)
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)
    return ServiceResult.ok(data=[Groupmate.model_validate(mate) for mate in mates])


def list_students(session: Session) -> ServiceResult[List[StudentTalentInfo]]:
    """All students with balances, ordered by name."""

    try:
        students = session.execute(_students().order_by(User.name.asc())).scalars().all()
    except SQLAlchemyError:
        logger.exception("student listing failed")
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)
    return ServiceResult.ok(data=[StudentTalentInfo.model_validate(student) for student in students])
