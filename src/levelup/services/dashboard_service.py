"""Per-role view models for the single-page front-end."""

from __future__ import annotations

import logging
from typing import Callable, Dict
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import User, UserRole
from ..schemas import (
    GENERIC_ERROR_MESSAGE,
    AdminDashboard,
    ErrorKind,
    Groupmate,
    HistoryRow,
    Identity,
    LevelRead,
    ServiceResult,
    StudentDashboard,
    TeacherDashboard,
)
from ..utils.datetime import format_short
from ..utils.levels import level_for, progress_percent
from . import talent_service, user_service

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


def level_view(max_talent: int) -> LevelRead:
    info = level_for(max_talent)
    return LevelRead(
        level=info.level,
        name=info.name,
        color_band=info.color_band,
        lower=info.lower,
        upper=info.upper,
        progress_percent=progress_percent(max_talent),
    )


def _student_view(session: Session, user: User) -> StudentDashboard:
    mates = user_service.groupmates_of(session, user)
    return StudentDashboard(
        identity=Identity.model_validate(user),
        greeting=f"Welcome, {user.name or user.username}!",
        group_label=user.group_label or UNASSIGNED,
        current_talent=user.current_talent or 0,
        level=level_view(user.max_talent or 0),
        groupmates=[Groupmate.model_validate(mate) for mate in mates],
    )


def _teacher_view(session: Session, user: User) -> TeacherDashboard:
    result = talent_service.history(session, actor_id=user.id)
    if not result.success:
        # The rest of the page still renders; the history panel shows empty.
        logger.warning("history unavailable for teacher %s: %s", user.id, result.message)
    entries = result.data or []
    return TeacherDashboard(
        identity=Identity.model_validate(user),
        greeting=f"Welcome, {user.name or user.username}!",
        recent_transactions=[HistoryRow.from_entry(entry, format_short(entry.created_at)) for entry in entries],
    )


def _admin_view(session: Session, user: User) -> AdminDashboard:
    return AdminDashboard()


VIEW_BUILDERS: Dict[UserRole, Callable[[Session, User], object]] = {
    UserRole.STUDENT: _student_view,
    UserRole.TEACHER: _teacher_view,
    UserRole.ADMIN: _admin_view,
}


def build_dashboard(session: Session, user_id: UUID) -> ServiceResult:
    """Render the view matching the user's role."""

    try:
        user = session.get(User, user_id)
        if user is None:
            return ServiceResult.fail("User not found.", ErrorKind.NOT_FOUND, status_code=404)
        view = VIEW_BUILDERS[user.role](session, user)
    except SQLAlchemyError:
        logger.exception("dashboard failed for user %s", user_id)
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=500)
    return ServiceResult.ok(data=view)
