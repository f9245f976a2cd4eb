"""HTTP client driving the login, dashboard and teacher workflows."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Set, Union
from urllib.parse import quote
from uuid import UUID

import httpx
from pydantic import TypeAdapter

from ..core.config import get_settings
from ..schemas import (
    GENERIC_ERROR_MESSAGE,
    Dashboard,
    ErrorKind,
    GroupMemberRef,
    Identity,
    ServiceResult,
    StudentDashboard,
    StudentTalentInfo,
)
from .session_store import SessionStore

logger = logging.getLogger(__name__)

_dashboard_adapter = TypeAdapter(Dashboard)

IN_FLIGHT_MESSAGE = "A request is already in progress."
AMOUNT_REASON_MESSAGE = "Enter a positive amount and a reason."


def parse_amount(value: Union[int, str, None]) -> Optional[int]:
    """Form input to a positive integer, or None."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        amount = value
    else:
        try:
            amount = int(str(value).strip())
        except ValueError:
            return None
    return amount if amount > 0 else None


class TalentClient:
    """One signed-in user on one device.

    State such as the selected student or the searched group is a transient
    copy; it is re-fetched after every mutation rather than pushed.
    """

    def __init__(self, http: Optional[httpx.Client] = None, store: Optional[SessionStore] = None) -> None:
        settings = get_settings()
        self.http = http if http is not None else httpx.Client(base_url=settings.api_base_url, timeout=10.0)
        self.store = store if store is not None else SessionStore()
        self.identity: Optional[Identity] = self.store.load()

        self.selected_student: Optional[StudentTalentInfo] = None
        self.group_label: Optional[str] = None
        self.group_members: List[StudentTalentInfo] = []

        self._in_flight: Set[str] = set()
        self._lock = threading.Lock()

    @property
    def signed_in(self) -> bool:
        return self.identity is not None

    # --- transport ---

    def _call(self, method: str, path: str, **kwargs) -> ServiceResult:
        try:
            response = self.http.request(method, path, **kwargs)
            body = response.json()
            return ServiceResult.model_validate({**body, "status_code": response.status_code})
        except httpx.HTTPError:
            logger.exception("%s %s failed", method, path)
        except (ValueError, TypeError):
            # Non-JSON or non-envelope body
            logger.exception("unexpected response from %s %s", method, path)
        return ServiceResult.fail(GENERIC_ERROR_MESSAGE, ErrorKind.STORAGE, status_code=503)

    def _begin(self, action: str) -> bool:
        with self._lock:
            if action in self._in_flight:
                return False
            self._in_flight.add(action)
            return True

    def _end(self, action: str) -> None:
        with self._lock:
            self._in_flight.discard(action)

    def is_busy(self, action: str) -> bool:
        """Whether the control for ``action`` should currently be disabled."""

        with self._lock:
            return action in self._in_flight

    def _require_identity(self) -> Optional[ServiceResult]:
        if self.identity is None:
            return ServiceResult.fail("Sign in first.", ErrorKind.VALIDATION, status_code=401)
        return None

    # --- session ---

    def login(self, username: str, password: str) -> ServiceResult:
        """Authenticate and persist the identity; a failure leaves any stored session alone."""

        if not self._begin("login"):
            return ServiceResult.fail(IN_FLIGHT_MESSAGE, ErrorKind.IN_FLIGHT)
        try:
            result = self._call("POST", "/auth/login", json={"username": username, "password": password})
        finally:
            self._end("login")

        if result.success:
            self.identity = Identity.model_validate(result.data)
            self.store.save(self.identity)
        return result

    def logout(self) -> None:
        self.identity = None
        self.selected_student = None
        self.group_label = None
        self.group_members = []
        self.store.clear()

    def dashboard(self) -> ServiceResult:
        """Fetch the role view; a student's stored balances are refreshed from it."""

        missing = self._require_identity()
        if missing:
            return missing

        result = self._call("GET", f"/dashboard/{self.identity.id}")
        if not result.success:
            return result

        view = _dashboard_adapter.validate_python(result.data)
        if isinstance(view, StudentDashboard):
            self.identity = view.identity
            self.store.save(self.identity)
        result.data = view
        return result

    # --- individual grants ---

    def search_student(self, username: str) -> ServiceResult:
        if not (username or "").strip():
            return ServiceResult.fail("Enter a username to search.", ErrorKind.VALIDATION)

        result = self._call("GET", "/students", params={"username": username.strip()})
        self.selected_student = StudentTalentInfo.model_validate(result.data) if result.success else None
        return result

    def _individual(self, path: str, amount, reason: str, student_id: Optional[UUID]) -> ServiceResult:
        missing = self._require_identity()
        if missing:
            return missing

        target = student_id or (self.selected_student.id if self.selected_student else None)
        parsed = parse_amount(amount)
        if target is None or parsed is None or not (reason or "").strip():
            return ServiceResult.fail(AMOUNT_REASON_MESSAGE, ErrorKind.VALIDATION)

        if not self._begin("individual"):
            return ServiceResult.fail(IN_FLIGHT_MESSAGE, ErrorKind.IN_FLIGHT)
        try:
            result = self._call(
                "POST",
                path,
                json={"student_id": str(target), "actor_id": str(self.identity.id), "amount": parsed, "reason": reason},
            )
            if result.success:
                self._refresh_selected(target)
        finally:
            self._end("individual")
        return result

    def _refresh_selected(self, student_id: UUID) -> None:
        balances = self._call("GET", f"/students/{student_id}/balance")
        if balances.success and self.selected_student and self.selected_student.id == student_id:
            self.selected_student = self.selected_student.model_copy(
                update={
                    "current_talent": balances.data["current_talent"],
                    "max_talent": balances.data["max_talent"],
                }
            )

    def give(self, amount, reason: str, student_id: Optional[UUID] = None) -> ServiceResult:
        return self._individual("/talents/give", amount, reason, student_id)

    def take(self, amount, reason: str, student_id: Optional[UUID] = None) -> ServiceResult:
        return self._individual("/talents/take", amount, reason, student_id)

    # --- group grants ---

    def search_group(self, group_label: str) -> ServiceResult:
        label = (group_label or "").strip()
        if not label:
            return ServiceResult.fail("Enter a group name to search.", ErrorKind.VALIDATION)

        result = self._call("GET", f"/groups/{quote(label, safe='')}/members")
        self.group_label = label
        self.group_members = [StudentTalentInfo.model_validate(m) for m in result.data or []]
        return result

    def per_person_preview(self, total_amount) -> int:
        parsed = parse_amount(total_amount)
        if parsed is None or not self.group_members:
            return 0
        return parsed // len(self.group_members)

    def group_give(self, total_amount, reason: str) -> ServiceResult:
        missing = self._require_identity()
        if missing:
            return missing

        parsed = parse_amount(total_amount)
        if parsed is None or not (reason or "").strip() or not self.group_members:
            return ServiceResult.fail("Check the amount, reason and group members.", ErrorKind.VALIDATION)
        if self.per_person_preview(parsed) <= 0:
            return ServiceResult.fail("Per-person amount would be 0 talent.", ErrorKind.VALIDATION)

        if not self._begin("group"):
            return ServiceResult.fail(IN_FLIGHT_MESSAGE, ErrorKind.IN_FLIGHT)
        try:
            members = [GroupMemberRef(id=m.id, name=m.name).model_dump(mode="json") for m in self.group_members]
            result = self._call(
                "POST",
                "/talents/group-give",
                json={
                    "members": members,
                    "actor_id": str(self.identity.id),
                    "total_amount": parsed,
                    "reason": reason,
                    "group_label": self.group_label,
                },
            )
            summary = result.data or {}
            if result.success or summary.get("success_count", 0) > 0:
                self.search_group(self.group_label)
        finally:
            self._end("group")
        return result

    # --- history ---

    def history(self, limit: int = 20) -> ServiceResult:
        missing = self._require_identity()
        if missing:
            return missing
        return self._call("GET", "/talents/history", params={"actor_id": str(self.identity.id), "limit": limit})

    def close(self) -> None:
        self.http.close()
