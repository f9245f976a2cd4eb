"""Public schema exports."""

from .auth import LoginRequest
from .common import GENERIC_ERROR_MESSAGE, ErrorKind, ServiceResult
from .dashboard import AdminDashboard, AnyDashboard, Dashboard, HistoryRow, LevelRead, StudentDashboard, TeacherDashboard
from .transaction import (
    GroupGrantCreate,
    GroupGrantStatus,
    GroupGrantSummary,
    HistoryEntry,
    LedgerStudent,
    MemberOutcome,
    TalentGrantCreate,
    TransactionReceipt,
)
from .user import BalanceRead, Groupmate, GroupMemberRef, Identity, StudentSummary, StudentTalentInfo

__all__ = [
    "AdminDashboard",
    "AnyDashboard",
    "BalanceRead",
    "Dashboard",
    "ErrorKind",
    "GENERIC_ERROR_MESSAGE",
    "GroupGrantCreate",
    "GroupGrantStatus",
    "GroupGrantSummary",
    "GroupMemberRef",
    "Groupmate",
    "HistoryEntry",
    "HistoryRow",
    "Identity",
    "LedgerStudent",
    "LevelRead",
    "LoginRequest",
    "MemberOutcome",
    "ServiceResult",
    "StudentDashboard",
    "StudentSummary",
    "StudentTalentInfo",
    "TalentGrantCreate",
    "TeacherDashboard",
    "TransactionReceipt",
]
