"""Client-side session handling and API access."""

from .session_store import FileStorage, MemoryStorage, SessionStore
from .talent_client import TalentClient

__all__ = ["FileStorage", "MemoryStorage", "SessionStore", "TalentClient"]
