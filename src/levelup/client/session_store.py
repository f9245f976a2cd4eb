"""Device-local persistence of the signed-in identity."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

from pydantic import ValidationError

from ..core.config import get_settings
from ..schemas import Identity

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Storage that lives only as long as the process."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """One UTF-8 file per key inside ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SessionStore:
    """Holds the identity between runs until logout.

    There is no expiry. A record that cannot be parsed is treated as no
    session and removed.
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None, key: Optional[str] = None) -> None:
        settings = get_settings()
        self.storage = storage if storage is not None else FileStorage(settings.session_storage_dir)
        self.key = key or settings.session_storage_key

    def save(self, identity: Identity) -> None:
        self.storage.set(self.key, identity.model_dump_json())

    def load(self) -> Optional[Identity]:
        try:
            raw = self.storage.get(self.key)
            if raw is None:
                return None
            return Identity.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError):
            logger.warning("discarding unreadable session record %s", self.key)
            self.clear()
            return None

    def clear(self) -> None:
        self.storage.remove(self.key)
