"""
Session-scoped key/value storage for the storefront.

The cart never lives in a module global: whatever needs it receives a
``SessionStore``. ``InMemorySessionStore`` lasts as long as the object
(one browsing session, or one test). ``JsonFileSessionStore`` keeps the
values in a JSON file so a session survives a process restart.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, Optional


class SessionStore:
    """Minimal string key/value interface, like a browser's sessionStorage."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileSessionStore(SessionStore):
    """Session values persisted in a JSON object on disk.

    Parameters
    ----------
    path : Path
        File holding a mapping of keys to string values. A missing file
        is an empty session; the parent directory is created on the first
        write.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        # Serializes read-modify-write cycles within this process
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._save(data)
