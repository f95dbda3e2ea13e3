"""
Persisted client state: SessionStore interface plus in-memory and file stores.

Why: The bearer token and the cached learner id must survive between runs of
the client, but nothing else should reach into storage ad hoc. Components get
a store injected and only use get/set/clear.

Security: Values are stored as plain strings. The file store writes with
0600 permissions; the token is not encrypted beyond that.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Protocol
import json
import logging
import os


LOG = logging.getLogger(__name__)

TOKEN_KEY = "token"
LEARNER_ID_KEY = "learnerId"


class SessionStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def clear(self, key: str) -> None:
        ...


class InMemorySessionStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class FileSessionStore:
    """JSON file backed store used by the CLI.

    The file holds a flat object of string values. A missing file is an empty
    store; a corrupt file is treated as empty and overwritten on next write.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOG.warning("Ignoring unreadable state file %s: %s", self.path, type(exc).__name__)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.chmod(tmp, 0o600)
        tmp.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def clear(self, key: str) -> None:
        data = self._read()
        if key in data:
            data.pop(key)
            self._write(data)


__all__ = [
    "TOKEN_KEY",
    "LEARNER_ID_KEY",
    "SessionStore",
    "InMemorySessionStore",
    "FileSessionStore",
]
