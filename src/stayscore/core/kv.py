from __future__ import annotations

import logging
import os
import threading
from hashlib import sha256
from pathlib import Path
from typing import Protocol

"""
Small string key-value stores.

The engine never talks to a concrete database; anything persisted (today only
the single-slot search intent) goes through the `KeyValueStore` protocol:
- `get(key)` returns the stored string or None,
- `set(key, value)` overwrites the slot (last writer wins).

Two implementations ship with the package:
- `InMemoryKeyValueStore` for tests and embedding in a long-running process,
- `FileKeyValueStore`, one file per key under a base directory (keys are hashed
  to avoid filesystem path issues; writes go through a temp file + atomic replace).
"""

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """A process-local dict guarded by a lock."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


class FileKeyValueStore:
    """A filesystem-backed store keyed by (namespace, key)."""

    def __init__(self, base_dir: Path, namespace: str = "kv"):
        self._base_dir = base_dir
        self._namespace = namespace

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _key_path(self, key: str) -> Path:
        """Return the file path for a key (hash-based)."""
        digest = sha256(f"{self._namespace}:{key}".encode("utf-8")).hexdigest()
        return self._base_dir / self._namespace / f"{digest}.txt"

    def get(self, key: str) -> str | None:
        path = self._key_path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Unreadable key-value entry %s: %s", path, exc)
            return None

    def set(self, key: str, value: str) -> None:
        """Write `value` for `key`.

        Notes:
        - Writes via a temporary file + atomic replace so readers never see a partial value.
        """
        path = self._key_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(f".{os.getpid()}.{threading.get_ident()}.tmp")
        try:
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        finally:
            tmp.unlink(missing_ok=True)
