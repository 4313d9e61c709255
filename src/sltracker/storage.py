"""Key-value store shared by the app and widget processes."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_STORE_DIR = os.environ.get(
    "SLTRACKER_STORE_DIR", str(Path.home() / ".sltracker")
)


class KeyValueStore(Protocol):
    """Store with single-key atomic get/set of JSON-serialisable values."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class InMemoryStore:
    """Process-local store, used in tests and single-process setups."""

    def __init__(self, initial: Dict[str, Any] = None):
        self._lock = threading.Lock()
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            raw = self._data.get(key)
        # Round-trip through JSON so callers never share mutable state
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        raw = json.dumps(value)
        with self._lock:
            self._data[key] = raw


class JSONFileStore:
    """
    One JSON file per key inside a shared directory.

    Writes go to a temporary file in the same directory which then replaces the
    key's file with ``os.replace``, so another process reading concurrently sees
    either the previous or the new value. Keys never share a file, so writers of
    different keys cannot clobber each other; writers of the same key are
    last-writer-wins.
    """

    def __init__(self, directory: str = None):
        self.directory = Path(directory or DEFAULT_STORE_DIR)
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable value for '{key}' in {path}: {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        raw = json.dumps(value)
        with self._lock:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.directory), prefix=f".{key}-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(raw)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except BaseException:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid store key '{key}'")
        return self.directory / f"{key}.json"
