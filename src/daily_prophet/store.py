"""Key-value stores that hold serialized editions."""

from __future__ import annotations

import os
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Dict, Iterator, Optional, Protocol

import redis


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def put(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store for tests and single-process runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._guard = Lock()

    def get(self, key: str) -> Optional[str]:
        with self._guard:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._guard:
            self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


_UNSAFE_CHARS = re.compile(r"[^\w.-]+")

_PATH_LOCKS: dict[str, Lock] = {}
_PATH_LOCKS_GUARD = Lock()


@contextmanager
def _writer_lock(path: Path) -> Iterator[None]:
    """Serialize writers of one file within this process."""
    key = str(path.resolve())
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.setdefault(key, Lock())
    with lock:
        yield


class FileStore:
    """
    One file per key under `root`.

    Values are written to a temp file in the same directory and renamed over
    the target, so a reader sees either the previous value or the new one.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root).expanduser()

    def path_for(self, key: str) -> Path:
        safe = _UNSAFE_CHARS.sub("_", key).strip("_") or "_"
        return self.root / f"{safe}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def put(self, key: str, value: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with _writer_lock(path):
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise


class RedisStore:
    """Store backed by plain Redis GET/SET; no expiry is set on keys."""

    def __init__(self, url: str = "redis://localhost:6379/0", client: Optional[redis.Redis] = None):
        self.client = client or redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def put(self, key: str, value: str) -> None:
        self.client.set(key, value)

    def close(self) -> None:
        self.client.close()


def build_store(settings) -> KeyValueStore:
    """Pick the store backend named by `settings.store_backend`."""
    backend = settings.store_backend.lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "file":
        return FileStore(settings.store_dir)
    if backend == "redis":
        return RedisStore(settings.redis_url)
    raise ValueError(
        f"Unknown store backend {settings.store_backend!r}; use memory, file or redis."
    )
