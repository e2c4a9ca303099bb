"""
List Storage Backends

Each backend keeps named ordered lists of serialized entries, head first.
EventLogStore is the only caller; it never touches a backend's medium
directly.
"""

import contextlib
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

import redis

from .errors import StorageUnavailable

logger = logging.getLogger(__name__)


class ListStorage(ABC):
    """Ordered list abstraction over a key-addressed store."""

    @abstractmethod
    def push_head(self, key: str, value: str) -> int:
        """Prepend ``value`` and return the new length."""

    @abstractmethod
    def trim(self, key: str, keep: int) -> None:
        """Drop every entry past the first ``keep``."""

    @abstractmethod
    def read(self, key: str, count: Optional[int] = None) -> List[Any]:
        """Return the first ``count`` entries (all entries when ``None``)."""

    @abstractmethod
    def replace_at(self, key: str, index: int, expected: str, value: str) -> bool:
        """Replace the entry at ``index`` only if it still equals ``expected``.

        Returns False, leaving the list untouched, when the index is out of
        range or another writer changed or shifted the entry since it was read.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the whole list."""

    def push_head_bounded(self, key: str, value: str, max_len: int) -> None:
        """Prepend ``value`` and trim the list to ``max_len`` entries.

        The default runs the two steps in order, so an interruption in
        between leaves the list oversized until the next insert trims it.
        Backends that can apply both steps as one unit override this.
        """
        self.push_head(key, value)
        self.trim(key, max_len)


class InMemoryListStorage(ListStorage):
    """Process-local storage, used for tests and single-process runs."""

    def __init__(self):
        self._lists: Dict[str, List[Any]] = {}
        self._lock = Lock()

    def push_head(self, key: str, value: str) -> int:
        with self._lock:
            items = self._lists.setdefault(key, [])
            items.insert(0, value)
            return len(items)

    def trim(self, key: str, keep: int) -> None:
        with self._lock:
            if key in self._lists:
                del self._lists[key][keep:]

    def push_head_bounded(self, key: str, value: str, max_len: int) -> None:
        with self._lock:
            items = [value] + self._lists.get(key, [])
            self._lists[key] = items[:max_len]

    def read(self, key: str, count: Optional[int] = None) -> List[Any]:
        with self._lock:
            items = self._lists.get(key, [])
            return list(items if count is None else items[:count])

    def replace_at(self, key: str, index: int, expected: str, value: str) -> bool:
        with self._lock:
            items = self._lists.get(key, [])
            if not 0 <= index < len(items) or items[index] != expected:
                return False
            items[index] = value
            return True

    def delete(self, key: str) -> None:
        with self._lock:
            self._lists.pop(key, None)


class JsonFileListStorage(ListStorage):
    """Stores all lists in one JSON file, rewritten atomically on change."""

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)
        self._lock = Lock()

    def _load(self) -> Dict[str, List[Any]]:
        try:
            data = json.loads(self.file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.warning("Log file %s is not valid JSON, starting empty", self.file_path)
            return {}
        except OSError as exc:
            raise StorageUnavailable(f"cannot read {self.file_path}: {exc}") from exc
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, List[Any]]) -> None:
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.file_path.parent, prefix=self.file_path.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_name, self.file_path)
            except Exception:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageUnavailable(f"cannot write {self.file_path}: {exc}") from exc

    def push_head(self, key: str, value: str) -> int:
        with self._lock:
            data = self._load()
            items = [value] + data.get(key, [])
            data[key] = items
            self._save(data)
            return len(items)

    def trim(self, key: str, keep: int) -> None:
        with self._lock:
            data = self._load()
            if key in data and len(data[key]) > keep:
                data[key] = data[key][:keep]
                self._save(data)

    def push_head_bounded(self, key: str, value: str, max_len: int) -> None:
        with self._lock:
            data = self._load()
            data[key] = ([value] + data.get(key, []))[:max_len]
            self._save(data)

    def read(self, key: str, count: Optional[int] = None) -> List[Any]:
        with self._lock:
            items = self._load().get(key, [])
        return items if count is None else items[:count]

    def replace_at(self, key: str, index: int, expected: str, value: str) -> bool:
        with self._lock:
            data = self._load()
            items = data.get(key, [])
            if not 0 <= index < len(items) or items[index] != expected:
                return False
            items[index] = value
            self._save(data)
            return True

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._save(data)


class RedisListStorage(ListStorage):
    """Redis lists: LPUSH/LTRIM/LRANGE/LINDEX/LSET/DEL."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str, timeout_seconds: float = 5.0) -> "RedisListStorage":
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        return cls(client)

    def push_head(self, key: str, value: str) -> int:
        try:
            return self.client.lpush(key, value)
        except redis.exceptions.RedisError as exc:
            raise StorageUnavailable(f"redis LPUSH failed: {exc}") from exc

    def trim(self, key: str, keep: int) -> None:
        try:
            self.client.ltrim(key, 0, keep - 1)
        except redis.exceptions.RedisError as exc:
            raise StorageUnavailable(f"redis LTRIM failed: {exc}") from exc

    def push_head_bounded(self, key: str, value: str, max_len: int) -> None:
        # MULTI/EXEC so readers never see the list past max_len
        try:
            pipe = self.client.pipeline(transaction=True)
            pipe.lpush(key, value)
            pipe.ltrim(key, 0, max_len - 1)
            pipe.execute()
        except redis.exceptions.RedisError as exc:
            raise StorageUnavailable(f"redis LPUSH/LTRIM failed: {exc}") from exc

    def read(self, key: str, count: Optional[int] = None) -> List[Any]:
        if count is not None and count <= 0:
            return []
        stop = -1 if count is None else count - 1
        try:
            return self.client.lrange(key, 0, stop)
        except redis.exceptions.RedisError as exc:
            raise StorageUnavailable(f"redis LRANGE failed: {exc}") from exc

    def replace_at(self, key: str, index: int, expected: str, value: str) -> bool:
        # WATCH/MULTI: EXEC aborts if any other client touched the list
        try:
            with self.client.pipeline(transaction=True) as pipe:
                pipe.watch(key)
                if pipe.lindex(key, index) != expected:
                    pipe.unwatch()
                    return False
                pipe.multi()
                pipe.lset(key, index, value)
                pipe.execute()
                return True
        except redis.exceptions.WatchError:
            return False
        except redis.exceptions.RedisError as exc:
            raise StorageUnavailable(f"redis LSET failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.exceptions.RedisError as exc:
            raise StorageUnavailable(f"redis DEL failed: {exc}") from exc


def create_storage(backend: str, file_path: Optional[Path] = None,
                   redis_url: Optional[str] = None,
                   timeout_seconds: float = 5.0) -> ListStorage:
    """Build the configured storage backend.

    Args:
        backend: One of ``memory``, ``file`` or ``redis``
        file_path: Log file for the ``file`` backend
        redis_url: Connection URL for the ``redis`` backend
        timeout_seconds: Socket timeout for network backends

    Returns:
        A ListStorage instance
    """
    backend = (backend or "file").lower()
    if backend == "memory":
        return InMemoryListStorage()
    if backend == "file":
        if file_path is None:
            raise ValueError("file backend requires file_path")
        return JsonFileListStorage(file_path)
    if backend == "redis":
        if not redis_url:
            raise ValueError("redis backend requires redis_url")
        return RedisListStorage.from_url(redis_url, timeout_seconds)
    raise ValueError(f"Unknown storage backend: {backend}")
