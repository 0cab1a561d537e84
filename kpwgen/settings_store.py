"""TTL-bound persistence for the advanced generation parameters.

Only :class:`AdvancedParams` is ever written here; the master key has no
path into this module.  Expiry is lazy: a stale record stays in storage
until the next :meth:`PersistedSettingsStore.read` notices and deletes it.
"""

import json
import logging
import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from kpwgen import config
from kpwgen.models import AdvancedParams

logger = logging.getLogger(__name__)


# Returned by a backend whose whole file is unreadable; never valid JSON.
UNREADABLE = "<unreadable storage file>"


def now_ms() -> int:
    return int(time.time() * 1000)


# ── Key-value backends ─────────────────────────────────────────────────────


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage; lives as long as the process."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """All keys in one JSON object on disk; writes replace the file atomically.

    A file that is not a JSON object is unreadable as a whole: every key in
    it reads back as :data:`UNREADABLE`, and any write replaces the file.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else config.storage_file()
        self._lock = threading.Lock()

    def _load(self) -> dict | None:
        """Parsed file contents, ``{}`` when absent, ``None`` when unreadable."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable storage file %s (%s)", self.path, type(exc).__name__)
            return None
        if not isinstance(data, dict):
            logger.warning("Unreadable storage file %s: not a JSON object", self.path)
            return None
        return data

    def _dump(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self.path)

    def get(self, key: str) -> str | None:
        with self._lock:
            data = self._load()
        if data is None:
            return UNREADABLE
        if key not in data:
            return None
        value = data[key]
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load() or {}
            data[key] = value
            self._dump(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data is None:
                self._dump({})
            elif key in data:
                del data[key]
                self._dump(data)


# ── Stored record ──────────────────────────────────────────────────────────


class StoredAdvancedRecord(BaseModel):
    """On-disk envelope.  Timestamps are epoch milliseconds."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: Literal[1] = Field(default=config.SCHEMA_VERSION, alias="schemaVersion")
    saved_at: int = Field(alias="savedAt")
    expires_at: int | None = Field(default=None, alias="expiresAt")
    data: AdvancedParams


@dataclass(frozen=True)
class ReadResult:
    status: Literal["empty", "ok", "expired", "corrupt"]
    record: StoredAdvancedRecord | None = None
    expired_at: int | None = None

    @property
    def params(self) -> AdvancedParams | None:
        return self.record.data if self.record else None


EMPTY = ReadResult("empty")
CORRUPT = ReadResult("corrupt")


# ── Store ──────────────────────────────────────────────────────────────────


class PersistedSettingsStore:
    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        key: str = config.STORAGE_KEY,
        clock: Callable[[], int] = now_ms,
    ):
        self.storage = storage if storage is not None else JsonFileStorage()
        self.key = key
        self._clock = clock
        self._lock = threading.Lock()

    def save(self, data: AdvancedParams, ttl: timedelta | None) -> StoredAdvancedRecord:
        """Write *data*, overwriting any previous record.

        ``ttl=None`` means the record never expires.
        """
        now = self._clock()
        expires_at = None
        if ttl is not None:
            ttl_ms = ttl // timedelta(milliseconds=1)
            if ttl_ms < 1:
                raise ValueError("TTL must be at least one millisecond")
            expires_at = now + ttl_ms

        record = StoredAdvancedRecord(saved_at=now, expires_at=expires_at, data=data)
        with self._lock:
            self.storage.set(self.key, record.model_dump_json(by_alias=True))
        logger.info("Saved advanced settings (expires_at=%s)", expires_at)
        return record

    def read(self) -> ReadResult:
        with self._lock:
            raw = self.storage.get(self.key)
            if not raw:
                return EMPTY

            try:
                record = StoredAdvancedRecord.model_validate_json(raw)
            except PydanticValidationError:
                self.storage.delete(self.key)
                logger.warning("Discarded corrupt settings record at %r", self.key)
                return CORRUPT

            if record.expires_at is not None and self._clock() > record.expires_at:
                self.storage.delete(self.key)
                logger.info("Discarded expired settings record at %r", self.key)
                return ReadResult("expired", expired_at=record.expires_at)

        return ReadResult("ok", record=record)

    def clear(self) -> None:
        with self._lock:
            self.storage.delete(self.key)
        logger.info("Cleared settings record at %r", self.key)
