from __future__ import annotations

import logging
import re
from dataclasses import replace
from pathlib import Path

import orjson
from filelock import FileLock

from adapters.filesystem.json_utils import load_json_if_exists, write_json_atomic
from domain.models import CacheEntry
from domain.ports.cache import LayoutCacheStore

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"[^a-zA-Z0-9_-]+")


class FileSystemLayoutCacheRepository(LayoutCacheStore):
    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def read_entry(self, key: str) -> CacheEntry | None:
        return self._load(self._entry_path(key))

    def upsert_entry(self, entry: CacheEntry) -> CacheEntry:
        path = self._entry_path(entry.cache_key)
        with FileLock(str(self._lock_path(path))):
            previous = self._load(path)
            if previous is not None:
                entry = replace(entry, created_at=previous.created_at)
            write_json_atomic(path, entry.to_dict())
        return entry

    def delete_entry(self, key: str) -> None:
        path = self._entry_path(key)
        with FileLock(str(self._lock_path(path))):
            path.unlink(missing_ok=True)

    def _load(self, path: Path) -> CacheEntry | None:
        # An unreadable file counts as a cold cache and is replaced by the next upsert.
        try:
            payload = load_json_if_exists(path)
            if payload is None:
                return None
            return CacheEntry.from_dict(payload)
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Ignoring unreadable layout cache file %s: %s", path, exc)
            return None

    def _entry_path(self, key: str) -> Path:
        safe_key = _KEY_RE.sub("_", key).strip("_") or "layout"
        return self._directory / f"{safe_key}.json"

    def _lock_path(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        return path.with_suffix(f"{path.suffix}.lock")
