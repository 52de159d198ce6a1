from __future__ import annotations

import logging
from pathlib import Path

from json_store import atomic_write_json, read_json

from .interfaces import PersistentKVStore
from .locks import GLOBAL_PATH_LOCKS

logger = logging.getLogger(__name__)


class DiskKVStore(PersistentKVStore):
    """
    Keeps every binding in a single JSON object on disk at a fixed path:

      { "<key>": "<serialized value>", ... }

    - A missing or empty file is an empty store.
    - Each call loads, changes and atomically rewrites the whole document while
      holding the per-path lock, so single calls never interleave in-process.
    - A file that is not a JSON object of strings raises ValueError instead of
      being overwritten.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        raw = read_json(self._path)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        for k, v in raw.items():
            if not isinstance(v, str):
                raise ValueError(f"{self._path} holds a non-string value under {k!r}")
        return raw

    def _save(self, doc: dict[str, str]) -> None:
        atomic_write_json(self._path, doc)

    def read(self, key: str) -> str | None:
        with GLOBAL_PATH_LOCKS.locked(self._path):
            return self._load().get(key)

    def write(self, key: str, value: str) -> None:
        with GLOBAL_PATH_LOCKS.locked(self._path):
            doc = self._load()
            doc[key] = value
            self._save(doc)

    def delete(self, key: str) -> None:
        with GLOBAL_PATH_LOCKS.locked(self._path):
            doc = self._load()
            if key not in doc:
                return
            del doc[key]
            self._save(doc)

    def clear_all(self) -> None:
        with GLOBAL_PATH_LOCKS.locked(self._path):
            self._save({})
        logger.debug("DISK STORE CLEARED: %s", self._path)

    def keys(self) -> list[str]:
        with GLOBAL_PATH_LOCKS.locked(self._path):
            return sorted(self._load())

    def __len__(self) -> int:
        return len(self.keys())
