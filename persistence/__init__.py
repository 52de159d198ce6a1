from __future__ import annotations

from typing import TYPE_CHECKING

from .adapter import StorageAdapter
from .disk_store import DiskKVStore
from .errors import (
    DeserializationError,
    InvalidKeyError,
    InvalidWriteError,
    MissingKeyError,
    NonNumericValueError,
    StorageError,
)
from .interfaces import PersistentKVStore
from .memory_store import InMemoryKVStore
from .repositories import AsyncReviewRepository, AsyncStoredReviewRepository
from .reviews import ReviewRecord, ReviewRepository, ReviewStateRepository

if TYPE_CHECKING:
    from settings import Settings


def create_store(settings: "Settings") -> PersistentKVStore:
    if settings.backend == "memory":
        return InMemoryKVStore()
    if settings.backend == "disk":
        return DiskKVStore(settings.storage_path)
    raise ValueError(f"Unknown storage backend: {settings.backend!r}")


def create_adapter(settings: "Settings") -> StorageAdapter:
    return StorageAdapter(create_store(settings), log_operations=settings.debug_log_storage)


__all__ = [
    "PersistentKVStore",
    "InMemoryKVStore",
    "DiskKVStore",
    "StorageAdapter",
    "StorageError",
    "InvalidKeyError",
    "InvalidWriteError",
    "MissingKeyError",
    "DeserializationError",
    "NonNumericValueError",
    "ReviewRecord",
    "ReviewRepository",
    "ReviewStateRepository",
    "AsyncReviewRepository",
    "AsyncStoredReviewRepository",
    "create_store",
    "create_adapter",
]
