from __future__ import annotations

import json
import logging
from typing import Any, Callable

from json_store import decode_value, encode_value

from .errors import (
    DeserializationError,
    InvalidKeyError,
    InvalidWriteError,
    MissingKeyError,
    NonNumericValueError,
)
from .interfaces import PersistentKVStore

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    # bool is a subclass of int in Python; a stored true/false is not a counter.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class StorageAdapter:
    """
    JSON-valued view over a string-only PersistentKVStore.

    The adapter keeps no state besides the store reference: every read goes to
    the store, every write replaces the whole binding. update_item and the
    increment/decrement helpers are read-modify-write sequences and are not
    atomic with respect to other writers sharing the same store.
    """

    def __init__(self, store: PersistentKVStore, *, log_operations: bool = False) -> None:
        self._store = store
        self._log_level = logging.INFO if log_operations else logging.DEBUG

    def _log(self, msg: str, *args: Any) -> None:
        logger.log(self._log_level, msg, *args)

    @staticmethod
    def _check_key(key: Any) -> str:
        if not isinstance(key, str) or not key:
            raise InvalidKeyError(key)
        return key

    def get_item(self, key: str) -> Any | None:
        key = self._check_key(key)
        raw = self._store.read(key)
        if raw is None:
            self._log("STORAGE GET: key=%s (absent)", key)
            return None
        try:
            value = decode_value(raw)
        except json.JSONDecodeError as e:
            logger.warning("STORAGE GET: corrupt value under key=%s (%d chars): %s", key, len(raw), e)
            raise DeserializationError(key, str(e)) from e
        self._log("STORAGE GET: key=%s", key)
        return value

    def set_item(self, key: str, value: Any) -> None:
        key = self._check_key(key)
        if value is None:
            raise InvalidWriteError(key, "Cannot store undefined or null value")
        try:
            text = encode_value(value)
        except (TypeError, ValueError) as e:
            raise InvalidWriteError(key, str(e)) from e
        self._store.write(key, text)
        self._log("STORAGE SET: key=%s size=%d", key, len(text))

    def remove_item(self, key: str) -> None:
        key = self._check_key(key)
        self._store.delete(key)
        self._log("STORAGE REMOVE: key=%s", key)

    def clear(self) -> None:
        self._store.clear_all()
        self._log("STORAGE CLEAR")

    def has_item(self, key: str) -> bool:
        key = self._check_key(key)
        return self._store.read(key) is not None

    def update_item(self, key: str, update_fn: Callable[[Any], Any]) -> Any:
        """
        Replace the value under key with update_fn(current_value).

        Raises MissingKeyError when key has no binding; update never creates one.
        Returns the value that was written.
        """
        current = self.get_item(key)
        if current is None:
            raise MissingKeyError(key)
        updated = update_fn(current)
        self.set_item(key, updated)
        return updated

    def increment_item(self, key: str, delta: int | float = 1) -> int | float:
        """
        Add delta to the number under key (absent counts as 0), store and return it.

        A stored value or delta that is not a number raises NonNumericValueError
        and leaves the binding untouched.
        """
        return self._apply_delta(key, delta)

    def decrement_item(self, key: str, delta: int | float = 1) -> int | float:
        if not _is_number(delta):
            raise NonNumericValueError(key, delta)
        return self._apply_delta(key, -delta)

    def _apply_delta(self, key: str, delta: int | float) -> int | float:
        if not _is_number(delta):
            raise NonNumericValueError(key, delta)
        current = self.get_item(key)
        if current is None:
            current = 0
        elif not _is_number(current):
            raise NonNumericValueError(key, current)
        updated = current + delta
        self.set_item(key, updated)
        return updated
