from __future__ import annotations


class StorageError(Exception):
    """Base class for errors raised by StorageAdapter."""


class InvalidKeyError(StorageError, ValueError):
    def __init__(self, key: object):
        super().__init__(f"Storage keys must be non-empty strings, got {key!r}")
        self.key = key


class InvalidWriteError(StorageError, ValueError):
    """Raised when a value cannot be stored (None, or not JSON-representable)."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Cannot store value under {key!r}: {reason}")
        self.key = key
        self.reason = reason


class MissingKeyError(StorageError, LookupError):
    def __init__(self, key: str):
        super().__init__(f'Item with key "{key}" does not exist')
        self.key = key


class DeserializationError(StorageError, ValueError):
    """Stored text under key is not valid JSON."""

    def __init__(self, key: str, detail: str):
        super().__init__(f"Stored value under {key!r} is not valid JSON: {detail}")
        self.key = key


class NonNumericValueError(StorageError, TypeError):
    def __init__(self, key: str, value: object):
        super().__init__(f"Cannot do arithmetic on {type(value).__name__} stored under {key!r}")
        self.key = key
        self.value = value
