from __future__ import annotations

from typing import Protocol


class PersistentKVStore(Protocol):
    """
    Minimal string-only key-value store, the shape of a browser's localStorage:
    every key maps to one string, and there is nothing else.
    """

    def read(self, key: str) -> str | None:
        """Return the string stored under key, or None when there is no binding."""
        ...

    def write(self, key: str, value: str) -> None:
        """Bind key to value, replacing any previous binding."""
        ...

    def delete(self, key: str) -> None:
        """Drop the binding for key (no-op if absent)."""
        ...

    def clear_all(self) -> None:
        """Drop every binding."""
        ...
