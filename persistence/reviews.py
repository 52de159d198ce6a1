from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol

from pydantic import BaseModel, Field, ValidationError

from .adapter import StorageAdapter
from .errors import DeserializationError, MissingKeyError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewRecord(BaseModel):
    reviewer_id: str = Field(min_length=1)
    rating: float
    comment: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_stored(cls, doc: Mapping[str, Any]) -> "ReviewRecord":
        return cls.model_validate(doc)

    def to_stored(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ReviewStateRepository(Protocol):
    def add_review(
        self,
        *,
        reviewer_id: str,
        rating: float,
        comment: str,
        created_at: datetime | None = None,
    ) -> tuple[str, ReviewRecord]:
        ...

    def get_review(self, review_id: str) -> ReviewRecord | None:
        ...

    def update_comment(self, review_id: str, comment: str) -> ReviewRecord:
        ...

    def delete_review(self, review_id: str) -> bool:
        ...

    def list_reviews(self, review_ids: list[str]) -> list[ReviewRecord]:
        ...


class ReviewRepository(ReviewStateRepository):
    """
    Review records stored through a StorageAdapter, one key per review:

    - <prefix><id>        -> {"reviewer_id": ..., "rating": ..., "comment": ..., "created_at": ...}
    - <prefix>#next_id    -> id counter

    Review ids are positive decimal integers, so no review key can collide with
    the counter key. Id allocation and the first write happen under one lock, so
    threads sharing this repository never hand out the same id. Separate
    processes sharing the same store still can; the adapter makes no
    cross-process guarantees.
    """

    def __init__(self, adapter: StorageAdapter, *, prefix: str = "reviews:") -> None:
        self._adapter = adapter
        self._prefix = prefix
        self._counter_key = f"{prefix}#next_id"
        self._write_lock = threading.Lock()

    def _key(self, review_id: str) -> str | None:
        if not (review_id.isascii() and review_id.isdigit()) or review_id.startswith("0"):
            return None
        return f"{self._prefix}{review_id}"

    @staticmethod
    def _decode(key: str, doc: Any) -> ReviewRecord:
        if not isinstance(doc, dict):
            raise DeserializationError(key, f"expected a review object, got {type(doc).__name__}")
        try:
            return ReviewRecord.from_stored(doc)
        except ValidationError as e:
            raise DeserializationError(key, str(e)) from e

    def add_review(
        self,
        *,
        reviewer_id: str,
        rating: float,
        comment: str,
        created_at: datetime | None = None,
    ) -> tuple[str, ReviewRecord]:
        fields: dict[str, Any] = {"reviewer_id": reviewer_id, "rating": rating, "comment": comment}
        if created_at is not None:
            fields["created_at"] = created_at
        # Validate before allocating an id so bad input never burns one.
        record = ReviewRecord.model_validate(fields)

        with self._write_lock:
            review_id = str(self._adapter.increment_item(self._counter_key))
            self._adapter.set_item(f"{self._prefix}{review_id}", record.to_stored())
        return review_id, record

    def get_review(self, review_id: str) -> ReviewRecord | None:
        key = self._key(review_id)
        if key is None:
            return None
        doc = self._adapter.get_item(key)
        if doc is None:
            return None
        return self._decode(key, doc)

    def update_comment(self, review_id: str, comment: str) -> ReviewRecord:
        key = self._key(review_id)
        if key is None:
            raise MissingKeyError(f"{self._prefix}{review_id}")

        def _apply(doc: Any) -> dict[str, Any]:
            record = self._decode(key, doc)
            return ReviewRecord.model_validate({**record.model_dump(), "comment": comment}).to_stored()

        with self._write_lock:
            return ReviewRecord.from_stored(self._adapter.update_item(key, _apply))

    def delete_review(self, review_id: str) -> bool:
        key = self._key(review_id)
        if key is None:
            return False
        with self._write_lock:
            if not self._adapter.has_item(key):
                return False
            self._adapter.remove_item(key)
        return True

    def list_reviews(self, review_ids: list[str]) -> list[ReviewRecord]:
        out: list[ReviewRecord] = []
        for review_id in review_ids:
            record = self.get_review(review_id)
            if record is not None:
                out.append(record)
        return out
