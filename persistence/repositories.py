from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Protocol

from .reviews import ReviewRecord, ReviewStateRepository


class AsyncReviewRepository(Protocol):
    async def add_review(
        self,
        *,
        reviewer_id: str,
        rating: float,
        comment: str,
        created_at: datetime | None = None,
    ) -> tuple[str, ReviewRecord]: ...

    async def get_review(self, review_id: str) -> ReviewRecord | None: ...
    async def update_comment(self, review_id: str, comment: str) -> ReviewRecord: ...
    async def delete_review(self, review_id: str) -> bool: ...
    async def list_reviews(self, review_ids: list[str]) -> list[ReviewRecord]: ...


class AsyncStoredReviewRepository(AsyncReviewRepository):
    """
    Async wrapper around the adapter-backed review repository.
    Uses asyncio.to_thread so a disk-backed store never blocks the event loop.
    """

    def __init__(self, repo: ReviewStateRepository) -> None:
        self._repo = repo

    async def add_review(
        self,
        *,
        reviewer_id: str,
        rating: float,
        comment: str,
        created_at: datetime | None = None,
    ) -> tuple[str, ReviewRecord]:
        return await asyncio.to_thread(
            lambda: self._repo.add_review(
                reviewer_id=reviewer_id,
                rating=rating,
                comment=comment,
                created_at=created_at,
            )
        )

    async def get_review(self, review_id: str) -> ReviewRecord | None:
        return await asyncio.to_thread(self._repo.get_review, review_id)

    async def update_comment(self, review_id: str, comment: str) -> ReviewRecord:
        return await asyncio.to_thread(self._repo.update_comment, review_id, comment)

    async def delete_review(self, review_id: str) -> bool:
        return await asyncio.to_thread(self._repo.delete_review, review_id)

    async def list_reviews(self, review_ids: list[str]) -> list[ReviewRecord]:
        return await asyncio.to_thread(self._repo.list_reviews, review_ids)
