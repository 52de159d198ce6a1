from __future__ import annotations

import contextlib
import logging
from typing import Any, Iterator

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, ValidationError

from persistence import (
    AsyncStoredReviewRepository,
    DeserializationError,
    InvalidKeyError,
    InvalidWriteError,
    MissingKeyError,
    NonNumericValueError,
    ReviewRepository,
    StorageAdapter,
)
from settings import get_settings

SETTINGS = get_settings()
DEBUG_LOG_REQUESTS = SETTINGS.debug_log_requests

logger = logging.getLogger(__name__)

router = APIRouter()


class PutItemBody(BaseModel):
    value: Any


class DeltaBody(BaseModel):
    delta: int | float = 1


class NewReviewBody(BaseModel):
    reviewer_id: str
    rating: float
    comment: str


class CommentBody(BaseModel):
    comment: str


def _adapter(request: Request) -> StorageAdapter:
    return request.app.state.storage_adapter


def _reviews(request: Request) -> AsyncStoredReviewRepository:
    return request.app.state.review_repository


def build_review_repository(adapter: StorageAdapter) -> AsyncStoredReviewRepository:
    return AsyncStoredReviewRepository(ReviewRepository(adapter, prefix=SETTINGS.review_prefix))


@contextlib.contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except NonNumericValueError as e:
        raise HTTPException(status_code=409, detail="non_numeric_value") from e
    except DeserializationError as e:
        raise HTTPException(status_code=409, detail="corrupt_value") from e
    except (InvalidKeyError, InvalidWriteError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


# Item routes are plain functions: FastAPI runs them in its threadpool, so
# DiskKVStore file I/O stays off the event loop.


@router.get("/items/{key}")
def get_item(key: str, request: Request):
    with _storage_errors():
        value = _adapter(request).get_item(key)
    if value is None:
        raise HTTPException(status_code=404, detail="not_found")
    return {"key": key, "value": value}


@router.head("/items/{key}")
def head_item(key: str, request: Request):
    with _storage_errors():
        present = _adapter(request).has_item(key)
    return Response(status_code=200 if present else 404)


@router.put("/items/{key}")
def put_item(key: str, body: PutItemBody, request: Request):
    if DEBUG_LOG_REQUESTS:
        logger.info("PUT ITEM: key=%s type=%s", key, type(body.value).__name__)
    with _storage_errors():
        _adapter(request).set_item(key, body.value)
    return {"key": key, "value": body.value}


@router.delete("/items/{key}", status_code=204)
def delete_item(key: str, request: Request):
    with _storage_errors():
        _adapter(request).remove_item(key)
    return Response(status_code=204)


@router.delete("/items", status_code=204)
def clear_items(request: Request):
    if DEBUG_LOG_REQUESTS:
        logger.info("CLEAR ITEMS")
    _adapter(request).clear()
    return Response(status_code=204)


@router.post("/items/{key}/increment")
def increment_item(key: str, request: Request, body: DeltaBody | None = None):
    delta = body.delta if body is not None else 1
    with _storage_errors():
        value = _adapter(request).increment_item(key, delta)
    return {"key": key, "value": value}


@router.post("/items/{key}/decrement")
def decrement_item(key: str, request: Request, body: DeltaBody | None = None):
    delta = body.delta if body is not None else 1
    with _storage_errors():
        value = _adapter(request).decrement_item(key, delta)
    return {"key": key, "value": value}


@router.post("/reviews")
async def create_review(body: NewReviewBody, request: Request):
    try:
        with _storage_errors():
            review_id, record = await _reviews(request).add_review(
                reviewer_id=body.reviewer_id,
                rating=body.rating,
                comment=body.comment,
            )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="invalid_review") from e
    return {"id": review_id, "review": record.model_dump(mode="json")}


@router.get("/reviews/{review_id}")
async def get_review(review_id: str, request: Request):
    with _storage_errors():
        record = await _reviews(request).get_review(review_id)
    if record is None:
        raise HTTPException(status_code=404, detail="not_found")
    return {"id": review_id, "review": record.model_dump(mode="json")}


@router.patch("/reviews/{review_id}")
async def update_review_comment(review_id: str, body: CommentBody, request: Request):
    try:
        with _storage_errors():
            record = await _reviews(request).update_comment(review_id, body.comment)
    except MissingKeyError as e:
        raise HTTPException(status_code=404, detail="not_found") from e
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="invalid_review") from e
    return {"id": review_id, "review": record.model_dump(mode="json")}


@router.delete("/reviews/{review_id}", status_code=204)
async def delete_review(review_id: str, request: Request):
    with _storage_errors():
        deleted = await _reviews(request).delete_review(review_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="not_found")
    return Response(status_code=204)
