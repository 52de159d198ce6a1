from __future__ import annotations

import logging

from fastapi import FastAPI

from dotenv import load_dotenv

from persistence import StorageAdapter

logger = logging.getLogger(__name__)


def create_app(adapter: StorageAdapter | None = None) -> FastAPI:
    load_dotenv("local.env")

    from endpoints.storage_endpoints import build_review_repository, router as storage_router
    from persistence import create_adapter
    from settings import get_settings

    if adapter is None:
        settings = get_settings()
        adapter = create_adapter(settings)
        logger.info("STORAGE BACKEND: %s", settings.backend)

    app = FastAPI()
    app.state.storage_adapter = adapter
    app.state.review_repository = build_review_repository(adapter)

    @app.get("/health")
    async def health():
        return {"ok": True}

    app.include_router(storage_router)

    return app


app = create_app()
