from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from portfolio.api.middleware import install_request_logging
from portfolio.api.routes import router as api_router
from portfolio.config import get_settings
from portfolio.db.errors import ConflictError, NotFoundError, StorageError
from portfolio.db.init import ensure_data_directories, init_database

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    ensure_data_directories()

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_request_logging(app)

    @app.on_event("startup")
    def _startup() -> None:
        init_database()

    @app.exception_handler(NotFoundError)
    async def _not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse({"detail": str(exc)}, status_code=404)

    @app.exception_handler(ConflictError)
    async def _conflict(_: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse({"detail": str(exc)}, status_code=409)

    @app.exception_handler(StorageError)
    async def _storage_error(_: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure: %s", exc)
        return JSONResponse({"detail": "Internal Server Error"}, status_code=500)

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({"status": "healthy", "timestamp": datetime.now(UTC).isoformat()})

    app.include_router(api_router)
    app.mount("/uploads", StaticFiles(directory=str(settings.upload_dir)), name="uploads")
    return app
