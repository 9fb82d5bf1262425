"""
docvault/main.py

FastAPI application entry point.

Responsibilities:
  - Build the FastAPI app with metadata from config (create_app)
  - Open the record store and blob store at startup, close them at shutdown,
    and wire the services that use them
  - Register the documents router and CORS middleware
  - Add global exception handlers returning the { "error": "..." } shape
  - Expose a /health endpoint for liveness probes
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docvault.api.documents_controller import router as documents_router
from docvault.blob_store.filesystem_store import FilesystemBlobStore
from docvault.core.config import Settings, settings as default_settings
from docvault.core.exceptions import AppBaseException
from docvault.core.logger import get_logger
from docvault.record_store.sql_store import SqlRecordStore
from docvault.services.document_service import DocumentService
from docvault.services.ingest_service import IngestService

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an app bound to ``settings`` (the module-level settings by default)."""
    cfg = settings or default_settings

    # ── Lifespan: store handles live exactly as long as the app ────────────────

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        records = SqlRecordStore(cfg.database_url, auto_migrate=cfg.auto_migrate)
        blobs = FilesystemBlobStore(cfg.upload_dir)

        blobs.prepare()
        records.open()

        app.state.ingest_service = IngestService(
            records,
            blobs,
            max_upload_bytes=cfg.max_upload_bytes,
            chunk_size=cfg.upload_chunk_size,
        )
        app.state.document_service = DocumentService(records, blobs)
        logger.info("%s v%s started.", cfg.app_name, cfg.app_version)
        try:
            yield
        finally:
            records.close()
            logger.info("%s stopped.", cfg.app_name)

    app = FastAPI(
        title=cfg.app_name,
        version=cfg.app_version,
        description=(
            "Uploads, lists, downloads and deletes PDF documents. Uploads are "
            "sanitized, uniquely named, verified by magic bytes and recorded "
            "in a relational store."
        ),
        lifespan=lifespan,
    )

    # ── Middleware & routers ───────────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(documents_router)

    # ── Global exception handlers ──────────────────────────────────────────────

    @app.exception_handler(AppBaseException)
    async def app_exception_handler(request: Request, exc: AppBaseException) -> JSONResponse:
        """
        Safety-net for any AppBaseException that escapes controller-level handling.
        Returns the error shape: { "error": "..." }
        """
        logger.exception("Unhandled application error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("Invalid request on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request parameters."})

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # ── Health endpoint ────────────────────────────────────────────────────────

    @app.get("/health", tags=["Health"], summary="Liveness probe")
    async def health() -> dict:
        """Returns 200 OK when the service is running."""
        return {"status": "ok", "version": cfg.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
