from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from woundcare.api.documents import router as documents_router
from woundcare.api.forms import router as forms_router
from woundcare.api.upload import router as upload_router
from woundcare.config import settings
from woundcare.database import init_db
from woundcare.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging(settings.log_level)
    init_db()
    Path(settings.storage_path).mkdir(parents=True, exist_ok=True)
    logger.info(
        "%s running in %s mode (OCR=%s)", settings.app_name, settings.app_env, settings.enable_ocr
    )
    yield


async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, dict) else {"error": str(exc.detail), "code": "HTTP_ERROR"}
    return JSONResponse(status_code=exc.status_code, content={"success": False, **detail}, headers=exc.headers)


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request", "code": "INVALID_REQUEST"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc) or "An unexpected error occurred", "code": "INTERNAL_ERROR"},
    )


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/api/health", tags=["health"])
    def health() -> dict[str, str]:
        return {
            "status": "ok",
            "version": settings.app_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(upload_router)
    app.include_router(forms_router)
    app.include_router(documents_router)
    return app


app = create_app()
