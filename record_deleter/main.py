from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from record_deleter.core.config import ConfigError, Settings, load_settings
from record_deleter.core.constants import SERVICE_NAME, SERVICE_VERSION
from record_deleter.core.logging import configure_logging, get_logger
from record_deleter.core.middleware import RequestIdMiddleware
from record_deleter.routers.health import router as health_router
from record_deleter.routers.records import router as records_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        "Service ready to accept requests!",
        extra={
            "event": "service.start",
            "airtable_base_id": settings.airtable_base_id,
            "airtable_table_name": settings.airtable_table_name,
        },
    )
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        logger.info("Shutting down", extra={"event": "service.stop"})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"error": "Invalid request."}, status_code=400)


def create_app(settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(title="Airtable Record Deleter", version=SERVICE_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.http_client = http_client or httpx.AsyncClient(timeout=None)

    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(health_router)
    app.include_router(records_router, prefix="/api")
    return app


def run() -> None:
    try:
        settings = load_settings()
    except ConfigError as exc:
        configure_logging()
        logger.error(str(exc), extra={"event": "config.invalid"})
        sys.exit(1)

    app = create_app(settings)
    logger.info(
        "Starting %s",
        SERVICE_NAME,
        extra={"event": "service.boot", "port": settings.port},
    )
    # uvicorn exits cleanly on SIGINT and SIGTERM.
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
