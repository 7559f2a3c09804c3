from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import models  # noqa: F401  (registra las tablas en Base.metadata)
from app.api.routes import router as products_router
from app.core.config import get_settings
from app.core.db import connect_db, database_is_up
from app.core.errors import InputValidationError, ProductsAPIError, StorageError
from app.core.logging import configure_logging, get_logger
from app.middlewares.request_id import RequestIdMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)

    app.state.db_ready = connect_db()
    if not app.state.db_ready:
        if settings.db_required_on_startup:
            logger.critical("Database unavailable at startup; refusing to start")
            raise RuntimeError("Database unavailable at startup")
        logger.warning("Starting in degraded mode (DB_REQUIRED_ON_STARTUP=false)")

    # Log de arranque con parámetros clave (sin secretos)
    logger.info(
        "%s %s started (env=%s, cors=%s)",
        settings.app_name,
        settings.app_version,
        settings.environment,
        settings.cors_origins_list(),
    )
    yield
    logger.info("%s shutting down", settings.app_name)


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="API Docs for Products",
        openapi_tags=[{"name": "Products", "description": "API operations related to products"}],
        docs_url="/docs",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
    )
    # outermost
    app.add_middleware(RequestIdMiddleware)

    @app.exception_handler(ProductsAPIError)
    async def products_api_error_handler(request: Request, exc: ProductsAPIError):
        if isinstance(exc, InputValidationError):
            logger.info("Validation failed on %s %s: %d error(s)", request.method, request.url.path, len(exc.errors))
        elif isinstance(exc, StorageError):
            logger.error("Storage error on %s %s (operation=%s)", request.method, request.url.path, exc.operation)
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.get("/health", tags=["Health"])
    def health():
        db_up = database_is_up()
        return {
            "status": "ok" if db_up else "degraded",
            "service": settings.app_name,
            "env": settings.environment,
            "version": settings.app_version,
            "database": "up" if db_up else "down",
        }

    app.include_router(products_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
