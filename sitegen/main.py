import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError

from sitegen.config import settings
from sitegen.db.base import engine, init_db
from sitegen.routers import (
    articles,
    locations,
    page_groups,
    pages,
    products,
    promotions,
    public_pages,
    relationships,
)

logger = logging.getLogger(__name__)


def _is_schema_mismatch_error(exc: Exception) -> bool:
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) in {"42703", "42P01"}:
        return True
    message = str(orig or exc).lower()
    return any(
        marker in message
        for marker in (
            "undefined column",
            "does not exist",
            "no such column",
            "no such table",
        )
    )


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def _app_lifespan(_app: FastAPI) -> AsyncIterator[None]:
    if settings.is_sqlite:
        # Local SQLite databases are created on startup; Postgres goes through Alembic.
        init_db()
    yield


def create_app() -> FastAPI:
    _configure_logging()
    app = FastAPI(
        title="Sitegen API",
        default_response_class=ORJSONResponse,
        lifespan=_app_lifespan,
    )

    allow_origins = sorted(set(settings.BACKEND_CORS_ORIGINS))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ProgrammingError)
    @app.exception_handler(OperationalError)
    async def database_error_handler(_request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Database error", exc_info=exc)
        if _is_schema_mismatch_error(exc):
            return ORJSONResponse(
                status_code=503,
                content={
                    "detail": "Database schema is out of date. Run `alembic upgrade head` and redeploy."
                },
            )
        return ORJSONResponse(status_code=500, content={"detail": "Database query failed."})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Unhandled server exception", exc_info=exc)
        return ORJSONResponse(status_code=500, content={"detail": "Internal server error."})

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/health/db")
    def health_db() -> dict[str, str]:
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return {"db": "ok"}
        except Exception as exc:  # pragma: no cover - simple runtime check
            return {"db": f"error: {exc}"}

    app.include_router(locations.router)
    app.include_router(products.router)
    app.include_router(promotions.router)
    app.include_router(articles.router)
    app.include_router(relationships.router)
    app.include_router(pages.router)
    app.include_router(page_groups.router)
    app.include_router(public_pages.router)

    return app


app = create_app()
