"""Application entrypoint and FastAPI factory."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from alembic import command
from alembic.config import Config
from sqlalchemy.exc import SQLAlchemyError
from strawberry.fastapi import GraphQLRouter

from billing.api.errors import INTERNAL_ERROR_DETAIL
from billing.api.router import router as api_router
from billing.core.database import ENGINE, create_database_schema
from billing.core.log_config import configure_logging
from billing.core.settings import Settings, get_settings
from billing.graphql.context import context_getter
from billing.graphql.schema import schema

logger = logging.getLogger(__name__)

ALEMBIC_CONFIG = Path(__file__).resolve().parent.parent / "alembic.ini"


def _run_migrations() -> None:
    """Execute Alembic migrations; fallback to metadata create_all on failure."""

    config = Config(str(ALEMBIC_CONFIG))
    try:
        command.upgrade(config, "head")
    except Exception:
        logger.warning("Alembic upgrade failed, creating schema from metadata", exc_info=True)
        create_database_schema()


def _ensure_sqlite_directory(settings: Settings) -> None:
    """If using SQLite file storage, ensure parent directory exists."""

    url = settings.database_url
    if url.startswith("sqlite") and ":memory:" not in url:
        # sqlite:///./data/dev.db -> ./data/dev.db
        database_path = url.split(":///", 1)[-1]
        db_file = Path(database_path).expanduser().resolve()
        db_file.parent.mkdir(parents=True, exist_ok=True)


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan, ensuring shared resources are initialized/closed."""

    settings = get_settings()
    _ensure_sqlite_directory(settings)
    _run_migrations()
    app.state.settings = settings
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    try:
        yield
    finally:
        ENGINE.dispose()


def create_app() -> FastAPI:
    """Application factory used by ASGI servers."""

    settings = get_settings()
    configure_logging(settings.log_level)
    graphql_app = GraphQLRouter(schema, path="/graphql", context_getter=context_getter)

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )

    application.include_router(api_router, prefix="/api")
    application.include_router(graphql_app, prefix="")
    application.add_exception_handler(SQLAlchemyError, _database_error_handler)

    return application


app = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("billing.main:app", host="0.0.0.0", port=8000, reload=True)
