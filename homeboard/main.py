"""homeboard - household management API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from homeboard.core.config import Settings, settings
from homeboard.core.db_client import Database
from homeboard.core.errors import HomeboardError, to_error_response
from homeboard.core.logging import configure_logfire, instrument_fastapi
from homeboard.core.schema import init_db
from homeboard.interface.categories_router import router as categories_router
from homeboard.interface.houses_router import router as houses_router
from homeboard.interface.tasks_router import router as tasks_router
from homeboard.interface.users_router import router as users_router


logger = logging.getLogger(__name__)


async def handle_homeboard_error(request: Request, exc: Exception) -> JSONResponse:
    """Render a business error as an ErrorResponse payload."""
    status_code, body = to_error_response(exc)
    logger.info(
        "request_failed",
        extra={"path": request.url.path, "status_code": status_code, "code": body.code},
    )
    return JSONResponse(content=body.model_dump(exclude_none=True), status_code=status_code)


def create_app(config: Settings | None = None) -> FastAPI:
    """Build the FastAPI application bound to one SQLite database."""
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Startup
        configure_logfire(config)

        if config.is_production:
            config.require_credential("logfire_token", "Pydantic Logfire")

        db = Database(config.database_path)
        await db.connect()
        await init_db(db)
        app.state.db = db
        logger.info("Database initialized", extra={"path": str(config.database_path)})

        yield
        # Shutdown
        await db.close()

    app = FastAPI(
        title="homeboard",
        description="Household management API: houses, members and shared tasks",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app)

    app.add_exception_handler(HomeboardError, handle_homeboard_error)

    app.include_router(users_router)
    app.include_router(houses_router)
    app.include_router(tasks_router)
    app.include_router(categories_router)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "healthy"}, status_code=200)

    return app


app = create_app()
