"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.api.v1 import router as v1_router
from portal.core.config import Settings, get_settings
from portal.core.database import Database
from portal.core.logging_config import configure_logging
from portal.services.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """Persistence failures are server errors, never credential errors; not retried."""
    logger.error("Store unavailable during %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable"},
    )


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the app with an explicitly constructed database handle."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Church Portal API",
        version="0.1.0",
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url="/redoc" if settings.APP_ENV == "dev" else None,
    )
    app.state.settings = settings
    app.state.database = database or Database(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Church Portal API"}

    return app


app = create_app()
