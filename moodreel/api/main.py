"""FastAPI application entry point.

Creates and configures the MoodReel REST API with rate limiting,
Prometheus metrics and OpenAPI documentation.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moodreel.api.routers import chat, discover, health, moods, playlists
from moodreel.catalog.repository import get_catalog
from moodreel.monitoring.middleware import PrometheusMiddleware, mount_metrics
from moodreel.settings import settings
from moodreel.utils.logger import setup_logger

logger = setup_logger("api.main")

# =============================================================================
# LIFESPAN
# =============================================================================


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Loads the dataset on startup; a missing or malformed dataset
    aborts the startup with DatasetLoadError.

    Args:
        _app: FastAPI application instance.

    Yields:
        None after startup tasks complete.
    """
    catalog = get_catalog()
    logger.info(f"Catalog ready: {len(catalog)} movies, {len(catalog.mood_tags())} mood tags")
    yield


# =============================================================================
# APPLICATION FACTORY
# =============================================================================


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance.
    """
    app = FastAPI(
        title=settings.api.title,
        version=settings.api.version,
        description="REST API for mood-based movie recommendations",
        lifespan=lifespan,
        debug=settings.debug,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    _configure_cors(app)
    app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)
    _register_routers(app)
    return app


def _configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )


def _register_routers(app: FastAPI) -> None:
    """Register API routers.

    Args:
        app: FastAPI application instance.
    """
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(moods.router, prefix="/api/v1")
    app.include_router(playlists.router, prefix="/api/v1")
    app.include_router(discover.router, prefix="/api/v1")
    app.include_router(chat.router, prefix="/api/v1")


app = create_app()


# =============================================================================
# CLI ENTRY POINT
# =============================================================================


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "moodreel.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )
