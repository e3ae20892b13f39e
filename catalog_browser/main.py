import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_browser.config import Settings, settings as default_settings
from catalog_browser.errors import StatsUnavailableError, register_exception_handlers
from catalog_browser.logging_config import configure_logging
from catalog_browser.routers import health, items, stats
from catalog_browser.services.stats import StatsCache
from catalog_browser.services.store import CatalogStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        app.state.stats_cache.get()
    except StatsUnavailableError:
        logger.warning("Initial stats calculation failed; will retry on first request")
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title="Catalog Browser API",
        description="Paginated, searchable catalog backed by a JSON file",
        version=health.VERSION,
        lifespan=lifespan,
    )

    store = CatalogStore(settings.data_path)
    app.state.settings = settings
    app.state.store = store
    app.state.stats_cache = StatsCache(store)

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(items.router, prefix=settings.api_prefix)
    app.include_router(stats.router, prefix=settings.api_prefix)
    return app


app = create_app()


def run() -> None:
    configure_logging(default_settings.log_level)
    logger.info(
        "Serving catalog from %s (%s)", default_settings.data_path, default_settings.environment
    )
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
