from fastapi import Request

from catalog_browser.config import Settings
from catalog_browser.services.stats import StatsCache
from catalog_browser.services.store import CatalogStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def get_stats_cache(request: Request) -> StatsCache:
    return request.app.state.stats_cache
