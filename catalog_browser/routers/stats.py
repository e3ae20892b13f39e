from fastapi import APIRouter, Depends

from catalog_browser.dependencies import get_stats_cache
from catalog_browser.models.stats import Stats
from catalog_browser.services.stats import StatsCache

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=Stats)
async def get_stats(cache: StatsCache = Depends(get_stats_cache)) -> Stats:
    return cache.get()
