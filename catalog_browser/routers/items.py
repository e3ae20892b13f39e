from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status

from catalog_browser.config import Settings
from catalog_browser.dependencies import get_settings, get_store
from catalog_browser.errors import NotFoundError, ValidationError
from catalog_browser.models.items import CreateEntryRequest, Entry, EntryDraft, PageResult
from catalog_browser.services.query import ItemQuery, run_query
from catalog_browser.services.store import CatalogStore

router = APIRouter(prefix="/items", tags=["items"])


# Query values arrive as raw strings so malformed numbers are coerced, not rejected.
@router.get("", response_model=PageResult, response_model_exclude_none=True)
async def list_items(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    q: Optional[str] = None,
    sort_key: Optional[str] = Query(default=None, alias="sortKey"),
    sort_order: Optional[str] = Query(default=None, alias="sortOrder"),
    store: CatalogStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> PageResult:
    query = ItemQuery.from_params(
        page, limit, q, sort_key, sort_order, default_limit=settings.default_page_size
    )
    return run_query(store.read_all(), query)


@router.get("/{item_id}", response_model=Entry, response_model_exclude_none=True)
async def get_item(item_id: str, store: CatalogStore = Depends(get_store)) -> Entry:
    try:
        entry_id = int(item_id)
    except ValueError:
        raise NotFoundError("Item not found") from None
    return store.get(entry_id)


@router.post(
    "",
    response_model=Entry,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_item(
    body: Optional[CreateEntryRequest] = Body(default=None),
    store: CatalogStore = Depends(get_store),
) -> Entry:
    if body is None or not body.name or body.price is None:
        raise ValidationError("Name and price are required.")
    draft = EntryDraft(name=body.name, price=body.price, category=body.category)
    return store.append(draft)
