"""Fetch lifecycle and last-known page state for the catalog client.

Only the newest fetch may commit. Each fetch carries a ``CancellationToken``;
starting another fetch cancels the previous token, and a cancelled fetch drops
its result (and leaves ``loading`` alone) when it eventually resolves.
"""

import asyncio
import dataclasses
import logging
from typing import Callable, List, Optional, Set

from catalog_browser.client.api import CatalogClient, CatalogClientError
from catalog_browser.models.items import Entry, Pagination
from catalog_browser.services.query import ItemQuery

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.3

Listener = Callable[[], None]


class CancellationToken:
    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class DataController:
    def __init__(
        self,
        api: CatalogClient,
        *,
        limit: int = 10,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self.api = api
        self.debounce_seconds = debounce_seconds
        self.query = ItemQuery(limit=limit)
        self.items: List[Entry] = []
        self.pagination = Pagination(limit=limit)
        self.loading = False
        self.error: Optional[str] = None

        self._token: Optional[CancellationToken] = None
        self._debounce: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    async def fetch_items(
        self,
        *,
        page: Optional[int] = None,
        search_term: Optional[str] = None,
        sort_key: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> bool:
        """Fetch one page. Returns True if the result was committed."""
        changes = {
            name: value
            for name, value in (
                ("page", page),
                ("search_term", search_term),
                ("sort_key", sort_key),
                ("sort_order", sort_order),
            )
            if value is not None
        }
        query = dataclasses.replace(self.query, **changes)
        self.query = query

        if self._token is not None:
            self._token.cancel()
        token = self._token = CancellationToken()

        self.loading = True
        self._notify()
        try:
            result = await self.api.list_items(query)
        except CatalogClientError as exc:
            if token.cancelled:
                return False
            logger.error("Failed to fetch items: %s", exc)
            self.error = str(exc)
            self.loading = False
            self._notify()
            return False

        if token.cancelled:
            logger.debug("Discarding superseded result for %s", query)
            return False
        self.items = result.data
        self.pagination = result.pagination()
        self.error = None
        self.loading = False
        self._notify()
        return True

    async def go_to_page(self, page: int) -> bool:
        return await self.fetch_items(page=page)

    async def set_sort(self, sort_key: str, sort_order: str) -> bool:
        return await self.fetch_items(sort_key=sort_key, sort_order=sort_order)

    async def refresh(self) -> bool:
        return await self.fetch_items(page=self.pagination.page or 1)

    def set_search_term(self, term: str) -> None:
        """Schedule a page-1 fetch once the term has been quiet for the debounce period."""
        if self._debounce is not None:
            self._debounce.cancel()
        loop = asyncio.get_running_loop()
        self._debounce = loop.call_later(self.debounce_seconds, self._fire_search, term.strip())

    def _fire_search(self, term: str) -> None:
        self._debounce = None
        task = asyncio.ensure_future(self.fetch_items(page=1, search_term=term))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for scheduled fetches to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def fetch_item(self, item_id: int) -> Optional[Entry]:
        try:
            return await self.api.get_item(item_id)
        except CatalogClientError as exc:
            if exc.status_code == 404:
                return None
            raise

    def close(self) -> None:
        if self._debounce is not None:
            self._debounce.cancel()
            self._debounce = None
        if self._token is not None:
            self._token.cancel()
