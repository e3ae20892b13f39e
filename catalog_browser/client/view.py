"""Virtualized list view over the controller's current page.

Selection, compact mode and scroll position are local to the view and survive
refetches. Selection is kept across page changes as well; ``clear_selection``
is the only thing that empties it. Sorting is always done by the server.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from catalog_browser.client.controller import DataController
from catalog_browser.models.items import Entry

COMPACT_ROW_HEIGHT = 44
REGULAR_ROW_HEIGHT = 60
DEFAULT_VIEWPORT_HEIGHT = 440

SORT_OPTIONS: Dict[str, Tuple[str, str]] = {
    "name-asc": ("name", "asc"),
    "name-desc": ("name", "desc"),
    "price-asc": ("price", "asc"),
    "price-desc": ("price", "desc"),
}


def format_price(price: float) -> str:
    sign = "-" if price < 0 else ""
    return f"{sign}${abs(price):,.2f}"


@dataclass(frozen=True)
class Row:
    index: int
    top: int
    height: int
    entry: Entry
    selected: bool
    price_label: str
    subtitle: Optional[str]


@dataclass(frozen=True)
class Status:
    page: int
    total_pages: int
    showing: int
    selected: int
    loading: bool
    error: Optional[str]
    empty: bool

    @property
    def page_label(self) -> str:
        return f"Page {self.page} of {self.total_pages}"


class ItemsView:
    def __init__(
        self,
        controller: DataController,
        *,
        viewport_height: int = DEFAULT_VIEWPORT_HEIGHT,
        compact: bool = True,
        overscan: int = 0,
    ) -> None:
        self.controller = controller
        self.viewport_height = viewport_height
        self.overscan = overscan
        self.compact = compact
        self.selected: Set[int] = set()
        self.search_text = ""
        self.scroll_offset = 0
        self._unsubscribe = controller.subscribe(self._clamp_scroll)

    def close(self) -> None:
        self._unsubscribe()

    @property
    def items(self) -> List[Entry]:
        return self.controller.items

    @property
    def sort_option(self) -> str:
        return f"{self.controller.query.sort_key}-{self.controller.query.sort_order}"

    @property
    def row_height(self) -> int:
        return COMPACT_ROW_HEIGHT if self.compact else REGULAR_ROW_HEIGHT

    @property
    def content_height(self) -> int:
        return len(self.items) * self.row_height

    # layout

    def set_compact(self, compact: bool) -> None:
        self.compact = compact
        self._clamp_scroll()

    def scroll_to(self, offset: int) -> None:
        self.scroll_offset = offset
        self._clamp_scroll()

    def _clamp_scroll(self) -> None:
        max_offset = max(0, self.content_height - self.viewport_height)
        self.scroll_offset = min(max(0, self.scroll_offset), max_offset)

    def visible_range(self) -> Tuple[int, int]:
        count = len(self.items)
        if count == 0 or self.viewport_height <= 0:
            return 0, 0
        height = self.row_height
        first = self.scroll_offset // height
        last = -(-(self.scroll_offset + self.viewport_height) // height)
        return max(0, first - self.overscan), min(count, last + self.overscan)

    def rows(self) -> List[Row]:
        start, stop = self.visible_range()
        height = self.row_height
        rows = []
        for index in range(start, stop):
            entry = self.items[index]
            rows.append(
                Row(
                    index=index,
                    top=index * height,
                    height=height,
                    entry=entry,
                    selected=entry.id in self.selected,
                    price_label=format_price(entry.price),
                    subtitle=None if self.compact else (entry.category or "Uncategorized"),
                )
            )
        return rows

    # selection

    def toggle_select(self, item_id: int) -> None:
        if item_id in self.selected:
            self.selected.discard(item_id)
        else:
            self.selected.add(item_id)

    def clear_selection(self) -> None:
        self.selected = set()

    # server-driven actions

    def on_search_input(self, text: str) -> None:
        self.search_text = text
        self.controller.set_search_term(text)

    def clear_search(self) -> None:
        self.on_search_input("")

    async def change_sort(self, option: str) -> bool:
        if option not in SORT_OPTIONS:
            raise ValueError(f"Unknown sort option: {option!r}")
        sort_key, sort_order = SORT_OPTIONS[option]
        return await self.controller.set_sort(sort_key, sort_order)

    def _current_page(self) -> int:
        return self.controller.pagination.page or 1

    def _total_pages(self) -> int:
        return max(1, self.controller.pagination.total_pages or 1)

    async def next_page(self) -> bool:
        if self.controller.loading or self._current_page() >= self._total_pages():
            return False
        return await self.controller.go_to_page(self._current_page() + 1)

    async def previous_page(self) -> bool:
        if self.controller.loading or self._current_page() <= 1:
            return False
        return await self.controller.go_to_page(self._current_page() - 1)

    async def jump_to_page(self, raw: str) -> bool:
        try:
            requested = int(str(raw).strip())
        except ValueError:
            return False
        target = min(max(1, requested), self._total_pages())
        return await self.controller.go_to_page(target)

    async def refresh(self) -> bool:
        return await self.controller.refresh()

    def status(self) -> Status:
        return Status(
            page=self._current_page(),
            total_pages=self._total_pages(),
            showing=len(self.items),
            selected=len(self.selected),
            loading=self.controller.loading,
            error=self.controller.error,
            empty=(
                not self.controller.loading
                and not self.items
                and self.controller.error is None
            ),
        )
