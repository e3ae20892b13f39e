"""Filter, sort and paginate catalog entries.

The order is fixed: filter by search term, then sort, then slice the page.
Nothing here raises; bad numeric input falls back to defaults.
"""

import math
import unicodedata
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from catalog_browser.models.items import Entry, PageResult

SORT_KEYS = ("name", "price")
SORT_ORDERS = ("asc", "desc")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT_KEY = "name"
DEFAULT_SORT_ORDER = "asc"


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def _name_key(name: str):
    normalized = unicodedata.normalize("NFKD", name)
    folded = "".join(c for c in normalized if not unicodedata.combining(c)).casefold()
    return folded, name


@dataclass(frozen=True)
class ItemQuery:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search_term: str = ""
    sort_key: str = DEFAULT_SORT_KEY
    sort_order: str = DEFAULT_SORT_ORDER

    @classmethod
    def from_params(
        cls,
        page: Optional[Any] = None,
        limit: Optional[Any] = None,
        q: Optional[str] = None,
        sort_key: Optional[str] = None,
        sort_order: Optional[str] = None,
        *,
        default_limit: int = DEFAULT_LIMIT,
    ) -> "ItemQuery":
        key = (sort_key or "").strip().lower()
        order = (sort_order or "").strip().lower()
        return cls(
            page=_positive_int(page, DEFAULT_PAGE),
            limit=_positive_int(limit, default_limit),
            search_term=q or "",
            sort_key=key if key in SORT_KEYS else DEFAULT_SORT_KEY,
            sort_order=order if order in SORT_ORDERS else DEFAULT_SORT_ORDER,
        )

    def to_params(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "q": self.search_term,
            "sortKey": self.sort_key,
            "sortOrder": self.sort_order,
        }


def filter_entries(entries: Sequence[Entry], term: str) -> List[Entry]:
    needle = term.casefold()
    if not needle:
        return list(entries)
    return [e for e in entries if needle in e.name.casefold()]


def sort_entries(entries: Sequence[Entry], sort_key: str, sort_order: str) -> List[Entry]:
    reverse = sort_order == "desc"
    if sort_key == "price":
        return sorted(entries, key=lambda e: e.price, reverse=reverse)
    return sorted(entries, key=lambda e: _name_key(e.name), reverse=reverse)


def run_query(entries: Sequence[Entry], query: ItemQuery) -> PageResult:
    results = sort_entries(
        filter_entries(entries, query.search_term), query.sort_key, query.sort_order
    )
    total = len(results)
    start = (query.page - 1) * query.limit
    return PageResult(
        page=query.page,
        limit=query.limit,
        total_pages=math.ceil(total / query.limit),
        total_results=total,
        data=results[start:start + query.limit],
    )
