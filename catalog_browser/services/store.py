"""JSON file backed catalog store.

The whole collection lives in one JSON array. Every read parses the file and
every append rewrites it; there is no index and no partial update.
"""

import json
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from catalog_browser.errors import NotFoundError, StoreError
from catalog_browser.models.items import Entry, EntryDraft

logger = logging.getLogger(__name__)

WriteListener = Callable[[], None]


class CatalogStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._listeners: List[WriteListener] = []

    def add_write_listener(self, listener: WriteListener) -> None:
        self._listeners.append(listener)

    def fingerprint(self) -> Optional[Tuple[int, int]]:
        """Return ``(mtime_ns, size)`` of the data file, or None if it is missing."""
        try:
            st = self.path.stat()
        except OSError:
            return None
        return st.st_mtime_ns, st.st_size

    def read_all(self) -> List[Entry]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Could not read catalog from {self.path}: {exc}") from exc
        if not isinstance(raw, list):
            raise StoreError(f"Catalog file {self.path} does not hold a list")
        try:
            return [Entry.model_validate(item) for item in raw]
        except PydanticValidationError as exc:
            raise StoreError(f"Catalog file {self.path} holds a malformed entry") from exc

    def get(self, entry_id: int) -> Entry:
        for entry in self.read_all():
            if entry.id == entry_id:
                return entry
        raise NotFoundError("Item not found")

    def append(self, draft: EntryDraft) -> Entry:
        entries = self.read_all() if self.path.exists() else []
        entry = Entry(id=self._next_id(entries), **draft.model_dump())
        entries.append(entry)
        self._write(entries)
        logger.info("Stored item %s (%d items total)", entry.id, len(entries))
        for listener in self._listeners:
            listener()
        return entry

    @staticmethod
    def _next_id(entries: List[Entry]) -> int:
        # Creation timestamp in ms, bumped past existing ids so it never collides.
        candidate = int(time.time() * 1000)
        highest = max((e.id for e in entries), default=0)
        return max(candidate, highest + 1)

    def _write(self, entries: List[Entry]) -> None:
        payload = [e.model_dump(exclude_none=True) for e in entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Could not write catalog to {self.path}: {exc}") from exc
