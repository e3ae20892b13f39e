import json

import httpx
import pytest
from fastapi.testclient import TestClient

from catalog_browser.config import Settings
from catalog_browser.main import create_app
from catalog_browser.models.items import Entry
from catalog_browser.services.query import ItemQuery, run_query

MOCK_ITEMS = [
    {"id": 1, "name": "Item 1", "price": 10},
    {"id": 2, "name": "Item 2", "price": 20},
    {"id": 3, "name": "Another Item", "price": 30},
]


@pytest.fixture
def data_path(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps(MOCK_ITEMS, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def settings(data_path):
    return Settings(data_path=data_path, cors_allow_origins=[])


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


class FakeCatalogServer:
    """In-process stand-in for the API, answering through httpx.MockTransport."""

    def __init__(self, entries):
        self.entries = entries
        self.requests = []
        self.fail_status = None
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request):
        self.requests.append(request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status)
        path = request.url.path
        if path == "/items":
            params = request.url.params
            query = ItemQuery.from_params(
                params.get("page"),
                params.get("limit"),
                params.get("q"),
                params.get("sortKey"),
                params.get("sortOrder"),
            )
            result = run_query(self.entries, query)
            return httpx.Response(200, json=result.model_dump(by_alias=True, exclude_none=True))
        if path.startswith("/items/"):
            item_id = int(path.rsplit("/", 1)[1])
            for entry in self.entries:
                if entry.id == item_id:
                    return httpx.Response(200, json=entry.model_dump(exclude_none=True))
        return httpx.Response(404, json={"detail": "Item not found"})

    def list_requests(self):
        return [r for r in self.requests if r.url.path == "/items"]


def make_entries(count):
    return [
        Entry(id=i, name=f"Item {i:03d}", price=float(i), category="Tools" if i % 2 else None)
        for i in range(1, count + 1)
    ]


@pytest.fixture
def catalog_server():
    return FakeCatalogServer(make_entries(30))
