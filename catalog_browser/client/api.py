from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from catalog_browser.models.items import Entry, PageResult
from catalog_browser.models.stats import Stats
from catalog_browser.services.query import ItemQuery

DEFAULT_BASE_URL = "http://localhost:3001"

ModelT = TypeVar("ModelT", bound=BaseModel)


class CatalogClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CatalogClient:
    """Async HTTP client for the catalog API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise CatalogClientError(f"{method} {url} failed: {exc}") from exc
        if response.is_error:
            raise CatalogClientError(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _parse(model: Type[ModelT], response: httpx.Response) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise CatalogClientError(
                f"Unexpected payload from {response.request.url}: {exc}",
                status_code=response.status_code,
            ) from exc

    async def list_items(self, query: ItemQuery) -> PageResult:
        response = await self._request("GET", "/items", params=query.to_params())
        return self._parse(PageResult, response)

    async def get_item(self, item_id: int) -> Entry:
        response = await self._request("GET", f"/items/{item_id}")
        return self._parse(Entry, response)

    async def create_item(self, name: str, price: float, category: Optional[str] = None) -> Entry:
        body = {"name": name, "price": price}
        if category is not None:
            body["category"] = category
        response = await self._request("POST", "/items", json=body)
        return self._parse(Entry, response)

    async def get_stats(self) -> Stats:
        response = await self._request("GET", "/stats")
        return self._parse(Stats, response)
