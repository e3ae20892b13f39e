from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Entry(CamelModel):
    id: int
    name: str
    price: Union[int, float]
    category: Optional[str] = None


class EntryDraft(CamelModel):
    name: str
    price: Union[int, float]
    category: Optional[str] = None


class CreateEntryRequest(CamelModel):
    # Presence is checked by the route so a missing field maps to 400, not 422.
    name: Optional[str] = None
    price: Optional[Union[int, float]] = None
    category: Optional[str] = None


class Pagination(CamelModel):
    page: int = 1
    limit: int = 10
    total_pages: int = 1
    total_results: int = 0


class PageResult(Pagination):
    data: List[Entry]

    def pagination(self) -> Pagination:
        return Pagination(
            page=self.page,
            limit=self.limit,
            total_pages=self.total_pages,
            total_results=self.total_results,
        )
