from pydantic import BaseModel, Field
from typing import Generic, List, Literal, TypeVar
import math

T = TypeVar("T")


class PageParams(BaseModel):
    page: int = Field(0, ge=0)
    size: int = Field(10, ge=1)
    sort_by: str = "name"
    sort_dir: Literal["asc", "desc"] = "asc"

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(BaseModel, Generic[T]):
    items: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool

    @classmethod
    def build(cls, items: List[T], params: PageParams, total: int) -> "Page[T]":
        total_pages = math.ceil(total / params.size) if total else 0
        return cls(
            items=items,
            page=params.page,
            size=params.size,
            total_elements=total,
            total_pages=total_pages,
            first=params.page == 0,
            last=params.page >= total_pages - 1,
        )
