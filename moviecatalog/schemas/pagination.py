from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from pydantic import Field

from moviecatalog.schemas.base import CamelModel

T = TypeVar("T")


class Page(CamelModel, Generic[T]):
    content: List[T] = Field(default_factory=list)
    page: int = Field(..., ge=0)
    size: int = Field(..., ge=1)
    number_of_elements: int = Field(..., ge=0)
    total_elements: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    first: bool
    last: bool
    has_next: bool
    has_previous: bool
    empty: bool
    sort: Optional[str] = Field(None, description="Applied sort, e.g. 'title,asc'")
