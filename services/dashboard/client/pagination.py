"""
Paginated list contract shared by every list screen.

Request:  {pageIndex, pageSize, keyword?, ids?, excludeIds?}
Response: {items[], totalItems, totalPages, currentPage, hasNext, hasPrevious}

ids / excludeIds are sent as repeated query params (ids=a&ids=b); empty
filters are omitted entirely.
"""

from __future__ import annotations

import math
from typing import Any, Generic, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageRequest(BaseModel):
    pageIndex: int = Field(default=0, ge=0)
    pageSize: int = Field(default=10, ge=1)
    keyword: Optional[str] = None
    ids: list[str] = Field(default_factory=list)
    excludeIds: list[str] = Field(default_factory=list)


class PageResponse(BaseModel, Generic[T]):
    items: list[T] = Field(default_factory=list)
    totalItems: int = 0
    totalPages: int = 0
    currentPage: int = 0
    hasNext: bool = False
    hasPrevious: bool = False


def build_query_params(page: PageRequest) -> list[tuple[str, str]]:
    """Encode a PageRequest as an ordered list of query pairs (repeats allowed)."""
    params: list[tuple[str, str]] = [
        ("pageIndex", str(page.pageIndex)),
        ("pageSize", str(page.pageSize)),
    ]
    if page.keyword:
        params.append(("keyword", page.keyword))
    for item_id in page.ids:
        params.append(("ids", item_id))
    for item_id in page.excludeIds:
        params.append(("excludeIds", item_id))
    return params


def paginate(items: Sequence[T], page: PageRequest) -> PageResponse[T]:
    """Slice an in-memory list into a PageResponse (pageIndex is zero-based)."""
    total = len(items)
    total_pages = math.ceil(total / page.pageSize) if total else 0
    start = page.pageIndex * page.pageSize
    window = list(items[start:start + page.pageSize])
    return PageResponse[Any](
        items=window,
        totalItems=total,
        totalPages=total_pages,
        currentPage=page.pageIndex,
        hasNext=page.pageIndex + 1 < total_pages,
        hasPrevious=page.pageIndex > 0 and total_pages > 0,
    )

