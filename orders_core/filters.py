from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from orders_core.models import (
    OrderStatus,
    SortColumn,
    SortDirection,
    parse_sort_column,
    parse_status,
)


MAX_ITEMS_PER_PAGE = 100


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except Exception:
        return default


DEFAULT_ITEMS_PER_PAGE = max(1, min(MAX_ITEMS_PER_PAGE, _as_int(os.getenv("ORDERS_ITEMS_PER_PAGE"), 10)))


@dataclass(frozen=True)
class QueryState:
    search: str = ""
    status: Optional[OrderStatus] = None
    sort_by: SortColumn = SortColumn.DATE
    sort_direction: SortDirection = SortDirection.DESC
    page: int = 1
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.items_per_page < 1:
            raise ValueError("items_per_page must be >= 1")

    def to_dict(self) -> dict:
        return {
            "search": self.search,
            "status": self.status.value if self.status else None,
            "sort_by": self.sort_by.value,
            "sort_direction": self.sort_direction.value,
            "page": self.page,
            "items_per_page": self.items_per_page,
        }


def _as_direction(value: object) -> SortDirection:
    text = str(value or "").strip().lower()
    if text == SortDirection.ASC.value:
        return SortDirection.ASC
    if text == SortDirection.DESC.value:
        return SortDirection.DESC
    return QueryState.sort_direction


def normalize_query(raw: Optional[dict]) -> QueryState:
    """Build a QueryState from a partial, untrusted seed (deep link, request body, session)."""
    raw = raw or {}

    search = str(raw.get("search") or "").strip()
    status = parse_status(raw.get("status"))

    sort_by = raw.get("sort_by")
    sort_by = parse_sort_column(sort_by) if sort_by is not None else QueryState.sort_by
    sort_direction = _as_direction(raw.get("sort_direction"))

    page = max(1, _as_int(raw.get("page", 1), 1))
    items_per_page = _as_int(raw.get("items_per_page", DEFAULT_ITEMS_PER_PAGE), DEFAULT_ITEMS_PER_PAGE)
    items_per_page = max(1, min(MAX_ITEMS_PER_PAGE, items_per_page))

    return QueryState(
        search=search,
        status=status,
        sort_by=sort_by,
        sort_direction=sort_direction,
        page=page,
        items_per_page=items_per_page,
    )
