"""Filter -> sort -> paginate over an in-memory order set.

Every function here is pure: the same ``(records, state)`` always yields the
same page, and input sequences are never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from functools import cmp_to_key
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence

from orders_core.filters import QueryState
from orders_core.models import Order, OrderStatus, SortColumn, SortDirection


@dataclass(frozen=True)
class PageSlice:
    items: List[Order]
    total_pages: int
    total_items: int


@dataclass(frozen=True)
class OrdersView:
    items: List[Order]
    page: int
    total_pages: int
    total_items: int
    state: QueryState
    selected: FrozenSet[str] = field(default_factory=frozenset)


def _search_fields(order: Order) -> tuple:
    return (order.id, order.user.name, order.project, order.address)


def filter_orders(records: Iterable[Order], search: str = "", status: Optional[OrderStatus] = None) -> List[Order]:
    needle = (search or "").lower()
    out: List[Order] = []
    for order in records:
        if needle and not any(needle in value.lower() for value in _search_fields(order)):
            continue
        if status is not None and order.status != status:
            continue
        out.append(order)
    return out


SORT_KEYS: Dict[SortColumn, Callable[[Order], Any]] = {
    SortColumn.ID: lambda o: o.id.lower(),
    SortColumn.USER: lambda o: o.user.name.lower(),
    SortColumn.DATE: lambda o: o.date,
    SortColumn.STATUS: lambda o: o.status.value,
    SortColumn.PROJECT: lambda o: o.project.lower(),
    SortColumn.ADDRESS: lambda o: o.address.lower(),
}


def compare_orders(a: Order, b: Order, sort_by: SortColumn) -> int:
    key = SORT_KEYS[sort_by]
    a_value, b_value = key(a), key(b)
    if a_value < b_value:
        return -1
    if a_value > b_value:
        return 1
    return 0


def sort_orders(records: Sequence[Order], sort_by: SortColumn, direction: SortDirection = SortDirection.ASC) -> List[Order]:
    # sorted() is stable, so equal keys keep their input order in both directions.
    sign = -1 if direction == SortDirection.DESC else 1
    return sorted(records, key=cmp_to_key(lambda a, b: sign * compare_orders(a, b, sort_by)))


def count_pages(total_items: int, items_per_page: int) -> int:
    return math.ceil(total_items / items_per_page)


def display_total_pages(total_pages: int) -> int:
    return max(total_pages, 1)


def clamp_page(page: int, total_pages: int) -> int:
    return max(1, min(page, display_total_pages(total_pages)))


def paginate_orders(records: Sequence[Order], page: int, items_per_page: int) -> PageSlice:
    """Slice one page out of ``records``; out-of-range pages give an empty slice."""
    total_items = len(records)
    total_pages = count_pages(total_items, items_per_page)
    if page < 1:
        return PageSlice(items=[], total_pages=total_pages, total_items=total_items)
    start = (page - 1) * items_per_page
    return PageSlice(
        items=list(records[start : start + items_per_page]),
        total_pages=total_pages,
        total_items=total_items,
    )


def query_orders(records: Sequence[Order], state: QueryState) -> List[Order]:
    """Filter and sort the full record set (every page)."""
    filtered = filter_orders(records, state.search, state.status)
    return sort_orders(filtered, state.sort_by, state.sort_direction)


def compute_orders_view(
    records: Sequence[Order],
    state: QueryState,
    selected: Iterable[str] = (),
) -> OrdersView:
    ordered = query_orders(records, state)

    page = clamp_page(state.page, count_pages(len(ordered), state.items_per_page))
    if page != state.page:
        state = replace(state, page=page)

    page_slice = paginate_orders(ordered, page, state.items_per_page)
    return OrdersView(
        items=page_slice.items,
        page=page,
        total_pages=display_total_pages(page_slice.total_pages),
        total_items=page_slice.total_items,
        state=state,
        selected=frozenset(selected),
    )
