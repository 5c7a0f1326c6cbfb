from __future__ import annotations

import logging
from dataclasses import replace
from typing import FrozenSet, Iterable, List, Sequence, Union

from orders_core.filters import QueryState, normalize_query
from orders_core.models import (
    Order,
    OrderStatus,
    SortColumn,
    SortDirection,
    parse_sort_column,
    parse_status,
)
from orders_core.pipeline import OrdersView, compute_orders_view
from orders_core.selection import SelectionTracker


logger = logging.getLogger(__name__)


class OrdersController:
    """Owns the query state of one Orders view and re-derives the visible page.

    Each handler commits the new state, then recomputes filter -> sort ->
    paginate over the current source set. After a recompute ``state.page``
    is the clamped page.
    """

    def __init__(
        self,
        records: Sequence[Order],
        initial: Union[QueryState, dict, None] = None,
        *,
        selected: Iterable[str] = (),
    ) -> None:
        self._records: List[Order] = list(records)
        self._state = initial if isinstance(initial, QueryState) else normalize_query(initial)
        self._selection = SelectionTracker(selected)
        self._view = self._recompute()

    @property
    def records(self) -> List[Order]:
        return list(self._records)

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def view(self) -> OrdersView:
        return self._view

    @property
    def selection(self) -> SelectionTracker:
        return self._selection

    @property
    def selected(self) -> FrozenSet[str]:
        return self._selection.selected

    def visible_selected_ids(self) -> List[str]:
        return [order.id for order in self._view.items if order.id in self._selection]

    def on_search_change(self, text: str) -> OrdersView:
        logger.debug("on_search_change text=%r", text)
        return self._commit(replace(self._state, search=text or "", page=1))

    def on_status_filter_change(self, status: Union[OrderStatus, str, None]) -> OrdersView:
        logger.debug("on_status_filter_change status=%r", status)
        return self._commit(replace(self._state, status=parse_status(status), page=1))

    def on_sort(self, column: Union[SortColumn, str]) -> OrdersView:
        sort_by = parse_sort_column(column)
        if sort_by == self._state.sort_by:
            direction = SortDirection.DESC if self._state.sort_direction == SortDirection.ASC else SortDirection.ASC
        else:
            direction = SortDirection.ASC
        logger.debug("on_sort column=%s direction=%s", sort_by.value, direction.value)
        return self._commit(replace(self._state, sort_by=sort_by, sort_direction=direction))

    def on_page_change(self, page: int) -> OrdersView:
        logger.debug("on_page_change page=%s", page)
        # QueryState rejects page < 1, so clamp the low side before committing.
        return self._commit(replace(self._state, page=max(1, int(page))))

    def on_selection_change(self, ids: Iterable[str]) -> OrdersView:
        self._selection.set_selection(ids)
        logger.debug("on_selection_change selected=%d", len(self._selection))
        return self._commit(self._state)

    def toggle_selected(self, order_id: str) -> OrdersView:
        self._selection.toggle(order_id)
        return self._commit(self._state)

    def set_records(self, records: Sequence[Order]) -> OrdersView:
        """Replace the source set; selected ids missing from it are dropped."""
        self._records = list(records)
        removed = self._selection.prune(order.id for order in self._records)
        if removed:
            logger.info("Pruned %d selected ids no longer in the source set", len(removed))
        return self._commit(self._state)

    def _commit(self, state: QueryState) -> OrdersView:
        self._state = state
        self._view = self._recompute()
        return self._view

    def _recompute(self) -> OrdersView:
        view = compute_orders_view(self._records, self._state, self._selection.selected)
        self._state = view.state
        return view

