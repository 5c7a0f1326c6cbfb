from __future__ import annotations

from typing import FrozenSet, Iterable


class SelectionTracker:
    """Set of selected order ids.

    The tracker knows nothing about filters or pages: ids stay selected while
    their rows are filtered out of view, and only ``prune`` (called when the
    full source set is replaced) drops them implicitly.
    """

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._selected: FrozenSet[str] = frozenset(ids)

    @property
    def selected(self) -> FrozenSet[str]:
        return self._selected

    def set_selection(self, ids: Iterable[str]) -> None:
        self._selected = frozenset(ids)

    def toggle(self, order_id: str) -> None:
        if order_id in self._selected:
            self.set_selection(self._selected - {order_id})
        else:
            self.set_selection(self._selected | {order_id})

    def clear(self) -> None:
        self.set_selection(())

    def is_selected(self, order_id: str) -> bool:
        return order_id in self._selected

    def prune(self, valid_ids: Iterable[str]) -> FrozenSet[str]:
        """Drop ids not in ``valid_ids``; returns the removed ids."""
        valid = frozenset(valid_ids)
        removed = self._selected - valid
        if removed:
            self.set_selection(self._selected & valid)
        return removed

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._selected

    def __len__(self) -> int:
        return len(self._selected)


def merge_page_selection(selected: Iterable[str], visible_ids: Iterable[str], checked_ids: Iterable[str]) -> FrozenSet[str]:
    """Selection after a table edit: ids off the page are kept, on-page ids follow their checkboxes."""
    return (frozenset(selected) - frozenset(visible_ids)) | frozenset(checked_ids)
