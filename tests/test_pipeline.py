"""Filter, sort and paginate stages are pure and deterministic."""
from orders_core.filters import QueryState
from orders_core.models import OrderStatus, SortColumn, SortDirection
from orders_core.pipeline import (
    clamp_page,
    compute_orders_view,
    filter_orders,
    paginate_orders,
    sort_orders,
)

from conftest import make_order


def _ids(orders):
    return [o.id for o in orders]


def test_empty_search_returns_input_unchanged(orders_25):
    assert filter_orders(orders_25, "") == orders_25


def test_search_matches_any_field_case_insensitively():
    orders = [
        make_order("CM-1", user="Kate Morrison"),
        make_order("CM-2", project="CRM Admin pages"),
        make_order("CM-3", address="Larry San Francisco"),
        make_order("X-4"),
    ]
    assert _ids(filter_orders(orders, "KATE")) == ["CM-1"]
    assert _ids(filter_orders(orders, "crm admin")) == ["CM-2"]
    assert _ids(filter_orders(orders, "francisco")) == ["CM-3"]
    assert _ids(filter_orders(orders, "cm-")) == ["CM-1", "CM-2", "CM-3"]
    assert filter_orders(orders, "nothing here") == []


def test_status_filter_composes_with_search(orders_25):
    status = OrderStatus.IN_PROGRESS
    stepwise = filter_orders(filter_orders(orders_25, "ord-1"), "", status)
    reverse = filter_orders(filter_orders(orders_25, "", status), "ord-1")
    combined = filter_orders(orders_25, "ord-1", status)
    assert stepwise == combined == reverse
    assert all(o.status is status and "ord-1" in o.id.lower() for o in combined)


def test_filter_does_not_mutate_input(orders_25):
    before = list(orders_25)
    filter_orders(orders_25, "atlas", OrderStatus.PENDING)
    assert orders_25 == before


def test_sort_by_date_uses_instant_not_text():
    orders = [make_order("B", date="2024-02-01"), make_order("A", date="2024-01-01")]
    assert _ids(sort_orders(orders, SortColumn.DATE, SortDirection.ASC)) == ["A", "B"]
    assert _ids(sort_orders(orders, SortColumn.DATE, SortDirection.DESC)) == ["B", "A"]
    assert _ids(orders) == ["B", "A"]


def test_string_sort_ignores_case():
    orders = [make_order("b"), make_order("C"), make_order("a")]
    assert _ids(sort_orders(orders, SortColumn.ID)) == ["a", "b", "C"]


def test_status_sorts_by_value_string():
    orders = [
        make_order("1", status=OrderStatus.REJECTED),
        make_order("2", status=OrderStatus.APPROVED),
        make_order("3", status=OrderStatus.IN_PROGRESS),
    ]
    assert _ids(sort_orders(orders, SortColumn.STATUS)) == ["2", "3", "1"]


def test_sort_is_stable_for_equal_keys_in_both_directions():
    orders = [
        make_order("first", user="Drew Cano"),
        make_order("second", user="andi lane"),
        make_order("third", user="drew cano"),
        make_order("fourth", user="Andi Lane"),
    ]
    assert _ids(sort_orders(orders, SortColumn.USER, SortDirection.ASC)) == ["second", "fourth", "first", "third"]
    assert _ids(sort_orders(orders, SortColumn.USER, SortDirection.DESC)) == ["first", "third", "second", "fourth"]


def test_descending_is_reverse_of_ascending_without_ties(orders_25):
    for column in SortColumn:
        if column in (SortColumn.STATUS, SortColumn.PROJECT):
            continue
        asc = sort_orders(orders_25, column, SortDirection.ASC)
        desc = sort_orders(orders_25, column, SortDirection.DESC)
        assert desc == list(reversed(asc)), column


def test_paginate_slice_bounds(orders_25):
    pages = [paginate_orders(orders_25, page, 10) for page in (1, 2, 3)]
    assert [len(p.items) for p in pages] == [10, 10, 5]
    assert {p.total_pages for p in pages} == {3}
    assert _ids(pages[2].items) == _ids(orders_25[20:])


def test_paginate_out_of_range_is_empty_not_error(orders_25):
    assert paginate_orders(orders_25, 4, 10).items == []
    assert paginate_orders(orders_25, 0, 10).items == []
    assert paginate_orders(orders_25, -2, 10).items == []


def test_paginate_even_division_and_empty_input(orders_25):
    assert [len(paginate_orders(orders_25[:20], p, 10).items) for p in (1, 2)] == [10, 10]
    empty = paginate_orders([], 1, 10)
    assert empty.items == [] and empty.total_pages == 0 and empty.total_items == 0


def test_clamp_page():
    assert clamp_page(0, 3) == 1
    assert clamp_page(8, 3) == 3
    assert clamp_page(2, 3) == 2
    assert clamp_page(5, 0) == 1


def test_view_clamps_out_of_range_pages(orders_25):
    low = compute_orders_view(orders_25, QueryState(page=1))
    high = compute_orders_view(orders_25, QueryState(page=3 + 5))
    last = compute_orders_view(orders_25, QueryState(page=3))
    assert high.items == last.items and high.page == 3 and high.state.page == 3
    assert low.page == 1


def test_view_of_empty_result_shows_one_page(orders_25):
    view = compute_orders_view(orders_25, QueryState(search="no such order", page=4))
    assert view.items == []
    assert view.total_pages == 1
    assert view.page == 1
    assert view.total_items == 0


def test_view_is_deterministic(orders_25):
    state = QueryState(search="ord", status=OrderStatus.PENDING, sort_by=SortColumn.USER, page=1, items_per_page=3)
    assert compute_orders_view(orders_25, state) == compute_orders_view(orders_25, state)
