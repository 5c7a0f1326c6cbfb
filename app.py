from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from orders_core.controller import OrdersController
from orders_core.data import load_dashboard_orders, orders_to_frame
from orders_core.models import OrderStatus, SortColumn, SortDirection
from orders_core.pipeline import query_orders
from orders_core.selection import merge_page_selection

CONTROLLER_KEY = "orders_controller"
STATUS_ALL = "All"
COLUMN_LABELS = {
    SortColumn.ID: "Order ID",
    SortColumn.USER: "User",
    SortColumn.PROJECT: "Project",
    SortColumn.ADDRESS: "Address",
    SortColumn.DATE: "Date",
    SortColumn.STATUS: "Status",
}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, breadcrumb: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "orders.csv"):
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )


def get_controller() -> OrdersController:
    if CONTROLLER_KEY not in st.session_state:
        st.session_state[CONTROLLER_KEY] = OrdersController(load_dashboard_orders())
    return st.session_state[CONTROLLER_KEY]


def sort_label(column: SortColumn, ctrl: OrdersController) -> str:
    label = COLUMN_LABELS[column]
    if ctrl.state.sort_by != column:
        return label
    return f"{label} {'▲' if ctrl.state.sort_direction == SortDirection.ASC else '▼'}"


# ---------- callbacks ----------
def _on_search():
    get_controller().on_search_change(st.session_state.get("search", ""))


def _on_status():
    value = st.session_state.get("status_filter", STATUS_ALL)
    get_controller().on_status_filter_change(None if value == STATUS_ALL else value)


# ---------- page ----------
st.set_page_config(page_title="Orders", layout="wide")
inject_base_styles()

ctrl = get_controller()
export_df = orders_to_frame(query_orders(ctrl.records, ctrl.state))
render_page_header("Order List", "Dashboards / Orders", export_df)

with st.sidebar:
    st.markdown("### Filters")
    st.text_input("Search", value=ctrl.state.search, key="search", on_change=_on_search)
    status_options = [STATUS_ALL] + [s.value for s in OrderStatus]
    current_status = ctrl.state.status.value if ctrl.state.status else STATUS_ALL
    st.selectbox(
        "Status",
        options=status_options,
        index=status_options.index(current_status),
        key="status_filter",
        on_change=_on_status,
    )

with card("Orders"):
    sort_cols = st.columns(len(COLUMN_LABELS))
    for col_box, column in zip(sort_cols, COLUMN_LABELS):
        col_box.button(sort_label(column, ctrl), key=f"sort_{column.value}", on_click=ctrl.on_sort, args=(column,))

    view = ctrl.view
    table = pd.DataFrame(
        [
            {
                "Select": order.id in ctrl.selection,
                "Order ID": order.id,
                "User": order.user.name,
                "Project": order.project,
                "Address": order.address,
                "Date": order.date.strftime("%b %d, %Y"),
                "Status": order.status.value,
            }
            for order in view.items
        ],
        columns=["Select"] + list(COLUMN_LABELS.values()),
    )
    if table.empty:
        st.info("No orders match the current filters.")
    else:
        editor_key = "orders_editor_" + "_".join(str(v) for v in view.state.to_dict().values())
        edited = st.data_editor(
            table,
            key=editor_key,
            hide_index=True,
            disabled=list(COLUMN_LABELS.values()),
        )
        checked = edited.loc[edited["Select"].astype(bool), "Order ID"]
        new_selection = merge_page_selection(ctrl.selected, (order.id for order in view.items), checked)
        if new_selection != ctrl.selected:
            ctrl.on_selection_change(new_selection)

    nav_prev, nav_label, nav_next = st.columns([1, 3, 1])
    nav_prev.button("Previous", disabled=view.page <= 1, on_click=ctrl.on_page_change, args=(view.page - 1,))
    nav_label.caption(f"Page {view.page} of {view.total_pages} · {view.total_items} orders · {len(ctrl.selection)} selected")
    nav_next.button("Next", disabled=view.page >= view.total_pages, on_click=ctrl.on_page_change, args=(view.page + 1,))
