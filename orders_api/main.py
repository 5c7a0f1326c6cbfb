from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from orders_api.schemas import OrderModel, OrderUserModel, OrdersPageResponse, OrdersQueryModel, QueryStateModel, SortRequestModel
from orders_core.controller import OrdersController
from orders_core.data import load_dashboard_orders, orders_to_frame
from orders_core.filters import QueryState, normalize_query
from orders_core.models import Order, OrderStatus, SortColumn, parse_sort_column
from orders_core.pipeline import compute_orders_view, query_orders


app = FastAPI(title="Orders Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _query_from_model(model: OrdersQueryModel) -> QueryState:
    return normalize_query(model.model_dump(exclude={"selected"}))


def _order_model(order: Order) -> OrderModel:
    return OrderModel(
        id=order.id,
        user=OrderUserModel(name=order.user.name, avatar=order.user.avatar),
        project=order.project,
        address=order.address,
        date=order.date.isoformat(),
        status=order.status.value,
    )


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/statuses")
def meta_statuses():
    return {"statuses": [s.value for s in OrderStatus]}


@app.get("/meta/columns")
def meta_columns():
    return {"columns": [c.value for c in SortColumn]}


@app.post("/orders/query", response_model=OrdersPageResponse)
def orders_query(query: OrdersQueryModel):
    try:
        state = _query_from_model(query)
    except ValueError as exc:
        return _error(400, exc)
    try:
        orders = load_dashboard_orders()
        known_ids = {o.id for o in orders}
        selected: List[str] = sorted(i for i in set(query.selected) if i in known_ids)
        view = compute_orders_view(orders, state, selected)
        return OrdersPageResponse(
            items=[_order_model(o) for o in view.items],
            page=view.page,
            total_pages=view.total_pages,
            total_items=view.total_items,
            query=QueryStateModel(**view.state.to_dict()),
            selected=selected,
        )
    except Exception as exc:
        logger.exception("orders_query failed")
        return _error(500, exc)


@app.post("/orders/sort", response_model=QueryStateModel)
def orders_sort(request: SortRequestModel):
    try:
        state = _query_from_model(request.query)
        column = parse_sort_column(request.column)
    except ValueError as exc:
        return _error(400, exc)
    try:
        controller = OrdersController(load_dashboard_orders(), state)
        controller.on_sort(column)
        return QueryStateModel(**controller.state.to_dict())
    except Exception as exc:
        logger.exception("orders_sort failed")
        return _error(500, exc)


@app.post("/export/orders")
def export_orders(query: OrdersQueryModel):
    try:
        state = _query_from_model(query)
    except ValueError as exc:
        return _error(400, exc)
    try:
        rows = query_orders(load_dashboard_orders(), state)
        csv_bytes = orders_to_frame(rows).to_csv(index=False).encode("utf-8")
    except Exception as exc:
        logger.exception("export_orders failed")
        return _error(500, exc)
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": "attachment; filename=orders.csv"})
