"""Pytest configuration to make the local packages importable without installation."""
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from orders_core.models import Order, OrderStatus, OrderUser


def make_order(
    order_id: str,
    *,
    user: str = "Natali Craig",
    project: str = "Landing Page",
    address: str = "Meadow Lane Oakland",
    date: str = "2024-01-01",
    status: OrderStatus = OrderStatus.PENDING,
) -> Order:
    return Order(
        id=order_id,
        user=OrderUser(name=user),
        project=project,
        address=address,
        date=datetime.fromisoformat(date),
        status=status,
    )


@pytest.fixture
def order_factory():
    """Expose the order builder to tests that need one-off records."""

    return make_order


@pytest.fixture
def orders_25() -> list[Order]:
    """Twenty-five orders ORD-1..ORD-25; only ORD-3, ORD-13 and ORD-23 are on the Atlas project."""

    statuses = list(OrderStatus)
    start = datetime(2024, 1, 1)
    return [
        Order(
            id=f"ORD-{i}",
            user=OrderUser(name=f"User {i:02d}"),
            project="Atlas" if i % 10 == 3 else "Landing Page",
            address=f"{i} Main Street",
            date=start + timedelta(days=i),
            status=statuses[i % len(statuses)],
        )
        for i in range(1, 26)
    ]


@pytest.fixture(autouse=True)
def no_orders_file(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests on the demo dataset unless a test points ORDERS_DATA_PATH elsewhere."""

    monkeypatch.setattr("orders_core.data.ORDERS_DATA_PATH", "")
