from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETE = "complete"
    IN_PROGRESS = "in-progress"
    APPROVED = "approved"
    REJECTED = "rejected"


class SortColumn(str, Enum):
    ID = "id"
    USER = "user"
    DATE = "date"
    STATUS = "status"
    PROJECT = "project"
    ADDRESS = "address"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class UnknownSortColumnError(ValueError):
    """Raised when a caller asks to sort by a column the engine does not know."""


@dataclass(frozen=True)
class OrderUser:
    name: str
    avatar: str = ""


@dataclass(frozen=True)
class Order:
    id: str
    user: OrderUser
    project: str
    address: str
    date: datetime
    status: OrderStatus


def parse_sort_column(value: object) -> SortColumn:
    if isinstance(value, SortColumn):
        return value
    try:
        return SortColumn(str(value).strip().lower())
    except ValueError as exc:
        raise UnknownSortColumnError(f"Unknown sort column: {value!r}") from exc


def parse_status(value: object) -> Optional[OrderStatus]:
    """Return the status for ``value``; ``None``, ``""`` and ``"all"`` mean no filter."""
    if value is None or isinstance(value, OrderStatus):
        return value
    text = str(value).strip().lower()
    if not text or text == "all":
        return None
    try:
        return OrderStatus(text)
    except ValueError as exc:
        raise ValueError(f"Unknown order status: {value!r}") from exc
