from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from orders_core.models import Order, OrderStatus, OrderUser


logger = logging.getLogger(__name__)

ORDERS_DATA_PATH = os.getenv("ORDERS_DATA_PATH", "")

ORDER_COLUMNS = {
    "Order ID": "id",
    "Order": "id",
    "ID": "id",
    "id": "id",
    "User": "user_name",
    "User Name": "user_name",
    "user": "user_name",
    "user_name": "user_name",
    "Avatar": "user_avatar",
    "user_avatar": "user_avatar",
    "Project": "project",
    "project": "project",
    "Address": "address",
    "address": "address",
    "Date": "date",
    "date": "date",
    "Status": "status",
    "status": "status",
}

EXPORT_COLUMNS = ["id", "user_name", "user_avatar", "project", "address", "date", "status"]

_DEMO_USERS = [
    ("Natali Craig", "avatars/natali.png"),
    ("Kate Morrison", "avatars/kate.png"),
    ("Drew Cano", "avatars/drew.png"),
    ("Orlando Diggs", "avatars/orlando.png"),
    ("Andi Lane", "avatars/andi.png"),
]
_DEMO_PROJECTS = ["Landing Page", "CRM Admin pages", "Client Project", "Admin Dashboard", "App Landing Page"]
_DEMO_ADDRESSES = [
    "Meadow Lane Oakland",
    "Larry San Francisco",
    "Bagwell Avenue Ocala",
    "Washburn Baton Rouge",
    "Nest Lane Olivette",
]
_DEMO_STATUSES = list(OrderStatus)
_DEMO_START = datetime(2024, 1, 2, 9, 30)

DEMO_ORDER_ROWS: List[Dict[str, str]] = [
    {
        "id": f"#CM98{i + 1:02d}",
        "user_name": _DEMO_USERS[i % 5][0],
        "user_avatar": _DEMO_USERS[i % 5][1],
        "project": _DEMO_PROJECTS[(i * 2) % 5],
        "address": _DEMO_ADDRESSES[(i * 3) % 5],
        "date": (_DEMO_START + timedelta(days=i * 3, hours=i)).isoformat(),
        "status": _DEMO_STATUSES[(i + i // 5) % 5].value,
    }
    for i in range(25)
]


def rename_order_columns(df: pd.DataFrame) -> pd.DataFrame:
    renamed = df.rename(columns={c: ORDER_COLUMNS[c] for c in df.columns if c in ORDER_COLUMNS})
    return renamed.loc[:, ~renamed.columns.duplicated()]


def flatten_order_user(df: pd.DataFrame) -> pd.DataFrame:
    """Expand nested ``user: {name, avatar}`` objects into flat user columns."""
    if "user" not in df.columns or not df["user"].map(lambda v: isinstance(v, dict)).any():
        return df
    users = pd.json_normalize([v if isinstance(v, dict) else {"name": v} for v in df["user"]])
    users.index = df.index
    df = df.drop(columns=["user"])
    df["user_name"] = users["name"] if "name" in users.columns else ""
    df["user_avatar"] = users["avatar"] if "avatar" in users.columns else ""
    return df


def orders_from_frame(df: pd.DataFrame) -> List[Order]:
    """Convert a raw orders table into Order records, dropping rows that cannot be used."""
    if df is None or df.empty:
        return []
    df = rename_order_columns(flatten_order_user(df.copy()))
    missing = {"id", "date", "status"} - set(df.columns)
    if missing:
        raise ValueError(f"Orders table is missing columns: {sorted(missing)}")

    for col in ["id", "user_name", "user_avatar", "project", "address", "status"]:
        if col not in df.columns:
            df[col] = ""
        df[col] = df[col].fillna("").astype(str).str.strip()
    df["status"] = df["status"].str.lower()
    # Offsets are folded into naive UTC so every date compares with every other.
    df["date"] = pd.to_datetime(df["date"], errors="coerce", format="mixed", utc=True).dt.tz_convert(None)

    valid_statuses = {s.value for s in OrderStatus}
    usable = df["id"].ne("") & df["date"].notna() & df["status"].isin(valid_statuses)
    dropped = int((~usable).sum())
    if dropped:
        logger.warning("Dropped %d order rows with blank id, bad date or unknown status", dropped)
    df = df[usable]

    duplicated = df["id"].duplicated(keep="first")
    if duplicated.any():
        logger.warning("Dropped %d order rows with duplicate ids", int(duplicated.sum()))
        df = df[~duplicated]

    return [
        Order(
            id=row.id,
            user=OrderUser(name=row.user_name, avatar=row.user_avatar),
            project=row.project,
            address=row.address,
            date=row.date.to_pydatetime(),
            status=OrderStatus(row.status),
        )
        for row in df[EXPORT_COLUMNS].itertuples(index=False)
    ]


def orders_to_frame(orders: Sequence[Order]) -> pd.DataFrame:
    rows = [
        {
            "id": o.id,
            "user_name": o.user.name,
            "user_avatar": o.user.avatar,
            "project": o.project,
            "address": o.address,
            "date": o.date.isoformat(),
            "status": o.status.value,
        }
        for o in orders
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def demo_orders() -> List[Order]:
    return orders_from_frame(pd.DataFrame(DEMO_ORDER_ROWS))


def file_signature(path: Path) -> Tuple[str, float]:
    return (str(path.resolve()), path.stat().st_mtime)


def read_orders_table(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, dtype=str)
    if suffix == ".json":
        return pd.read_json(path, orient="records", dtype=False)
    if suffix in {".xlsx", ".xls"}:
        return pd.read_excel(path, dtype=str)
    raise ValueError(f"Unsupported orders file type: {path.suffix}")


@lru_cache(maxsize=4)
def _load_orders_cached(file_sig: Tuple[str, float]) -> Tuple[Order, ...]:
    path = Path(file_sig[0])
    orders = orders_from_frame(read_orders_table(path))
    logger.info("Loaded %d orders from %s", len(orders), path.name)
    return tuple(orders)


def load_orders(path: str | Path) -> List[Order]:
    return list(_load_orders_cached(file_signature(Path(path))))


def load_dashboard_orders(path: Optional[str | Path] = None) -> List[Order]:
    """Orders from ``path`` / ORDERS_DATA_PATH when the file exists, else the demo set."""
    source = Path(path or ORDERS_DATA_PATH) if (path or ORDERS_DATA_PATH) else None
    if source is None or not source.is_file():
        if source is not None:
            logger.warning("Orders file %s not found; using demo orders", source)
        return demo_orders()
    return load_orders(source)
