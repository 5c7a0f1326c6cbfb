from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class OrdersQueryModel(BaseModel):
    search: str = ""
    status: Optional[str] = None
    sort_by: str = "date"
    sort_direction: str = "desc"
    page: int = 1
    items_per_page: Optional[int] = None
    selected: List[str] = Field(default_factory=list)


class SortRequestModel(BaseModel):
    query: OrdersQueryModel = Field(default_factory=OrdersQueryModel)
    column: str


class OrderUserModel(BaseModel):
    name: str
    avatar: str = ""


class OrderModel(BaseModel):
    id: str
    user: OrderUserModel
    project: str
    address: str
    date: str
    status: str


class QueryStateModel(BaseModel):
    search: str
    status: Optional[str]
    sort_by: str
    sort_direction: str
    page: int
    items_per_page: int


class OrdersPageResponse(BaseModel):
    items: List[OrderModel]
    page: int
    total_pages: int
    total_items: int
    query: QueryStateModel
    selected: List[str]
