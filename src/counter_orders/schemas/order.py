from pydantic import BaseModel, StrictInt, conint
from typing import List, Optional
from datetime import datetime

from counter_orders.models.order import OrderStatusEnum


class OrderRead(BaseModel):
    id: int
    status: OrderStatusEnum
    total_cost: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderDetailRead(BaseModel):
    menu_item_id: int
    name: str
    quantity: int
    line_total: int

    class Config:
        from_attributes = True


class OrderWithDetails(BaseModel):
    order: OrderRead
    details: List[OrderDetailRead] = []


class OrderItemCreate(BaseModel):
    menu_item_id: StrictInt
    quantity: conint(ge=1, strict=True)


class OrderCreate(BaseModel):
    items: List[OrderItemCreate] = []

    class Config:
        extra = "forbid"


class OrderStatusUpdate(BaseModel):
    status: OrderStatusEnum

    class Config:
        extra = "forbid"
