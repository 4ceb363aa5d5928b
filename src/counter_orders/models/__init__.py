from .menu_item import MenuItem
from .order import Order, OrderStatusEnum, ORDER_TRANSITIONS, can_transition
from .order_item import OrderItem

__all__ = [
    "MenuItem",
    "Order",
    "OrderStatusEnum",
    "ORDER_TRANSITIONS",
    "can_transition",
    "OrderItem",
]
