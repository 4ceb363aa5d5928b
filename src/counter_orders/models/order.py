import enum
from sqlalchemy import CheckConstraint, Column, Integer, DateTime, Enum as SAEnum, func
from ..db.base import Base


class OrderStatusEnum(str, enum.Enum):
    received = "received"
    ready = "ready"
    completed = "completed"


# Допустимые переходы статусов заказа
ORDER_TRANSITIONS = {
    OrderStatusEnum.received: frozenset({OrderStatusEnum.ready}),
    OrderStatusEnum.ready: frozenset({OrderStatusEnum.completed}),
    OrderStatusEnum.completed: frozenset(),
}


def can_transition(current: OrderStatusEnum, target: OrderStatusEnum) -> bool:
    return target in ORDER_TRANSITIONS[current]


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("total_cost >= 0", name="ck_orders_total_cost_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    status = Column(
        SAEnum(OrderStatusEnum, name="order_status"),
        nullable=False,
        default=OrderStatusEnum.received,
        index=True,
    )
    total_cost = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
