from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from counter_orders.errors import ReferentialError
from counter_orders.models import MenuItem, OrderItem


async def resolve_total(db: AsyncSession, order_id: int) -> int:
    """
    Считает стоимость заказа по текущим ценам меню: sum(quantity * price).
    Выполняется в сессии вызывающего, поэтому видит ещё не закоммиченные позиции.
    """
    stmt = (
        select(
            func.count(OrderItem.id).label("count_lines"),
            func.count(MenuItem.id).label("count_priced"),
            func.coalesce(func.sum(OrderItem.quantity * MenuItem.price), 0).label("total_cost"),
        )
        .select_from(OrderItem)
        .outerjoin(MenuItem, MenuItem.id == OrderItem.menu_item_id)
        .where(OrderItem.order_id == order_id)
    )

    result = await db.execute(stmt)
    row = result.one()

    # позиция без пары в меню -> нарушение ссылочной целостности, а не ноль
    if row.count_priced != row.count_lines:
        raise ReferentialError(
            f"Order {order_id} references {row.count_lines - row.count_priced} missing menu item(s)"
        )

    return int(row.total_cost)
