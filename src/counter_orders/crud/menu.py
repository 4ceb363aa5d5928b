from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from counter_orders.errors import NotFoundError, translate_db_error
from counter_orders.models import MenuItem


async def list_menu_items(db: AsyncSession, category: Optional[str] = None) -> List[MenuItem]:
    """
    Возвращает меню, опционально только одну категорию.
    """
    stmt = select(MenuItem).order_by(MenuItem.id)
    if category:
        stmt = stmt.where(MenuItem.category == category)

    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        raise translate_db_error(exc) from exc

    items = list(result.scalars().all())
    for item in items:
        db.expunge(item)
    return items


async def get_menu_item(db: AsyncSession, menu_item_id: int) -> MenuItem:
    try:
        menu_item = await db.get(MenuItem, menu_item_id)
    except SQLAlchemyError as exc:
        raise translate_db_error(exc) from exc
    if menu_item is None:
        raise NotFoundError(f"Menu item with id={menu_item_id} not found")
    db.expunge(menu_item)
    return menu_item
