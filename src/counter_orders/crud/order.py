import logging
from collections.abc import Mapping
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from counter_orders.crud.pricing import resolve_total
from counter_orders.errors import (
    InvalidTransitionError,
    NotFoundError,
    OrderLedgerError,
    ReferentialError,
    ValidationError,
    translate_db_error,
)
from counter_orders.models import MenuItem, Order, OrderItem, OrderStatusEnum, can_transition
from counter_orders.schemas.order import OrderDetailRead, OrderRead, OrderWithDetails

logger = logging.getLogger(__name__)


def _transaction(db: AsyncSession):
    """
    Атомарная область для операции ядра.
    Если у сессии уже открыта транзакция, работаем в SAVEPOINT,
    иначе открываем и коммитим собственную.
    """
    if db.in_transaction():
        return db.begin_nested()
    return db.begin()


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _normalize_items(items) -> List[Tuple[int, int]]:
    """
    Приводит позиции к парам (menu_item_id, quantity).
    Принимает кортежи, словари и объекты с атрибутами menu_item_id / quantity.
    """
    try:
        iterator = iter(items)
    except TypeError:
        raise ValidationError(f"items must be a sequence, got {type(items).__name__}") from None

    lines = []
    for index, item in enumerate(iterator):
        if isinstance(item, Mapping):
            menu_item_id, quantity = item.get("menu_item_id"), item.get("quantity")
        elif hasattr(item, "menu_item_id"):
            menu_item_id, quantity = item.menu_item_id, getattr(item, "quantity", None)
        else:
            try:
                menu_item_id, quantity = item
            except (TypeError, ValueError):
                raise ValidationError(f"items[{index}]: expected (menu_item_id, quantity) pair") from None

        if not _is_int(menu_item_id):
            raise ValidationError(f"items[{index}]: menu_item_id must be an integer, got {menu_item_id!r}")
        if not _is_int(quantity) or quantity <= 0:
            raise ValidationError(f"items[{index}]: quantity must be a positive integer, got {quantity!r}")

        lines.append((menu_item_id, quantity))

    return lines


def _coerce_status(value) -> OrderStatusEnum:
    if isinstance(value, OrderStatusEnum):
        return value
    try:
        return OrderStatusEnum(value)
    except ValueError:
        raise ValidationError(f"Invalid status: {value!r}") from None


async def create_order(db: AsyncSession, items: Iterable) -> Order:
    """
    Создаёт заказ со статусом received, пишет позиции и итоговую стоимость
    в одной транзакции. При любой ошибке откатывается всё, включая сам заказ.
    """
    lines = _normalize_items(items)

    try:
        async with _transaction(db):
            # создаём заказ, total_cost пока не окончательный
            order = Order(status=OrderStatusEnum.received, total_cost=0)
            db.add(order)
            await db.flush()

            # создаём позиции заказа одной пачкой
            db.add_all(
                OrderItem(order_id=order.id, menu_item_id=menu_item_id, quantity=quantity)
                for menu_item_id, quantity in lines
            )
            await db.flush()

            order.total_cost = await resolve_total(db, order.id)
            await db.flush()
            await db.refresh(order)
    except SQLAlchemyError as exc:
        error = translate_db_error(exc)
        logger.warning("Order creation rolled back: %s", error)
        raise error from exc
    except OrderLedgerError as exc:
        logger.warning("Order creation rolled back: %s", exc)
        raise

    # наружу отдаём отсоединённый объект
    db.expunge(order)
    logger.info("Order %s created: %d line(s), total_cost=%s", order.id, len(lines), order.total_cost)
    return order


async def transition(db: AsyncSession, order_id: int, target_status) -> Order:
    """
    Переводит заказ в следующий статус: received -> ready -> completed.
    Строка заказа блокируется на время транзакции (FOR UPDATE), а UPDATE
    проверяет исходный статус, так что два параллельных вызова не продвинут
    заказ дважды.
    """
    target = _coerce_status(target_status)

    try:
        async with _transaction(db):
            stmt = (
                select(Order)
                .where(Order.id == order_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            result = await db.execute(stmt)
            order = result.scalars().first()
            if order is None:
                raise NotFoundError(f"Order with id={order_id} not found")

            current = order.status
            if not can_transition(current, target):
                raise InvalidTransitionError(
                    f"Order {order_id}: transition {current.value} -> {target.value} is not allowed"
                )

            updated = await db.execute(
                update(Order)
                .where(Order.id == order_id, Order.status == current)
                .values(status=target)
                .execution_options(synchronize_session=False)
            )
            if updated.rowcount != 1:
                raise InvalidTransitionError(
                    f"Order {order_id}: status changed concurrently, {current.value} is stale"
                )

            await db.refresh(order)
    except SQLAlchemyError as exc:
        error = translate_db_error(exc)
        logger.warning("Transition of order %s to %s rolled back: %s", order_id, target.value, error)
        raise error from exc

    db.expunge(order)
    logger.info("Order %s: %s -> %s", order_id, current.value, target.value)
    return order


async def get_order(db: AsyncSession, order_id: int) -> OrderWithDetails:
    """
    Возвращает заказ с детализацией позиций: название, количество, сумма по строке.
    """
    try:
        async with _transaction(db):
            order = await db.get(Order, order_id, populate_existing=True)
            if order is None:
                raise NotFoundError(f"Order with id={order_id} not found")

            stmt = (
                select(
                    OrderItem.menu_item_id,
                    MenuItem.name,
                    OrderItem.quantity,
                    (OrderItem.quantity * MenuItem.price).label("line_total"),
                )
                .outerjoin(MenuItem, MenuItem.id == OrderItem.menu_item_id)
                .where(OrderItem.order_id == order_id)
                .order_by(OrderItem.id)
            )
            result = await db.execute(stmt)
            rows = result.all()

            missing = [row.menu_item_id for row in rows if row.name is None]
            if missing:
                raise ReferentialError(f"Order {order_id} references missing menu item(s): {missing}")
    except SQLAlchemyError as exc:
        raise translate_db_error(exc) from exc

    return OrderWithDetails(
        order=OrderRead.model_validate(order),
        details=[OrderDetailRead.model_validate(row) for row in rows],
    )


async def list_orders(
    db: AsyncSession,
    status=None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Order]:
    """
    Возвращает список заказов с точным совпадением статуса.
    Без статуса - все заказы. Порядок по id, но контрактом не является.
    """
    stmt = select(Order).order_by(Order.id).execution_options(populate_existing=True)

    if status is not None:
        stmt = stmt.where(Order.status == _coerce_status(status))
    if limit:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)

    try:
        async with _transaction(db):
            result = await db.execute(stmt)
            orders = list(result.scalars().all())
    except SQLAlchemyError as exc:
        raise translate_db_error(exc) from exc

    for order in orders:
        db.expunge(order)
    return orders
