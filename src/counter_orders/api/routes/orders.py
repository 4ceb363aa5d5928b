from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from counter_orders.crud.order import create_order, get_order, list_orders, transition
from counter_orders.db.deps import get_async_session
from counter_orders.errors import (
    ConcurrencyError,
    InvalidTransitionError,
    NotFoundError,
    OrderLedgerError,
    ReferentialError,
    ValidationError,
)
from counter_orders.models.order import OrderStatusEnum
from counter_orders.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate, OrderWithDetails


router = APIRouter(prefix="/orders", tags=["orders"])


def _to_http(e: OrderLedgerError) -> HTTPException:
    """
    Сопоставляет ошибку ядра с HTTP-статусом.
    """
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (ValidationError, ReferentialError)):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, (InvalidTransitionError, ConcurrencyError)):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=503, detail=str(e))


@router.get("/", response_model=List[OrderRead])
async def list_orders_endpoint(
    status: Optional[OrderStatusEnum] = Query(None, description="Фильтр по статусу"),
    limit: Optional[int] = Query(None, ge=1, description="Количество записей для вывода"),
    offset: Optional[int] = Query(None, ge=0, description="Смещение для пагинации"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает список заказов.
    Поддерживает фильтрацию по статусу и пагинацию.
    """
    try:
        return await list_orders(db, status=status, limit=limit, offset=offset)
    except OrderLedgerError as e:
        raise _to_http(e)


@router.post("/", response_model=OrderRead, status_code=201)
async def create_order_endpoint(order_in: OrderCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Создаёт заказ и возвращает его с уже посчитанной стоимостью.
    """
    try:
        return await create_order(db, order_in.items)
    except OrderLedgerError as e:
        raise _to_http(e)


@router.get("/{order_id}", response_model=OrderWithDetails)
async def get_order_endpoint(
    order_id: int = Path(..., description="ID заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает детализацию заказа по id.
    """
    try:
        return await get_order(db, order_id)
    except OrderLedgerError as e:
        raise _to_http(e)


@router.patch("/{order_id}/status", response_model=OrderRead)
async def patch_order_status_endpoint(
    order_in: OrderStatusUpdate,
    order_id: int = Path(..., description="ID заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Переводит заказ в указанный статус.
    """
    try:
        return await transition(db, order_id, order_in.status)
    except OrderLedgerError as e:
        raise _to_http(e)


@router.put("/{order_id}/ready", response_model=OrderRead)
async def order_ready_endpoint(
    order_id: int = Path(..., description="ID заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await transition(db, order_id, OrderStatusEnum.ready)
    except OrderLedgerError as e:
        raise _to_http(e)


@router.put("/{order_id}/completed", response_model=OrderRead)
async def order_completed_endpoint(
    order_id: int = Path(..., description="ID заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await transition(db, order_id, OrderStatusEnum.completed)
    except OrderLedgerError as e:
        raise _to_http(e)
