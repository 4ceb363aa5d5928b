from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from counter_orders.crud.menu import get_menu_item, list_menu_items
from counter_orders.db.deps import get_async_session
from counter_orders.errors import NotFoundError, StorageError
from counter_orders.schemas.menu import MenuItemRead


router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("/", response_model=List[MenuItemRead])
async def list_menu(
    category: Optional[str] = Query(None, description="Фильтр по категории"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает меню.
    """
    try:
        return await list_menu_items(db, category=category)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{menu_item_id}", response_model=MenuItemRead)
async def get_menu_item_endpoint(
    menu_item_id: int = Path(..., description="ID позиции меню"),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await get_menu_item(db, menu_item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
