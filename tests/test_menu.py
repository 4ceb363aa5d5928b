import pytest

from counter_orders.crud.menu import get_menu_item, list_menu_items
from counter_orders.errors import NotFoundError


class TestMenuCatalog:
    async def test_lists_whole_menu(self, session):
        items = await list_menu_items(session)

        assert [(i.id, i.name, i.price) for i in items] == [
            (1, "Tea", 150),
            (2, "Cake", 400),
            (3, "Sandwich", 525),
            (4, "Water", 0),
        ]

    async def test_filters_by_category(self, session):
        items = await list_menu_items(session, category="drinks")

        assert [i.name for i in items] == ["Tea", "Water"]

    async def test_get_menu_item(self, session):
        item = await get_menu_item(session, 2)

        assert item.name == "Cake"
        assert item.price == 400

    async def test_missing_menu_item(self, session):
        with pytest.raises(NotFoundError):
            await get_menu_item(session, 999)
