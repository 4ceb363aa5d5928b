import asyncio
import os

import pytest
import pytest_asyncio
from sqlalchemy.pool import NullPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./counter_orders_test.db")

from counter_orders.db.base import Base  # noqa: E402
from counter_orders.db.session import build_engine, build_sessionmaker  # noqa: E402
from counter_orders.models import MenuItem  # noqa: E402

MENU = [
    {"id": 1, "name": "Tea", "price": 150, "category": "drinks"},
    {"id": 2, "name": "Cake", "price": 400, "category": "desserts"},
    {"id": 3, "name": "Sandwich", "price": 525, "category": "food"},
    {"id": 4, "name": "Water", "price": 0, "category": "drinks"},
]


async def _create_schema(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _seed_menu(sessionmaker):
    async with sessionmaker() as session:
        session.add_all(MenuItem(**item) for item in MENU)
        await session.commit()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    await _create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine):
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def menu(sessionmaker):
    """Seed the menu and return {menu_item_id: price}."""
    await _seed_menu(sessionmaker)
    return {item["id"]: item["price"] for item in MENU}


@pytest_asyncio.fixture
async def session(sessionmaker, menu):
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def api_sessionmaker(tmp_path):
    """Sessionmaker for API tests.

    TestClient runs the app on its own event loop, so connections are not pooled.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}", poolclass=NullPool)
    sessionmaker = build_sessionmaker(engine)

    asyncio.run(_create_schema(engine))
    asyncio.run(_seed_menu(sessionmaker))

    return sessionmaker
