import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from counter_orders.api import health
from counter_orders.api.routes.menu import router as menu_router
from counter_orders.api.routes.orders import router as orders_router
from counter_orders.config import settings
from counter_orders.db.session import engine

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Application started")
    yield
    await engine.dispose()
    logger.info("🛑 Application stopped")


app = FastAPI(title="Counter Orders", lifespan=lifespan)

# Подключаем роуты
app.include_router(health.router)
app.include_router(menu_router)
app.include_router(orders_router)
