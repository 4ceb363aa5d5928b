from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from counter_orders.config import settings


def build_engine(url: str, echo: bool = False, **engine_kwargs) -> AsyncEngine:
    """
    Создаёт асинхронный движок.
    Для PostgreSQL каждый запрос ограничен таймаутами из настроек,
    для SQLite включаются внешние ключи.
    """
    backend = make_url(url).get_backend_name()
    kwargs = {"echo": echo, **engine_kwargs}

    if backend == "postgresql":
        kwargs.setdefault("pool_timeout", settings.DB_POOL_TIMEOUT)

        # таймауты добавляются к connect_args вызывающего, а не заменяют их
        connect_args = dict(kwargs.get("connect_args") or {})
        connect_args.setdefault("command_timeout", settings.DB_COMMAND_TIMEOUT)
        server_settings = dict(connect_args.get("server_settings") or {})
        server_settings.setdefault("statement_timeout", str(int(settings.DB_COMMAND_TIMEOUT * 1000)))
        connect_args["server_settings"] = server_settings
        kwargs["connect_args"] = connect_args

    engine = create_async_engine(url, **kwargs)

    if backend == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# Асинхронный движок
engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

# Фабрика сессий
AsyncSessionLocal = build_sessionmaker(engine)


