from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from news_app.middleware import install_query_counter


class Base(DeclarativeBase):
    pass


def create_engine(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """
    Build an async engine for *url* with the per-request query counter
    installed.  Called once at startup (and once per test).
    """
    engine = create_async_engine(url, echo=echo, pool_pre_ping=True, **kwargs)
    install_query_counter(engine)
    if engine.dialect.name == "sqlite":
        install_unicode_lower(engine)
    return engine


def _fold_case(value):
    return value.lower() if isinstance(value, str) else value


def install_unicode_lower(engine: AsyncEngine) -> None:
    """
    Replace SQLite's ASCII-only ``lower()`` with ``str.lower`` on every new
    connection, so ``ILIKE``-style searches fold accented letters too.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _register_lower(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _fold_case)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables.  Production schemas are managed by Alembic."""
    # Import models so they register on Base.metadata.
    import news_app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
