# academy/db/session.py
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from academy.core.settings import settings


def _engine_options(url: str) -> dict[str, Any]:
    """Postgres gets connection health checks; SQLite (local runs, tests) gets none."""
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


def build_engine(url: str) -> AsyncEngine:
    engine = create_async_engine(url, echo=False, **_engine_options(url))
    if engine.dialect.name == "sqlite":
        # cascades rely on FK enforcement, which SQLite leaves off by default
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.DATABASE_ASYNC_URL)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,  # loaded attributes stay usable after commit
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """One session per request, shared by every dependency of that request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    from academy.db.models.database import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
