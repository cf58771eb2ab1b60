# inkbook/db/session.py

from typing import Any, AsyncIterator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


# Declarative Base: all models inherit from this
class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/").endswith(":"))


class Database:
    """
    Owns the async engine and session factory.

    Built by the application lifespan and disposed at shutdown, so nothing
    connects at import time and tests can hand in their own engine.
    """

    def __init__(self, url: str, *, engine: Optional[AsyncEngine] = None, **engine_kwargs: Any):
        if engine is None:
            if _is_memory_sqlite(url):
                # one shared connection, otherwise every checkout sees an empty database
                engine_kwargs.setdefault("poolclass", StaticPool)
                engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
            else:
                engine_kwargs.setdefault("pool_pre_ping", True)  # avoids stale connection errors
            engine = create_async_engine(url, **engine_kwargs)
        self.engine = engine
        self.sessionmaker = async_sessionmaker(
            engine,
            expire_on_commit=False,  # keep objects usable after commit
            class_=AsyncSession,
        )

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


# FastAPI dependency: yields a session from the app-owned Database
async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.sessionmaker() as session:
        yield session
