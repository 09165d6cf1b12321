from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from config import settings

SQLITE_PREFIX = "sqlite:///"


def _async_url(url: str) -> str:
    """Route plain sqlite URLs through the aiosqlite driver."""
    if url.startswith(SQLITE_PREFIX):
        return "sqlite+aiosqlite:///" + url[len(SQLITE_PREFIX):]
    return url


def _engine_kwargs(url: str) -> dict:
    # An in-memory database lives only as long as its one connection
    if url.endswith(":memory:"):
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


if settings.DATABASE_URL.startswith(SQLITE_PREFIX) and not settings.DATABASE_URL.endswith(":memory:"):
    Path(settings.DATABASE_URL[len(SQLITE_PREFIX):]).parent.mkdir(parents=True, exist_ok=True)

engine = create_async_engine(
    _async_url(settings.DATABASE_URL),
    echo=False,
    **_engine_kwargs(settings.DATABASE_URL),
)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db():
    """Create the users and chirps tables if they are missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    await engine.dispose()
