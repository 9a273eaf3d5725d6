from __future__ import annotations
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
from streakzz.config import settings

class Base(DeclarativeBase):
    pass

def _engine_options(url: str) -> dict:
    # aiosqlite connections are not shared safely across event loops
    if url.startswith("sqlite"):
        return {"poolclass": NullPool}
    return {"pool_pre_ping": True}

engine = create_async_engine(settings.database_url, future=True, echo=False, **_engine_options(settings.database_url))
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session
