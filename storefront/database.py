"""Async engine and request-scoped sessions for the catalog and cart stores.

Postgres (asyncpg) in deployments, SQLite (aiosqlite) for tests and local runs.
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import DATABASE_URL, SQL_ECHO

# seconds a SQLite writer waits for the database lock held by a concurrent cart write
SQLITE_LOCK_TIMEOUT = 30


def engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"timeout": SQLITE_LOCK_TIMEOUT}}
    return {"pool_pre_ping": True}


engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO, future=True, **engine_options(DATABASE_URL))

async_session_maker = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

Base = declarative_base()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session
