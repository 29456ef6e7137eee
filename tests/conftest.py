import os
import tempfile
from decimal import Decimal
from pathlib import Path

# must be set before storefront is imported: the app engine is built at import time
_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_DB_DIR) / 'app.db'}"
os.environ["STOREFRONT_SEED_CATALOG"] = "0"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from storefront.database import Base, engine_options, get_session
from storefront.main import app
from storefront.models import Product

PRODUCTS = [
    {"id": 1, "name": "Wireless Headphones", "price": Decimal("79.99"), "description": "Over-ear", "image_url": "https://example.com/h.jpg"},
    {"id": 2, "name": "Laptop Stand", "price": Decimal("49.99"), "description": None, "image_url": None},
    {"id": 3, "name": "USB-C Hub", "price": Decimal("39.99"), "description": "7-in-1", "image_url": None},
]


@pytest_asyncio.fixture
async def engine(tmp_path):
    # NullPool: every session gets its own connection, like concurrent requests do
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    engine = create_async_engine(url, poolclass=NullPool, **engine_options(url))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSession(engine) as session:
        session.add_all([Product(**p) for p in PRODUCTS])
        await session.commit()
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def client(session_maker):
    async def _get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
