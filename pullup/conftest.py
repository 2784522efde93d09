import contextlib

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker

from pullup.config.database import create_engine
from pullup.main import app
from pullup.models import BaseModel
from pullup.rsvps.repository import orm_models  # noqa: F401


@pytest.fixture
def client_factory():
    """Build a test client with dependency overrides applied for its lifetime."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac


@pytest.fixture
async def sqlite_engine(tmp_path):
    """A throwaway SQLite database with the full schema."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'pullup.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(sqlite_engine):
    return async_sessionmaker(sqlite_engine, expire_on_commit=False)
