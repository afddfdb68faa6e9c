import os

os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["SQLITE_URL"] = "sqlite+aiosqlite:///:memory:"

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from complaint_desk.core.db import Base
import complaint_desk.models  # noqa
from complaint_desk.schemas.support.complaint_schemas import ComplaintDraft


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'complaints.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_draft():
    def _make(**overrides) -> ComplaintDraft:
        values = {
            "customer_name": "Alice",
            "machine_type": "WM",
            "fault": "Leaks",
            "date": "2024-01-10",
            "status": "Open",
        }
        values.update(overrides)
        return ComplaintDraft(**values)

    return _make


def broken_session() -> AsyncMock:
    session = AsyncMock(spec=AsyncSession)
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    session.scalar.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    session.flush.side_effect = OperationalError("INSERT", {}, Exception("connection refused"))
    return session


@pytest.fixture
def broken_session_factory():
    class _BrokenSessionContext:
        async def __aenter__(self):
            return broken_session()

        async def __aexit__(self, *exc_info):
            return False

    return _BrokenSessionContext


@pytest.fixture
def broken_db():
    return broken_session()
