"""Shared test fixtures for all test modules."""

import contextlib
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from zervos.core import context as context_module
from zervos.core import database as db_module
from zervos.core.context import BrowsingContext
from zervos.core.database import Base
from zervos.storage.area import MemoryStorageArea

# In-memory SQLite engine with StaticPool so all connections share the same
# database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

FIXED_NOW = datetime(2025, 11, 7, 12, 0, 0, tzinfo=UTC)
TEST_ORIGIN = "https://app.example.com"


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so the SQL storage area
    uses the in-memory test database, and drops the cached API context.
    """
    import zervos.models  # noqa: F401

    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal
    context_module._server_context = None

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.commit()

    context_module._server_context = None
    db_module.engine = original_engine
    db_module.SessionLocal = original_session


class FakeClock:
    """Settable wall clock; call ``advance`` to move time forward."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeMonotonic:
    """Settable monotonic clock in seconds."""

    def __init__(self) -> None:
        self.value = 0.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def monotonic():
    return FakeMonotonic()


@pytest.fixture
def area():
    """Storage area shared by every context created in a test."""
    return MemoryStorageArea()


@pytest.fixture
def tab(area):
    ctx = BrowsingContext(area, origin=TEST_ORIGIN, name="tab-a")
    yield ctx
    ctx.close()


@pytest.fixture
def other_tab(area):
    ctx = BrowsingContext(area, origin=TEST_ORIGIN, name="tab-b")
    yield ctx
    ctx.close()
