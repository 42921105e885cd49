from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from nexus_leave.db import create_tables, get_session
from nexus_leave.limiter import limiter
from nexus_leave.main import app
from nexus_leave.models import Employee
from nexus_leave.services.document import InMemoryDocumentStore, set_document_store

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create a fresh in-memory database with all tables for each test."""
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(_engine)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session bound to the per-test database."""
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture(autouse=True)
def document_store() -> Iterator[InMemoryDocumentStore]:
    """Route document writes to memory for every test."""
    store = InMemoryDocumentStore()
    set_document_store(store)
    yield store
    set_document_store(None)


@pytest.fixture(autouse=True)
def _reset_rate_limits() -> None:
    """Start every test with empty rate-limit counters."""
    limiter.reset()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_employee(db_session: AsyncSession) -> Callable[..., Awaitable[Employee]]:
    """Insert an employee directly, bypassing balance clamping."""

    async def _make(employee_id: str = "EMP001", **overrides: Any) -> Employee:
        fields: dict[str, Any] = {
            "employee_id": employee_id,
            "full_name": f"Employee {employee_id}",
            "email": f"{employee_id.lower()}@example.com",
            "department": "Engineering",
            "position": "Developer",
            "hire_date": date(2020, 1, 1),
            "cl_balance": 30,
            "rh_balance": 15,
            "el_balance": 18,
        }
        fields.update(overrides)
        employee = Employee(**fields)
        db_session.add(employee)
        await db_session.commit()
        return employee

    return _make
