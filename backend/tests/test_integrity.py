"""Tests for the integrity sweep, the system endpoints and the sweep scheduler."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock

import pytest

from nexus_leave import worker
from nexus_leave.services import integrity as integrity_service
from nexus_leave.services.employee import get_employee_by_identifier
from nexus_leave.services.integrity import get_integrity_summary, run_integrity_sweep

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from nexus_leave.models import Employee

    MakeEmployee = Callable[..., Awaitable[Employee]]

SYSTEM_URL = "/api/system"


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


async def test_sweep_repairs_negative_and_over_cap(db_session: AsyncSession, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001", cl_balance=-5)
    await make_employee("EMP002", el_balance=50)
    await make_employee("EMP003")

    result = await run_integrity_sweep(db_session)

    assert [e.employee_id for e in result.negative] == ["EMP001"]
    assert [e.employee_id for e in result.over_cap] == ["EMP002"]
    assert result.needs_attention is True
    assert result.repaired == 2
    assert result.errors == 0

    first = await get_employee_by_identifier(db_session, "EMP001")
    second = await get_employee_by_identifier(db_session, "EMP002")
    assert first is not None
    assert second is not None
    assert first.cl_balance == 0
    assert second.el_balance == 18


async def test_second_sweep_changes_nothing(db_session: AsyncSession, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001", cl_balance=-5)
    await make_employee("EMP002", el_balance=50)
    await run_integrity_sweep(db_session)

    result = await run_integrity_sweep(db_session)

    assert result.negative == []
    assert result.over_cap == []
    assert result.repaired == 0
    assert result.needs_attention is False


async def test_employee_with_both_problems_repaired_once(
    db_session: AsyncSession, make_employee: MakeEmployee
) -> None:
    await make_employee("EMP001", cl_balance=-1, rh_balance=99)

    result = await run_integrity_sweep(db_session)

    assert len(result.negative) == 1
    assert len(result.over_cap) == 1
    assert result.repaired == 1


async def test_sweep_counts_failures_and_continues(
    db_session: AsyncSession,
    make_employee: MakeEmployee,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    await make_employee("EMP001", cl_balance=-1)
    await make_employee("EMP002", cl_balance=-1)
    real_normalize = integrity_service.normalize_balances

    async def _flaky(session: AsyncSession, employee_id: str) -> object:
        if employee_id == "EMP001":
            msg = "lock timeout"
            raise RuntimeError(msg)
        return await real_normalize(session, employee_id)

    monkeypatch.setattr(integrity_service, "normalize_balances", _flaky)

    result = await run_integrity_sweep(db_session)

    assert result.errors == 1
    assert result.repaired == 1


async def test_integrity_summary(db_session: AsyncSession, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001", cl_balance=-5)
    await make_employee("EMP002", el_balance=50)
    await make_employee("EMP003")

    summary = await get_integrity_summary(db_session)

    assert summary.total_employees == 3
    assert summary.total_leaves == 0
    assert summary.negative_balances == 1
    assert summary.high_balances == 1
    assert summary.needs_attention is True


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


async def test_system_health(async_client: AsyncClient, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001", cl_balance=-5)

    resp = await async_client.get(f"{SYSTEM_URL}/health")

    assert resp.status_code == 200
    data = resp.json()
    assert data["database"] == "connected"
    assert data["data_integrity"]["negative_balances"] == 1
    assert data["data_integrity"]["needs_attention"] is True


async def test_integrity_sweep_endpoint(async_client: AsyncClient, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001", el_balance=50)

    resp = await async_client.post(f"{SYSTEM_URL}/integrity-sweep")

    assert resp.status_code == 200
    data = resp.json()
    assert data["repaired"] == 1
    assert data["over_cap"][0]["el_balance"] == 50

    resp = await async_client.get(f"{SYSTEM_URL}/health")
    assert resp.json()["data_integrity"]["needs_attention"] is False


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------


async def test_integrity_loop_runs_once_without_interval(monkeypatch: pytest.MonkeyPatch) -> None:
    sweep = AsyncMock()
    monkeypatch.setattr(worker, "run_sweep_once", sweep)

    await worker.run_integrity_loop(0, None)

    sweep.assert_awaited_once()


async def test_run_sweep_once_logs_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    factory = Mock(side_effect=RuntimeError("database unavailable"))
    monkeypatch.setattr(worker, "get_session_factory", lambda: factory)

    # Must not raise.
    await worker.run_sweep_once()
