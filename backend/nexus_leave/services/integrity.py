"""Integrity sweep: find out-of-range leave balances and repair them.

The sweep is idempotent. Once every balance is inside ``[0, cap]`` a second
run finds nothing and writes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select
from sqlmodel import col

from nexus_leave.models.employee import Employee
from nexus_leave.models.enums import LeaveType
from nexus_leave.models.leave import LeaveRequest
from nexus_leave.schemas.system import FlaggedEmployee, IntegritySummary
from nexus_leave.services.balance import normalize_balances
from nexus_leave.services.validation import BALANCE_CAPS

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql.elements import ColumnElement

logger = logging.getLogger(__name__)


@dataclass
class IntegritySweepResult:
    """Result of an integrity sweep run."""

    negative: list[FlaggedEmployee] = field(default_factory=list)
    over_cap: list[FlaggedEmployee] = field(default_factory=list)
    repaired: int = 0
    errors: int = 0

    @property
    def needs_attention(self) -> bool:
        return bool(self.negative or self.over_cap)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _negative_filter() -> ColumnElement[bool]:
    return or_(
        col(Employee.cl_balance) < 0,
        col(Employee.rh_balance) < 0,
        col(Employee.el_balance) < 0,
    )


def _over_cap_filter() -> ColumnElement[bool]:
    return or_(
        col(Employee.cl_balance) > BALANCE_CAPS[LeaveType.CL],
        col(Employee.rh_balance) > BALANCE_CAPS[LeaveType.RH],
        col(Employee.el_balance) > BALANCE_CAPS[LeaveType.EL],
    )


def _flag(employee: Employee) -> FlaggedEmployee:
    return FlaggedEmployee(
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        cl_balance=employee.cl_balance,
        rh_balance=employee.rh_balance,
        el_balance=employee.el_balance,
    )


async def _find(session: AsyncSession, condition: ColumnElement[bool]) -> list[FlaggedEmployee]:
    result = await session.execute(select(Employee).where(condition).order_by(col(Employee.employee_id)))
    return [_flag(e) for e in result.scalars().all()]


async def _count(session: AsyncSession, model: type, condition: ColumnElement[bool] | None = None) -> int:
    query = select(func.count()).select_from(model)
    if condition is not None:
        query = query.where(condition)
    result = await session.execute(query)
    return int(result.scalar_one())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def run_integrity_sweep(session: AsyncSession) -> IntegritySweepResult:
    """Detect negative and over-cap balances and normalize the affected employees.

    Each employee is repaired in its own transaction; a failure for one
    employee is logged and counted without stopping the sweep.
    """
    result = IntegritySweepResult(
        negative=await _find(session, _negative_filter()),
        over_cap=await _find(session, _over_cap_filter()),
    )
    # Release the read transaction before per-employee normalizations begin.
    await session.rollback()

    if result.negative:
        logger.warning("Found %d employees with negative balances", len(result.negative))
    if result.over_cap:
        logger.warning("Found %d employees with balances above their caps", len(result.over_cap))

    to_repair = list(dict.fromkeys(e.employee_id for e in [*result.negative, *result.over_cap]))
    for employee_id in to_repair:
        try:
            await normalize_balances(session, employee_id)
        except Exception:
            logger.exception("Failed to repair balances for employee %s", employee_id)
            result.errors += 1
        else:
            result.repaired += 1

    logger.info("Data integrity check completed: repaired=%d errors=%d", result.repaired, result.errors)
    return result


async def get_integrity_summary(session: AsyncSession) -> IntegritySummary:
    """Read-only counts of employees with out-of-range balances."""
    negative = await _count(session, Employee, _negative_filter())
    high = await _count(session, Employee, _over_cap_filter())
    return IntegritySummary(
        total_employees=await _count(session, Employee),
        total_leaves=await _count(session, LeaveRequest),
        negative_balances=negative,
        high_balances=high,
        needs_attention=negative > 0 or high > 0,
    )
