"""Balance normalization: clamping an employee's leave balances into range."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from nexus_leave.models.employee import Employee
from nexus_leave.models.enums import LeaveType
from nexus_leave.schemas.employee import (
    BalanceTriple,
    FixAllBalancesResponse,
    FixBalancesError,
    FixedBalancesResponse,
)
from nexus_leave.services.employee import _get_employee_or_404
from nexus_leave.services.validation import clamp_balance

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def normalize_balances(session: AsyncSession, employee_id: str | None) -> BalanceTriple:
    """Clamp an employee's CL, RH and EL balances to ``[0, cap]`` and persist them.

    The read and the write happen in one transaction with the employee row
    locked, so concurrent normalizations cannot interleave. Any failure,
    including an unknown employee, rolls the transaction back before the
    error propagates, leaving the stored balances untouched.
    """
    try:
        employee = await _get_employee_or_404(session, employee_id, for_update=True)
        normalized = BalanceTriple(
            cl_balance=clamp_balance(employee.cl_balance, LeaveType.CL),
            rh_balance=clamp_balance(employee.rh_balance, LeaveType.RH),
            el_balance=clamp_balance(employee.el_balance, LeaveType.EL),
        )
        employee.cl_balance = normalized.cl_balance
        employee.rh_balance = normalized.rh_balance
        employee.el_balance = normalized.el_balance
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        "Normalized balances for employee %s: cl=%d rh=%d el=%d",
        employee.employee_id,
        normalized.cl_balance,
        normalized.rh_balance,
        normalized.el_balance,
    )
    return normalized


async def fix_employee_balances(session: AsyncSession, employee_id: str | None) -> FixedBalancesResponse:
    """Normalize one employee's balances and report the result."""
    normalized = await normalize_balances(session, employee_id)
    employee = await _get_employee_or_404(session, employee_id)
    return FixedBalancesResponse(
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        **normalized.model_dump(),
    )


async def fix_all_balances(session: AsyncSession) -> FixAllBalancesResponse:
    """Normalize every employee's balances, collecting per-employee failures."""
    result = await session.execute(select(col(Employee.employee_id), col(Employee.full_name)))
    employees = list(result.all())

    results: list[FixedBalancesResponse] = []
    errors: list[FixBalancesError] = []
    for employee_id, full_name in employees:
        try:
            normalized = await normalize_balances(session, employee_id)
        except Exception as exc:
            logger.exception("Failed to normalize balances for employee %s", employee_id)
            errors.append(FixBalancesError(employee_id=employee_id, full_name=full_name, error=str(exc)))
            continue
        results.append(
            FixedBalancesResponse(employee_id=employee_id, full_name=full_name, **normalized.model_dump())
        )

    return FixAllBalancesResponse(fixed=len(results), failed=len(errors), results=results, errors=errors)
