# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter, status

from nexus_leave.api.deps import DocumentStoreDep
from nexus_leave.db import SessionDep
from nexus_leave.schemas.employee import (
    CreateEmployeePayload,
    EmployeeListResponse,
    EmployeePatch,
    EmployeeResponse,
    FixAllBalancesResponse,
    FixedBalancesResponse,
)
from nexus_leave.services import balance as balance_service
from nexus_leave.services import employee as employee_service

employees_router = APIRouter(prefix="/employees", tags=["employees"])


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(session: SessionDep) -> EmployeeListResponse:
    """List all employees ordered by name."""
    return await employee_service.list_employees(session)


@employees_router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(payload: CreateEmployeePayload, session: SessionDep) -> EmployeeResponse:
    """Create a new employee."""
    return await employee_service.create_employee(session, payload)


@employees_router.post("/fix-all-balances", response_model=FixAllBalancesResponse)
async def fix_all_balances(session: SessionDep) -> FixAllBalancesResponse:
    """Normalize the balances of every employee."""
    return await balance_service.fix_all_balances(session)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: str, session: SessionDep) -> EmployeeResponse:
    """Get an employee by identifier (case-insensitive)."""
    return await employee_service.get_employee(session, employee_id)


@employees_router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(employee_id: str, patch: EmployeePatch, session: SessionDep) -> EmployeeResponse:
    """Update the fields present in the request body."""
    return await employee_service.update_employee(session, employee_id, patch)


@employees_router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(employee_id: str, session: SessionDep, documents: DocumentStoreDep) -> None:
    """Delete an employee with their leave requests and notifications."""
    await employee_service.delete_employee(session, employee_id, documents)


@employees_router.post("/{employee_id}/fix-balances", response_model=FixedBalancesResponse)
async def fix_employee_balances(employee_id: str, session: SessionDep) -> FixedBalancesResponse:
    """Clamp one employee's balances into their valid ranges."""
    return await balance_service.fix_employee_balances(session, employee_id)
