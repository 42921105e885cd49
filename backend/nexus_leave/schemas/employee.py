# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateEmployeePayload(BaseModel):
    """Request body for creating an employee.

    Text fields are checked by the service so that every missing field is
    reported with its own message.
    """

    employee_id: str | None = None
    full_name: str | None = None
    email: str | None = None
    department: str | None = None
    position: str | None = None
    hire_date: date | None = None
    cl_balance: int | float | str | None = None
    rh_balance: int | float | str | None = None
    el_balance: int | float | str | None = None
    is_admin: bool = False


class EmployeePatch(BaseModel):
    """Partial update for an employee.

    Only fields explicitly present in the request body are applied; see
    ``model_dump(exclude_unset=True)``.
    """

    full_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=100)
    department: str | None = Field(default=None, min_length=1, max_length=50)
    position: str | None = Field(default=None, min_length=1, max_length=50)
    cl_balance: int | float | str | None = None
    rh_balance: int | float | str | None = None
    el_balance: int | float | str | None = None
    is_admin: bool | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class EmployeeResponse(BaseModel):
    """Response schema for a single employee."""

    id: uuid.UUID
    employee_id: str
    full_name: str
    email: str
    department: str
    position: str
    hire_date: date
    cl_balance: int
    rh_balance: int
    el_balance: int
    is_admin: bool
    created_at: datetime
    updated_at: datetime


class EmployeeListResponse(BaseModel):
    """List of employees."""

    items: list[EmployeeResponse]
    total: int


class BalanceTriple(BaseModel):
    """The three leave balances of one employee."""

    cl_balance: int
    rh_balance: int
    el_balance: int


class FixedBalancesResponse(BalanceTriple):
    """Balances of one employee after normalization."""

    employee_id: str
    full_name: str


class FixBalancesError(BaseModel):
    employee_id: str
    full_name: str
    error: str


class FixAllBalancesResponse(BaseModel):
    """Outcome of normalizing every employee's balances."""

    fixed: int
    failed: int
    results: list[FixedBalancesResponse]
    errors: list[FixBalancesError]
