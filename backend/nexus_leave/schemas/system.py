from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class IntegritySummary(BaseModel):
    """Counts of out-of-range balances across all employees."""

    total_employees: int
    total_leaves: int
    negative_balances: int
    high_balances: int
    needs_attention: bool


class SystemHealthResponse(BaseModel):
    """Database status plus a balance-integrity summary."""

    database: Literal["connected", "disconnected"]
    data_integrity: IntegritySummary | None


class FlaggedEmployee(BaseModel):
    employee_id: str
    full_name: str
    cl_balance: int
    rh_balance: int
    el_balance: int


class IntegritySweepResponse(BaseModel):
    """Outcome of an integrity sweep."""

    negative: list[FlaggedEmployee]
    over_cap: list[FlaggedEmployee]
    needs_attention: bool
    repaired: int
    errors: int
