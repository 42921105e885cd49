from __future__ import annotations

from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from nexus_leave.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase


class Employee(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """An employee and their remaining days per leave type."""

    __tablename__ = "employee"

    employee_id: str = Field(max_length=50, unique=True, index=True)
    full_name: str = Field(max_length=100)
    email: str = Field(max_length=100, unique=True)
    department: str = Field(max_length=50)
    position: str = Field(max_length=50)
    hire_date: date
    cl_balance: int = Field(default=30, sa_column_kwargs={"server_default": "30"})
    rh_balance: int = Field(default=15, sa_column_kwargs={"server_default": "15"})
    el_balance: int = Field(default=18, sa_column_kwargs={"server_default": "18"})
    is_admin: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
