from __future__ import annotations

from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from nexus_leave.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from nexus_leave.models.enums import LeaveStatus


class LeaveRequest(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """An employee's leave request with approval workflow state."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.CheckConstraint("leave_type IN ('CL', 'RH', 'EL')", name="ck_leave_request_type"),
        sa.CheckConstraint("status IN ('PENDING', 'APPROVED', 'REJECTED')", name="ck_leave_request_status"),
        sa.CheckConstraint("days >= 1", name="ck_leave_request_days"),
        sa.Index("ix_leave_request_employee_dates", "employee_id", "start_date", "end_date"),
    )

    employee_id: str = Field(
        sa_column=sa.Column(
            sa.String(50),
            sa.ForeignKey("employee.employee_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    leave_type: str = Field(max_length=10)
    start_date: date
    end_date: date
    days: int
    reason: str
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    approved_by: str | None = Field(default=None, max_length=50)
    approved_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    document_path: str | None = Field(default=None, max_length=255)
