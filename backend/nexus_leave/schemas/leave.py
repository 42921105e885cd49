# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel

from nexus_leave.models.enums import LeaveStatus, LeaveType

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateLeavePayload(BaseModel):
    """Fields of a new leave request, as received from the multipart form.

    Everything stays a raw string here; the leave service validates each
    field and reports a distinct error for each failure.
    """

    employee_id: str | None = None
    leave_type: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    reason: str | None = None


class LeaveStatusPayload(BaseModel):
    """Request body for approving or rejecting a leave."""

    status: Literal["APPROVED", "REJECTED"]
    approved_by: str | None = None


class DocumentUpload(BaseModel):
    """A document attached to a leave request."""

    filename: str
    content: bytes
    content_type: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    employee_id: str
    employee_name: str | None = None
    department: str | None = None
    position: str | None = None
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str
    status: LeaveStatus
    approved_by: str | None
    approved_at: datetime | None
    document_path: str | None
    created_at: datetime
    updated_at: datetime


class LeaveListResponse(BaseModel):
    """List of leave requests, newest first."""

    items: list[LeaveResponse]
    total: int


class LeaveStatsResponse(BaseModel):
    """Counts of leave requests by status and by leave type."""

    total_leaves: int
    pending_leaves: int
    approved_leaves: int
    rejected_leaves: int
    cl_leaves: int
    rh_leaves: int
    el_leaves: int


class MessageResponse(BaseModel):
    message: str
