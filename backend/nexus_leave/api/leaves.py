# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from nexus_leave.api.deps import DocumentStoreDep
from nexus_leave.db import SessionDep
from nexus_leave.schemas.leave import (
    CreateLeavePayload,
    DocumentUpload,
    LeaveListResponse,
    LeaveResponse,
    LeaveStatsResponse,
    LeaveStatusPayload,
)
from nexus_leave.services import leave as leave_service

leaves_router = APIRouter(prefix="/leaves", tags=["leaves"])


@leaves_router.get("", response_model=LeaveListResponse)
async def list_leaves(session: SessionDep) -> LeaveListResponse:
    """List all leave requests, newest first."""
    return await leave_service.list_leaves(session)


@leaves_router.post("", response_model=LeaveResponse, status_code=status.HTTP_201_CREATED)
async def create_leave(
    session: SessionDep,
    documents: DocumentStoreDep,
    employee_id: Annotated[str | None, Form()] = None,
    leave_type: Annotated[str | None, Form()] = None,
    start_date: Annotated[str | None, Form()] = None,
    end_date: Annotated[str | None, Form()] = None,
    reason: Annotated[str | None, Form()] = None,
    document: Annotated[UploadFile | None, File()] = None,
) -> LeaveResponse:
    """Submit a leave request, optionally with a supporting document."""
    payload = CreateLeavePayload(
        employee_id=employee_id,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        reason=reason,
    )
    upload = None
    if document is not None and document.filename:
        upload = DocumentUpload(
            filename=document.filename,
            content=await document.read(),
            content_type=document.content_type,
        )
    return await leave_service.create_leave(session, payload, documents, upload)


@leaves_router.get("/stats/overview", response_model=LeaveStatsResponse)
async def get_leave_stats(session: SessionDep) -> LeaveStatsResponse:
    """Counts of leave requests by status and type."""
    return await leave_service.get_leave_stats(session)


@leaves_router.get("/employee/{employee_id}", response_model=LeaveListResponse)
async def list_employee_leaves(employee_id: str, session: SessionDep) -> LeaveListResponse:
    """List one employee's leave requests."""
    return await leave_service.list_employee_leaves(session, employee_id)


@leaves_router.get("/{leave_id}", response_model=LeaveResponse)
async def get_leave(leave_id: uuid.UUID, session: SessionDep) -> LeaveResponse:
    """Get a single leave request."""
    return await leave_service.get_leave(session, leave_id)


@leaves_router.put("/{leave_id}/status", response_model=LeaveResponse)
async def set_leave_status(
    leave_id: uuid.UUID,
    payload: LeaveStatusPayload,
    session: SessionDep,
) -> LeaveResponse:
    """Approve or reject a pending leave request."""
    return await leave_service.set_leave_status(session, leave_id, payload)


@leaves_router.delete("/{leave_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_leave(leave_id: uuid.UUID, session: SessionDep, documents: DocumentStoreDep) -> None:
    """Delete a pending leave request and its document."""
    await leave_service.delete_leave(session, leave_id, documents)
