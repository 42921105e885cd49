# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Select, case, func, select
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import col

from nexus_leave.config import get_settings
from nexus_leave.exceptions import (
    InsufficientBalanceError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    OverlapConflictError,
    ValidationError,
)
from nexus_leave.models.employee import Employee
from nexus_leave.models.enums import LeaveStatus, LeaveType, NotificationType
from nexus_leave.models.leave import LeaveRequest
from nexus_leave.schemas.leave import LeaveListResponse, LeaveResponse, LeaveStatsResponse
from nexus_leave.services.document import validate_document
from nexus_leave.services.employee import _require_employee_id, get_employee_by_identifier
from nexus_leave.services.notification import write_notification
from nexus_leave.services.validation import (
    balance_field,
    calculate_leave_days,
    normalize_leave_type,
    sanitize_input,
    to_date,
    validate_date_range,
    validate_employee_id,
    validate_leave_days,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from nexus_leave.schemas.leave import CreateLeavePayload, DocumentUpload, LeaveStatusPayload
    from nexus_leave.services.document import DocumentStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_leave_response(leave: LeaveRequest, employee: Employee | None = None) -> LeaveResponse:
    """Map a leave model (and optionally its employee) to its response schema."""
    return LeaveResponse(
        id=leave.id,
        employee_id=leave.employee_id,
        employee_name=employee.full_name if employee else None,
        department=employee.department if employee else None,
        position=employee.position if employee else None,
        leave_type=LeaveType(leave.leave_type),
        start_date=leave.start_date,
        end_date=leave.end_date,
        days=leave.days,
        reason=leave.reason,
        status=LeaveStatus(leave.status),
        approved_by=leave.approved_by,
        approved_at=leave.approved_at,
        document_path=leave.document_path,
        created_at=leave.created_at,
        updated_at=leave.updated_at,
    )


async def _get_leave_or_404(
    session: AsyncSession,
    leave_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> LeaveRequest:
    """Fetch a leave request by ID. Raises 404 if not found."""
    query = select(LeaveRequest).where(col(LeaveRequest.id) == leave_id)
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    leave = result.scalar_one_or_none()
    if leave is None:
        raise NotFoundError("Leave not found")
    return leave


async def _check_leave_overlap(
    session: AsyncSession,
    employee_id: str,
    start_date: date,
    end_date: date,
) -> None:
    """Raise 409 if a pending or approved leave shares a day with the range.

    Ranges are inclusive: ``[s1, e1]`` and ``[s2, e2]`` overlap when
    ``s1 <= e2 AND s2 <= e1``.
    """
    result = await session.execute(
        select(col(LeaveRequest.id))
        .where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.status) != LeaveStatus.REJECTED.value,
            col(LeaveRequest.start_date) <= end_date,
            col(LeaveRequest.end_date) >= start_date,
        )
        .limit(1)
    )
    if result.scalar_one_or_none() is not None:
        raise OverlapConflictError("Leave request overlaps with existing approved/pending leaves")


def _list_query() -> Select[tuple[LeaveRequest, Employee]]:
    return (
        select(LeaveRequest, Employee)
        .join(Employee, col(Employee.employee_id) == col(LeaveRequest.employee_id))
        .order_by(col(LeaveRequest.created_at).desc())
    )


def _count_where(column: ColumnElement[str], value: str) -> ColumnElement[int]:
    return func.count(case((column == value, 1)))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_leave(
    session: AsyncSession,
    payload: CreateLeavePayload,
    documents: DocumentStore,
    document: DocumentUpload | None = None,
) -> LeaveResponse:
    """Create a PENDING leave request.

    Flow:
    1. Validate identifier, leave type, date range and reason
    2. Lock the employee row (serializes concurrent requests per employee)
    3. Compute inclusive day count and check the per-request limit
    4. Check the balance for the leave type
    5. Check for overlap with pending/approved leaves
    6. Store the document, insert the request, notify admins, commit

    Balances are not deducted here; deduction happens on approval.
    """
    employee_id = _require_employee_id(payload.employee_id)
    leave_type = normalize_leave_type(payload.leave_type)
    if leave_type is None:
        raise ValidationError("Valid leave type is required (CL, RH, EL)")
    if not payload.start_date or not payload.end_date:
        raise ValidationError("Start date and end date are required")
    if not validate_date_range(payload.start_date, payload.end_date):
        raise ValidationError("Invalid date range")
    reason = sanitize_input(payload.reason or "")
    if not reason:
        raise ValidationError("Reason is required")
    if document is not None:
        validate_document(document)

    start_date = to_date(payload.start_date)
    end_date = to_date(payload.end_date)

    # 2. Resolve and lock employee.
    employee = await get_employee_by_identifier(session, employee_id, for_update=True)
    if employee is None:
        raise NotFoundError("Employee not found")

    # 3. Day count.
    days = calculate_leave_days(start_date, end_date)
    if not validate_leave_days(days, leave_type):
        raise ValidationError("Leave days exceed maximum limit")

    # 4. Balance.
    available: int = getattr(employee, balance_field(leave_type))
    if available < days:
        raise InsufficientBalanceError(
            f"Insufficient {leave_type.value} balance. Available: {available}, Requested: {days}"
        )

    # 5. Overlap.
    await _check_leave_overlap(session, employee.employee_id, start_date, end_date)

    # 6. Persist.
    document_path = documents.save(document.filename, document.content) if document is not None else None
    leave = LeaveRequest(
        employee_id=employee.employee_id,
        leave_type=leave_type.value,
        start_date=start_date,
        end_date=end_date,
        days=days,
        reason=reason,
        status=LeaveStatus.PENDING.value,
        document_path=document_path,
    )
    session.add(leave)
    write_notification(
        session,
        type_=NotificationType.LEAVE_REQUEST,
        message=(
            f"New leave request submitted by employee {employee.employee_id} "
            f"for {leave_type.value} from {start_date.isoformat()} to {end_date.isoformat()}."
        ),
    )

    try:
        await session.commit()
    except Exception:
        await session.rollback()
        if document_path is not None:
            documents.delete(document_path)
        raise

    await session.refresh(leave)
    logger.info("Created %s leave %s for employee %s (%d days)", leave_type.value, leave.id, leave.employee_id, days)
    return _build_leave_response(leave, employee)


async def set_leave_status(
    session: AsyncSession,
    leave_id: uuid.UUID,
    payload: LeaveStatusPayload,
) -> LeaveResponse:
    """Approve or reject a pending leave.

    The status change and, on approval, the balance deduction are committed
    in one transaction with both the leave and employee rows locked.
    """
    approver = payload.approved_by
    if approver is None or not validate_employee_id(approver):
        raise ValidationError("Approver ID is required")
    new_status = LeaveStatus(payload.status)

    leave = await _get_leave_or_404(session, leave_id, for_update=True)
    employee = await get_employee_by_identifier(session, leave.employee_id, for_update=True)
    if employee is None:
        raise NotFoundError("Employee not found")

    if leave.status != LeaveStatus.PENDING.value:
        raise InvalidTransitionError("Leave is not in pending status")

    leave_type = LeaveType(leave.leave_type)
    field = balance_field(leave_type)
    current_balance: int = getattr(employee, field)

    enforce = get_settings().enforce_balance_on_approval
    if new_status == LeaveStatus.APPROVED and enforce and current_balance < leave.days:
        raise InsufficientBalanceError(
            f"Insufficient {leave_type.value} balance. Available: {current_balance}, Requested: {leave.days}"
        )

    leave.status = new_status.value
    leave.approved_by = sanitize_input(approver)
    leave.approved_at = datetime.now(UTC)

    if new_status == LeaveStatus.APPROVED:
        new_balance = current_balance - leave.days
        setattr(employee, field, new_balance)
        if new_balance < 0:
            logger.warning(
                "Approval of leave %s leaves employee %s with negative %s balance %d",
                leave.id,
                employee.employee_id,
                leave_type.value,
                new_balance,
            )
        notification_type = NotificationType.LEAVE_APPROVED
    else:
        notification_type = NotificationType.LEAVE_REJECTED

    write_notification(
        session,
        type_=notification_type,
        message=(
            f"Your leave request for {leave_type.value} from {leave.start_date.isoformat()} "
            f"to {leave.end_date.isoformat()} has been {new_status.value.lower()}."
        ),
        employee_id=employee.employee_id,
    )

    await session.commit()
    await session.refresh(leave)
    logger.info("Leave %s %s by %s", leave.id, new_status.value.lower(), leave.approved_by)
    return _build_leave_response(leave, employee)


async def delete_leave(
    session: AsyncSession,
    leave_id: uuid.UUID,
    documents: DocumentStore,
) -> None:
    """Delete a pending leave and its attached document.

    The document is removed only after the row deletion commits. Pending
    leaves never deducted balance, so nothing is restored.
    """
    leave = await _get_leave_or_404(session, leave_id, for_update=True)
    if leave.status != LeaveStatus.PENDING.value:
        raise InvalidStateError("Only pending leaves can be deleted")

    document_path = leave.document_path
    await session.delete(leave)
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    if document_path:
        documents.delete(document_path)
    logger.info("Deleted pending leave %s", leave_id)


async def get_leave(session: AsyncSession, leave_id: uuid.UUID) -> LeaveResponse:
    """Get a single leave request with its employee details."""
    result = await session.execute(_list_query().where(col(LeaveRequest.id) == leave_id))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError("Leave not found")
    leave, employee = row
    return _build_leave_response(leave, employee)


async def list_leaves(session: AsyncSession) -> LeaveListResponse:
    """List all leave requests, newest first."""
    result = await session.execute(_list_query())
    rows = list(result.all())
    return LeaveListResponse(items=[_build_leave_response(leave, employee) for leave, employee in rows], total=len(rows))


async def list_employee_leaves(session: AsyncSession, employee_id: str | None) -> LeaveListResponse:
    """List one employee's leave requests (identifier compared case-insensitively)."""
    identifier = _require_employee_id(employee_id)
    result = await session.execute(
        _list_query().where(func.lower(col(LeaveRequest.employee_id)) == identifier.lower())
    )
    rows = list(result.all())
    return LeaveListResponse(items=[_build_leave_response(leave, employee) for leave, employee in rows], total=len(rows))


async def get_leave_stats(session: AsyncSession) -> LeaveStatsResponse:
    """Count leave requests by status and by leave type."""

    status_col = col(LeaveRequest.status)
    type_col = col(LeaveRequest.leave_type)
    result = await session.execute(
        select(
            func.count().label("total"),
            _count_where(status_col, LeaveStatus.PENDING.value).label("pending"),
            _count_where(status_col, LeaveStatus.APPROVED.value).label("approved"),
            _count_where(status_col, LeaveStatus.REJECTED.value).label("rejected"),
            _count_where(type_col, LeaveType.CL.value).label("cl"),
            _count_where(type_col, LeaveType.RH.value).label("rh"),
            _count_where(type_col, LeaveType.EL.value).label("el"),
        ).select_from(LeaveRequest)
    )
    row = result.one()
    return LeaveStatsResponse(
        total_leaves=row.total,
        pending_leaves=row.pending,
        approved_leaves=row.approved,
        rejected_leaves=row.rejected,
        cl_leaves=row.cl,
        rh_leaves=row.rh,
        el_leaves=row.el,
    )
