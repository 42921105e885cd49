# ruff: noqa: TC003
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from nexus_leave.config import get_settings
from nexus_leave.exceptions import ConflictError, NotFoundError, ValidationError
from nexus_leave.models.employee import Employee
from nexus_leave.models.enums import LeaveType
from nexus_leave.models.leave import LeaveRequest
from nexus_leave.models.notification import Notification
from nexus_leave.schemas.employee import EmployeeListResponse, EmployeeResponse
from nexus_leave.services.validation import (
    clamp_balance,
    normalize_leave_balance,
    sanitize_input,
    validate_email,
    validate_employee_id,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from nexus_leave.schemas.employee import CreateEmployeePayload, EmployeePatch
    from nexus_leave.services.document import DocumentStore

logger = logging.getLogger(__name__)

_BALANCE_FIELDS: dict[str, LeaveType] = {
    "cl_balance": LeaveType.CL,
    "rh_balance": LeaveType.RH,
    "el_balance": LeaveType.EL,
}
_TEXT_FIELDS = ("full_name", "department", "position")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_employee_response(employee: Employee) -> EmployeeResponse:
    """Map an employee model to its response schema.

    Balances are reported as non-negative integers even if the stored value
    has not been repaired by the integrity sweep yet.
    """
    return EmployeeResponse(
        id=employee.id,
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        email=employee.email,
        department=employee.department,
        position=employee.position,
        hire_date=employee.hire_date,
        cl_balance=normalize_leave_balance(employee.cl_balance),
        rh_balance=normalize_leave_balance(employee.rh_balance),
        el_balance=normalize_leave_balance(employee.el_balance),
        is_admin=employee.is_admin,
        created_at=employee.created_at,
        updated_at=employee.updated_at,
    )


def _require_employee_id(employee_id: str | None) -> str:
    if employee_id is None or not validate_employee_id(employee_id):
        raise ValidationError("Valid employee ID is required")
    return employee_id.strip()


async def get_employee_by_identifier(
    session: AsyncSession,
    employee_id: str,
    *,
    for_update: bool = False,
) -> Employee | None:
    """Look up an employee by identifier, ignoring case.

    With ``for_update`` the row is locked until the caller's transaction ends,
    which serializes balance reads and writes for that employee.
    """
    query = select(Employee).where(func.lower(col(Employee.employee_id)) == employee_id.strip().lower())
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def _get_employee_or_404(
    session: AsyncSession,
    employee_id: str | None,
    *,
    for_update: bool = False,
) -> Employee:
    """Validate the identifier and fetch the employee. Raises 404 if not found."""
    identifier = _require_employee_id(employee_id)
    employee = await get_employee_by_identifier(session, identifier, for_update=for_update)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


async def _ensure_unique(
    session: AsyncSession,
    email: str,
    employee_id: str | None = None,
    exclude_id: object | None = None,
) -> None:
    """Raise 409 if another employee already uses the identifier or email."""
    conditions = [func.lower(col(Employee.email)) == email.lower()]
    if employee_id is not None:
        conditions.append(func.lower(col(Employee.employee_id)) == employee_id.lower())
    query = select(Employee.id).where(or_(*conditions))
    if exclude_id is not None:
        query = query.where(col(Employee.id) != exclude_id)
    result = await session.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        if employee_id is None:
            raise ConflictError("Email already exists")
        raise ConflictError("Employee ID or email already exists")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def list_employees(session: AsyncSession) -> EmployeeListResponse:
    """List all employees ordered by name."""
    result = await session.execute(select(Employee).order_by(col(Employee.full_name)))
    employees = list(result.scalars().all())
    return EmployeeListResponse(
        items=[_build_employee_response(e) for e in employees],
        total=len(employees),
    )


async def get_employee(session: AsyncSession, employee_id: str | None) -> EmployeeResponse:
    """Get a single employee by case-insensitive identifier."""
    employee = await _get_employee_or_404(session, employee_id)
    return _build_employee_response(employee)


async def create_employee(session: AsyncSession, payload: CreateEmployeePayload) -> EmployeeResponse:
    """Create an employee after checking required fields and uniqueness.

    Missing balances default from settings; all balances are stored clamped
    to ``[0, cap]`` for their leave type.
    """
    employee_id = _require_employee_id(payload.employee_id)
    if not payload.full_name or not payload.full_name.strip():
        raise ValidationError("Full name is required")
    if payload.email is None or not validate_email(payload.email):
        raise ValidationError("Valid email is required")
    if not payload.department or not payload.department.strip():
        raise ValidationError("Department is required")
    if not payload.position or not payload.position.strip():
        raise ValidationError("Position is required")
    if payload.hire_date is None:
        raise ValidationError("Hire date is required")

    email = payload.email.strip().lower()
    await _ensure_unique(session, email, employee_id=employee_id)

    settings = get_settings()
    defaults = {
        "cl_balance": settings.default_cl_balance,
        "rh_balance": settings.default_rh_balance,
        "el_balance": settings.default_el_balance,
    }
    balances = {
        name: clamp_balance(defaults[name] if getattr(payload, name) is None else getattr(payload, name), leave_type)
        for name, leave_type in _BALANCE_FIELDS.items()
    }

    employee = Employee(
        employee_id=sanitize_input(employee_id),
        full_name=sanitize_input(payload.full_name),
        email=email,
        department=sanitize_input(payload.department),
        position=sanitize_input(payload.position),
        hire_date=payload.hire_date,
        is_admin=payload.is_admin,
        **balances,
    )
    session.add(employee)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Employee ID or email already exists") from None

    await session.commit()
    await session.refresh(employee)
    logger.info("Created employee %s", employee.employee_id)
    return _build_employee_response(employee)


async def update_employee(
    session: AsyncSession,
    employee_id: str | None,
    patch: EmployeePatch,
) -> EmployeeResponse:
    """Apply the fields present in ``patch`` to the employee."""
    employee = await _get_employee_or_404(session, employee_id)

    changes: dict[str, Any] = patch.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")

    if "email" in changes:
        if not validate_email(changes["email"]):
            raise ValidationError("Valid email is required")
        changes["email"] = changes["email"].strip().lower()
        await _ensure_unique(session, changes["email"], exclude_id=employee.id)

    for name in _TEXT_FIELDS:
        if name in changes:
            if changes[name] is None:
                raise ValidationError(f"{name} cannot be null")
            changes[name] = sanitize_input(changes[name])

    for name, leave_type in _BALANCE_FIELDS.items():
        if name in changes:
            if changes[name] is None:
                raise ValidationError(f"{name} cannot be null")
            changes[name] = clamp_balance(changes[name], leave_type)

    if "is_admin" in changes and changes["is_admin"] is None:
        raise ValidationError("is_admin cannot be null")

    for name, value in changes.items():
        setattr(employee, name, value)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Email already exists") from None

    await session.commit()
    await session.refresh(employee)
    return _build_employee_response(employee)


async def delete_employee(
    session: AsyncSession,
    employee_id: str | None,
    documents: DocumentStore,
) -> None:
    """Delete an employee together with their leave requests and notifications."""
    employee = await _get_employee_or_404(session, employee_id)

    result = await session.execute(
        select(col(LeaveRequest.document_path)).where(
            col(LeaveRequest.employee_id) == employee.employee_id,
            col(LeaveRequest.document_path).is_not(None),
        )
    )
    document_refs = [row[0] for row in result.all()]

    await session.execute(delete(LeaveRequest).where(col(LeaveRequest.employee_id) == employee.employee_id))
    await session.execute(delete(Notification).where(col(Notification.employee_id) == employee.employee_id))
    await session.delete(employee)
    await session.commit()

    for ref in document_refs:
        documents.delete(ref)
    logger.info("Deleted employee %s and %d leave documents", employee.employee_id, len(document_refs))
