from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import col

from nexus_leave.exceptions import NotFoundError, ValidationError
from nexus_leave.models.employee import Employee
from nexus_leave.models.enums import NotificationType
from nexus_leave.models.notification import Notification
from nexus_leave.schemas.notification import (
    BulkUpdateResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from nexus_leave.services.employee import _get_employee_or_404, _require_employee_id
from nexus_leave.services.validation import sanitize_input

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from nexus_leave.schemas.notification import CreateNotificationPayload


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_notification_response(
    notification: Notification,
    employee_name: str | None = None,
) -> NotificationResponse:
    """Map a notification model to its response schema."""
    return NotificationResponse(
        id=notification.id,
        type=notification.type,
        message=notification.message,
        employee_id=notification.employee_id,
        employee_name=employee_name,
        is_read=notification.is_read,
        created_at=notification.created_at,
    )


def _visible_to(employee_id: str) -> ColumnElement[bool]:
    """Filter for notifications addressed to the employee or broadcast to all."""
    return or_(
        func.lower(col(Notification.employee_id)) == employee_id.lower(),
        col(Notification.employee_id).is_(None),
    )


async def _list(session: AsyncSession, *filters: object) -> NotificationListResponse:
    result = await session.execute(
        select(Notification, col(Employee.full_name))
        .outerjoin(Employee, col(Employee.employee_id) == col(Notification.employee_id))
        .where(*filters)  # type: ignore[arg-type]
        .order_by(col(Notification.created_at).desc())
    )
    rows = list(result.all())
    return NotificationListResponse(
        items=[_build_notification_response(n, name) for n, name in rows],
        total=len(rows),
    )


async def _get_notification_or_404(session: AsyncSession, notification_id: uuid.UUID) -> Notification:
    result = await session.execute(select(Notification).where(col(Notification.id) == notification_id))
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------


def write_notification(
    session: AsyncSession,
    *,
    type_: NotificationType | str,
    message: str,
    employee_id: str | None = None,
) -> Notification:
    """Queue a notification within the caller's transaction.

    ``employee_id=None`` broadcasts the notification to everyone.
    """
    notification = Notification(
        type=str(type_),
        message=message,
        employee_id=employee_id,
    )
    session.add(notification)
    return notification


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def list_notifications(session: AsyncSession) -> NotificationListResponse:
    """List all notifications, newest first."""
    return await _list(session)


async def list_employee_notifications(session: AsyncSession, employee_id: str | None) -> NotificationListResponse:
    """List notifications addressed to the employee plus broadcasts."""
    identifier = _require_employee_id(employee_id)
    return await _list(session, _visible_to(identifier))


async def count_unread(session: AsyncSession, employee_id: str | None) -> UnreadCountResponse:
    identifier = _require_employee_id(employee_id)
    result = await session.execute(
        select(func.count())
        .select_from(Notification)
        .where(_visible_to(identifier), col(Notification.is_read).is_(False))
    )
    return UnreadCountResponse(count=result.scalar_one())


async def create_notification(
    session: AsyncSession,
    payload: CreateNotificationPayload,
) -> NotificationResponse:
    """Create a notification for one employee, or a broadcast when none is given."""
    if not payload.type or not payload.type.strip():
        raise ValidationError("Notification type is required")
    if not payload.message or not payload.message.strip():
        raise ValidationError("Notification message is required")

    employee_id: str | None = None
    if payload.employee_id is not None:
        employee_id = (await _get_employee_or_404(session, payload.employee_id)).employee_id

    notification = write_notification(
        session,
        type_=sanitize_input(payload.type),
        message=sanitize_input(payload.message),
        employee_id=employee_id,
    )
    await session.commit()
    await session.refresh(notification)
    return _build_notification_response(notification)


async def mark_read(session: AsyncSession, notification_id: uuid.UUID) -> NotificationResponse:
    notification = await _get_notification_or_404(session, notification_id)
    notification.is_read = True
    await session.commit()
    await session.refresh(notification)
    return _build_notification_response(notification)


async def mark_all_read(session: AsyncSession, employee_id: str | None) -> BulkUpdateResponse:
    """Mark every unread notification visible to the employee as read."""
    identifier = _require_employee_id(employee_id)
    result = await session.execute(
        update(Notification)
        .where(_visible_to(identifier), col(Notification.is_read).is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    return BulkUpdateResponse(affected=result.rowcount)  # type: ignore[attr-defined]


async def delete_notification(session: AsyncSession, notification_id: uuid.UUID) -> None:
    notification = await _get_notification_or_404(session, notification_id)
    await session.delete(notification)
    await session.commit()


async def delete_employee_notifications(session: AsyncSession, employee_id: str | None) -> BulkUpdateResponse:
    """Delete notifications addressed to the employee. Broadcasts are kept."""
    identifier = _require_employee_id(employee_id)
    result = await session.execute(
        delete(Notification)
        .where(func.lower(col(Notification.employee_id)) == identifier.lower())
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    return BulkUpdateResponse(affected=result.rowcount)  # type: ignore[attr-defined]


async def create_sample_notifications(
    session: AsyncSession,
    employee_id: str | None = None,
) -> NotificationListResponse:
    """Create a fixed set of demo notifications for an employee and everyone."""
    identifier: str | None = None
    if employee_id is not None:
        identifier = (await _get_employee_or_404(session, employee_id)).employee_id
    samples = [
        write_notification(
            session,
            type_=NotificationType.LEAVE_APPROVED,
            message="Your leave request for CL from 2024-01-15 to 2024-01-17 has been approved.",
            employee_id=identifier,
        ),
        write_notification(
            session,
            type_=NotificationType.LEAVE_REQUEST,
            message="New leave request submitted by employee EMP001 for RH on 2024-01-20.",
        ),
        write_notification(
            session,
            type_=NotificationType.SYSTEM_UPDATE,
            message="System maintenance scheduled for tomorrow at 2:00 AM.",
            employee_id=identifier,
        ),
    ]
    await session.commit()
    return NotificationListResponse(
        items=[_build_notification_response(n) for n in samples],
        total=len(samples),
    )
