# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, status

from nexus_leave.db import SessionDep
from nexus_leave.schemas.notification import (
    BulkUpdateResponse,
    CreateNotificationPayload,
    NotificationListResponse,
    NotificationResponse,
    SampleNotificationsPayload,
    UnreadCountResponse,
)
from nexus_leave.services import notification as notification_service

notifications_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notifications_router.get("", response_model=NotificationListResponse)
async def list_notifications(session: SessionDep) -> NotificationListResponse:
    """List all notifications, newest first."""
    return await notification_service.list_notifications(session)


@notifications_router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(payload: CreateNotificationPayload, session: SessionDep) -> NotificationResponse:
    """Create a notification; omit employee_id to broadcast."""
    return await notification_service.create_notification(session, payload)


@notifications_router.post("/test", response_model=NotificationListResponse, status_code=status.HTTP_201_CREATED)
async def create_sample_notifications(
    payload: SampleNotificationsPayload,
    session: SessionDep,
) -> NotificationListResponse:
    """Create a set of sample notifications."""
    return await notification_service.create_sample_notifications(session, payload.employee_id)


@notifications_router.get("/employee/{employee_id}", response_model=NotificationListResponse)
async def list_employee_notifications(employee_id: str, session: SessionDep) -> NotificationListResponse:
    """Notifications addressed to the employee plus broadcasts."""
    return await notification_service.list_employee_notifications(session, employee_id)


@notifications_router.get("/unread/count/{employee_id}", response_model=UnreadCountResponse)
async def count_unread(employee_id: str, session: SessionDep) -> UnreadCountResponse:
    return await notification_service.count_unread(session, employee_id)


@notifications_router.put("/employee/{employee_id}/read-all", response_model=BulkUpdateResponse)
async def mark_all_read(employee_id: str, session: SessionDep) -> BulkUpdateResponse:
    return await notification_service.mark_all_read(session, employee_id)


@notifications_router.delete("/employee/{employee_id}/all", response_model=BulkUpdateResponse)
async def delete_employee_notifications(employee_id: str, session: SessionDep) -> BulkUpdateResponse:
    """Delete notifications addressed to the employee (broadcasts are kept)."""
    return await notification_service.delete_employee_notifications(session, employee_id)


@notifications_router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: uuid.UUID, session: SessionDep) -> NotificationResponse:
    return await notification_service.mark_read(session, notification_id)


@notifications_router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: uuid.UUID, session: SessionDep) -> None:
    await notification_service.delete_notification(session, notification_id)
