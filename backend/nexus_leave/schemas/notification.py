# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel


class CreateNotificationPayload(BaseModel):
    """Request body for creating a notification. A missing employee_id broadcasts it."""

    type: str | None = None
    message: str | None = None
    employee_id: str | None = None


class SampleNotificationsPayload(BaseModel):
    employee_id: str | None = None


class NotificationResponse(BaseModel):
    """Response schema for a single notification."""

    id: uuid.UUID
    type: str
    message: str
    employee_id: str | None
    employee_name: str | None = None
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    total: int


class UnreadCountResponse(BaseModel):
    count: int


class BulkUpdateResponse(BaseModel):
    """Number of notifications affected by a bulk operation."""

    affected: int
