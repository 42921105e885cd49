from sqlmodel import SQLModel

from nexus_leave.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from nexus_leave.models.employee import Employee
from nexus_leave.models.enums import LeaveStatus, LeaveType, NotificationType
from nexus_leave.models.leave import LeaveRequest
from nexus_leave.models.notification import Notification

__all__ = [
    "Employee",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "Notification",
    "NotificationType",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
    "UpdatedAtMixin",
]
