from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Leave categories, each backed by its own employee balance."""

    CL = "CL"  # casual leave
    RH = "RH"  # restricted holiday
    EL = "EL"  # earned leave


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests. APPROVED and REJECTED are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class NotificationType(enum.StrEnum):
    """Notification tags produced by the leave workflow."""

    LEAVE_REQUEST = "Leave Request"
    LEAVE_APPROVED = "Leave Approved"
    LEAVE_REJECTED = "Leave Rejected"
    SYSTEM_UPDATE = "System Update"
