from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from nexus_leave.models.base import TimestampMixin, UUIDBase


class Notification(UUIDBase, TimestampMixin, table=True):
    """A message for one employee, or for everyone when employee_id is NULL."""

    __tablename__ = "notification"

    type: str = Field(max_length=50)
    message: str
    employee_id: str | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.String(50),
            sa.ForeignKey("employee.employee_id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=True,
            index=True,
        ),
    )
    is_read: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
