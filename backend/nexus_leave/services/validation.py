"""Pure rules for leave input: types, date ranges, day counts and balances.

Nothing in this module touches the database; every function is safe to call
from request validation, services and background jobs alike.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime

from nexus_leave.models.enums import LeaveType

# Balance ceilings per leave type. This is the single source of truth for the
# valid balance range [0, cap] used by normalization, the integrity sweep and
# employee writes.
BALANCE_CAPS: dict[LeaveType, int] = {
    LeaveType.CL: 30,
    LeaveType.RH: 15,
    LeaveType.EL: 18,
}

# Longest single request accepted per leave type. A request must also fit in
# the employee's balance, so in practice EL requests are bounded by the EL cap.
MAX_DAYS_PER_REQUEST: dict[LeaveType, int] = {
    LeaveType.CL: 30,
    LeaveType.RH: 15,
    LeaveType.EL: 60,
}
_DEFAULT_MAX_DAYS = 30

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_LEADING_INT_RE = re.compile(r"^\s*([-+]?\d+)")
_ANGLE_BRACKETS_RE = re.compile(r"[<>]")


# ---------------------------------------------------------------------------
# Leave types
# ---------------------------------------------------------------------------


def normalize_leave_type(leave_type: object) -> LeaveType | None:
    """Return the canonical leave type, or None if the value is not one."""
    if not isinstance(leave_type, str):
        return None
    candidate = leave_type.strip().upper()
    if candidate in LeaveType.__members__:
        return LeaveType(candidate)
    return None


def validate_leave_type(leave_type: object) -> bool:
    """True iff the trimmed, upper-cased value is CL, RH or EL."""
    return normalize_leave_type(leave_type) is not None


def balance_field(leave_type: LeaveType) -> str:
    """Name of the Employee attribute holding the balance for ``leave_type``."""
    return f"{leave_type.value.lower()}_balance"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def to_date(value: date | datetime | str) -> date:
    """Coerce a date, datetime or ISO string to a calendar date.

    The time component is dropped, so day arithmetic never drifts across
    timezone boundaries. Raises ValueError for unparseable input.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()
    msg = f"Cannot interpret {value!r} as a date"
    raise ValueError(msg)


def validate_date_range(
    start: date | datetime | str,
    end: date | datetime | str,
    today: date | None = None,
) -> bool:
    """True iff ``start`` is today or later and ``end`` is not before ``start``."""
    try:
        start_date = to_date(start)
        end_date = to_date(end)
    except ValueError:
        return False
    today = today or date.today()
    return start_date >= today and end_date >= start_date


def calculate_leave_days(start: date | datetime | str, end: date | datetime | str) -> int:
    """Inclusive number of calendar days between two dates, never less than 1."""
    days = (to_date(end) - to_date(start)).days + 1
    return max(1, days)


def validate_leave_days(days: object, leave_type: LeaveType | str) -> bool:
    """True iff ``days`` is at least 1 and within the per-request limit for the type."""
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        return False
    normalized = normalize_leave_type(leave_type)
    max_days = MAX_DAYS_PER_REQUEST[normalized] if normalized is not None else _DEFAULT_MAX_DAYS
    return days <= max_days


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive interval overlap: the ranges share at least one calendar day."""
    return start_a <= end_b and start_b <= end_a


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------


def normalize_leave_balance(value: object) -> int:
    """Coerce a balance to a non-negative integer.

    Missing or non-numeric values map to 0. Strings are read up to their
    first non-digit character and floats are truncated.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return max(0, int(value))
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match is None:
            return 0
        return max(0, int(match.group(1)))
    return 0


def clamp_balance(value: object, leave_type: LeaveType) -> int:
    """Normalize a balance and cap it at the ceiling for its leave type."""
    return min(BALANCE_CAPS[leave_type], normalize_leave_balance(value))


def is_balance_in_range(value: int, leave_type: LeaveType) -> bool:
    return 0 <= value <= BALANCE_CAPS[leave_type]


# ---------------------------------------------------------------------------
# Identifiers and free text
# ---------------------------------------------------------------------------


def validate_employee_id(employee_id: object) -> bool:
    return isinstance(employee_id, str) and employee_id.strip() != ""


def validate_email(email: object) -> bool:
    return isinstance(email, str) and _EMAIL_RE.match(email.strip()) is not None


def sanitize_input(value: str) -> str:
    """Trim whitespace and strip angle brackets from free text before storing it.

    This is a minimal guard against markup injection, not an HTML sanitizer.
    """
    return _ANGLE_BRACKETS_RE.sub("", value.strip())
