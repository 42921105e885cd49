"""Tests for the pure leave rules: types, dates, day counts and balance coercion."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from nexus_leave.models.enums import LeaveType
from nexus_leave.services.validation import (
    BALANCE_CAPS,
    balance_field,
    calculate_leave_days,
    clamp_balance,
    is_balance_in_range,
    normalize_leave_balance,
    normalize_leave_type,
    ranges_overlap,
    sanitize_input,
    to_date,
    validate_date_range,
    validate_email,
    validate_employee_id,
    validate_leave_days,
    validate_leave_type,
)

TODAY = date(2024, 1, 10)


# ---------------------------------------------------------------------------
# Leave types
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("value", ["CL", "cl ", " Rh", "el"])
def test_validate_leave_type_accepts_known_types(value: str) -> None:
    assert validate_leave_type(value) is True


@pytest.mark.parametrize("value", ["SICK", "", "   ", None, 3, "C L"])
def test_validate_leave_type_rejects_unknown_values(value: object) -> None:
    assert validate_leave_type(value) is False


def test_normalize_leave_type_returns_canonical_member() -> None:
    assert normalize_leave_type(" el ") is LeaveType.EL
    assert normalize_leave_type("sick") is None


def test_balance_field_names() -> None:
    assert balance_field(LeaveType.CL) == "cl_balance"
    assert balance_field(LeaveType.RH) == "rh_balance"
    assert balance_field(LeaveType.EL) == "el_balance"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def test_calculate_leave_days_is_inclusive() -> None:
    assert calculate_leave_days("2024-01-15", "2024-01-17") == 3


def test_calculate_leave_days_single_day() -> None:
    assert calculate_leave_days("2024-01-15", "2024-01-15") == 1


def test_calculate_leave_days_never_below_one() -> None:
    assert calculate_leave_days("2024-01-17", "2024-01-15") == 1


def test_calculate_leave_days_ignores_time_of_day() -> None:
    start = datetime(2024, 1, 15, 23, 30)
    end = datetime(2024, 1, 16, 0, 15)
    assert calculate_leave_days(start, end) == 2


def test_calculate_leave_days_across_month_boundary() -> None:
    assert calculate_leave_days(date(2024, 2, 28), date(2024, 3, 1)) == 3


def test_to_date_accepts_iso_datetime_strings() -> None:
    assert to_date("2024-01-15T10:00:00") == date(2024, 1, 15)


def test_to_date_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        to_date("next tuesday")


def test_validate_date_range_accepts_today_and_later() -> None:
    assert validate_date_range(TODAY, TODAY, today=TODAY) is True
    assert validate_date_range("2024-01-11", "2024-01-20", today=TODAY) is True


def test_validate_date_range_rejects_past_start() -> None:
    assert validate_date_range(TODAY - timedelta(days=1), TODAY, today=TODAY) is False


def test_validate_date_range_rejects_end_before_start() -> None:
    assert validate_date_range("2024-01-20", "2024-01-15", today=TODAY) is False


def test_validate_date_range_rejects_unparseable_input() -> None:
    assert validate_date_range("soon", "2024-01-15", today=TODAY) is False


def test_ranges_overlap_is_inclusive() -> None:
    assert ranges_overlap(date(2024, 1, 1), date(2024, 1, 5), date(2024, 1, 5), date(2024, 1, 8))
    assert not ranges_overlap(date(2024, 1, 1), date(2024, 1, 5), date(2024, 1, 6), date(2024, 1, 8))


# ---------------------------------------------------------------------------
# Day limits
# ---------------------------------------------------------------------------


def test_validate_leave_days_within_limits() -> None:
    assert validate_leave_days(1, "CL")
    assert validate_leave_days(30, LeaveType.CL)
    assert validate_leave_days(15, "rh")
    assert validate_leave_days(60, "EL")


def test_validate_leave_days_over_limits() -> None:
    assert not validate_leave_days(31, "CL")
    assert not validate_leave_days(16, "RH")
    assert not validate_leave_days(61, "EL")


@pytest.mark.parametrize("days", [0, -1, 1.5, "3", True, None])
def test_validate_leave_days_rejects_non_positive_or_non_integer(days: object) -> None:
    assert validate_leave_days(days, "CL") is False


def test_validate_leave_days_unknown_type_uses_default_limit() -> None:
    assert validate_leave_days(30, "SICK")
    assert not validate_leave_days(31, "SICK")


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, 0),
        (-5, 0),
        (12, 12),
        (7.9, 7),
        (float("nan"), 0),
        (float("inf"), 0),
        ("12", 12),
        ("12abc", 12),
        ("abc", 0),
        ("-3", 0),
        (True, 0),
        ([1], 0),
    ],
)
def test_normalize_leave_balance(value: object, expected: int) -> None:
    assert normalize_leave_balance(value) == expected


def test_clamp_balance_caps_per_type() -> None:
    assert clamp_balance(100, LeaveType.CL) == 30
    assert clamp_balance(100, LeaveType.RH) == 15
    assert clamp_balance(50, LeaveType.EL) == 18
    assert clamp_balance(-5, LeaveType.CL) == 0


@pytest.mark.parametrize("leave_type", list(LeaveType))
@pytest.mark.parametrize("value", [-100, -1, 0, 5, 18, 30, 31, 1000, "7", None])
def test_clamp_balance_is_in_range_and_idempotent(leave_type: LeaveType, value: object) -> None:
    once = clamp_balance(value, leave_type)
    assert 0 <= once <= BALANCE_CAPS[leave_type]
    assert clamp_balance(once, leave_type) == once


def test_is_balance_in_range() -> None:
    assert is_balance_in_range(18, LeaveType.EL)
    assert not is_balance_in_range(19, LeaveType.EL)
    assert not is_balance_in_range(-1, LeaveType.CL)


# ---------------------------------------------------------------------------
# Identifiers and free text
# ---------------------------------------------------------------------------


def test_validate_employee_id() -> None:
    assert validate_employee_id("EMP001")
    assert not validate_employee_id("   ")
    assert not validate_employee_id(None)


def test_validate_email() -> None:
    assert validate_email("jane@example.com")
    assert not validate_email("jane@example")
    assert not validate_email("jane doe@example.com")


def test_sanitize_input_trims_and_strips_angle_brackets() -> None:
    assert sanitize_input("  <b>Family trip</b> ") == "bFamily trip/b"
