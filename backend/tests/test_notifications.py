"""Tests for notification endpoints: targeted, broadcast, read state and cleanup."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient

    from nexus_leave.models import Employee

    MakeEmployee = Callable[..., Awaitable[Employee]]

NOTIFICATIONS_URL = "/api/notifications"


async def _notify(client: AsyncClient, message: str, employee_id: str | None = None) -> dict:
    body = {"type": "System Update", "message": message}
    if employee_id is not None:
        body["employee_id"] = employee_id
    resp = await client.post(NOTIFICATIONS_URL, json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_create_targeted_notification(async_client: AsyncClient, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001")

    data = await _notify(async_client, "Welcome", employee_id="emp001")

    assert data["employee_id"] == "EMP001"
    assert data["is_read"] is False


async def test_create_broadcast_notification(async_client: AsyncClient) -> None:
    data = await _notify(async_client, "Office closed Friday")
    assert data["employee_id"] is None


async def test_create_requires_type_and_message(async_client: AsyncClient) -> None:
    resp = await async_client.post(NOTIFICATIONS_URL, json={"message": "x"})
    assert resp.status_code == 400
    resp = await async_client.post(NOTIFICATIONS_URL, json={"type": "System Update", "message": "  "})
    assert resp.status_code == 400


async def test_create_for_unknown_employee(async_client: AsyncClient) -> None:
    resp = await async_client.post(
        NOTIFICATIONS_URL, json={"type": "System Update", "message": "Hi", "employee_id": "GHOST"}
    )
    assert resp.status_code == 404


async def test_employee_sees_own_and_broadcast(async_client: AsyncClient, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001")
    await make_employee("EMP002")
    await _notify(async_client, "For one", employee_id="EMP001")
    await _notify(async_client, "For two", employee_id="EMP002")
    await _notify(async_client, "For all")

    resp = await async_client.get(f"{NOTIFICATIONS_URL}/employee/EMP001")

    messages = {n["message"] for n in resp.json()["items"]}
    assert messages == {"For one", "For all"}

    resp = await async_client.get(NOTIFICATIONS_URL)
    assert resp.json()["total"] == 3


async def test_unread_count_and_mark_all_read(async_client: AsyncClient, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001")
    await _notify(async_client, "One", employee_id="EMP001")
    await _notify(async_client, "Two")

    resp = await async_client.get(f"{NOTIFICATIONS_URL}/unread/count/EMP001")
    assert resp.json() == {"count": 2}

    resp = await async_client.put(f"{NOTIFICATIONS_URL}/employee/EMP001/read-all")
    assert resp.json() == {"affected": 2}

    resp = await async_client.get(f"{NOTIFICATIONS_URL}/unread/count/EMP001")
    assert resp.json() == {"count": 0}


async def test_mark_single_read(async_client: AsyncClient) -> None:
    created = await _notify(async_client, "Ping")

    resp = await async_client.put(f"{NOTIFICATIONS_URL}/{created['id']}/read")

    assert resp.status_code == 200
    assert resp.json()["is_read"] is True


async def test_mark_unknown_read(async_client: AsyncClient) -> None:
    resp = await async_client.put(f"{NOTIFICATIONS_URL}/{uuid.uuid4()}/read")
    assert resp.status_code == 404


async def test_delete_notification(async_client: AsyncClient) -> None:
    created = await _notify(async_client, "Ping")

    resp = await async_client.delete(f"{NOTIFICATIONS_URL}/{created['id']}")
    assert resp.status_code == 204

    resp = await async_client.delete(f"{NOTIFICATIONS_URL}/{created['id']}")
    assert resp.status_code == 404


async def test_delete_employee_notifications_keeps_broadcasts(
    async_client: AsyncClient, make_employee: MakeEmployee
) -> None:
    await make_employee("EMP001")
    await _notify(async_client, "Own", employee_id="EMP001")
    await _notify(async_client, "Everyone")

    resp = await async_client.delete(f"{NOTIFICATIONS_URL}/employee/EMP001/all")
    assert resp.json() == {"affected": 1}

    resp = await async_client.get(f"{NOTIFICATIONS_URL}/employee/EMP001")
    assert [n["message"] for n in resp.json()["items"]] == ["Everyone"]


async def test_sample_notifications(async_client: AsyncClient, make_employee: MakeEmployee) -> None:
    await make_employee("EMP001")

    resp = await async_client.post(f"{NOTIFICATIONS_URL}/test", json={"employee_id": "EMP001"})

    assert resp.status_code == 201
    data = resp.json()
    assert data["total"] == 3
    assert {n["type"] for n in data["items"]} == {"Leave Approved", "Leave Request", "System Update"}
