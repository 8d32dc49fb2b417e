import pytest
from httpx import AsyncClient

from config import ApplicationConfig

API = ApplicationConfig.API_PREFIX


@pytest.fixture
def team_url(team):
    return f"{API}/teams/{team['id']}"


@pytest.mark.asyncio
async def test_bandwidth_report_review_flow(client: AsyncClient, admin, team_url, add_member):
    # Arrange
    _, admin_headers = admin
    member, member_headers = await add_member("dev@acme.com")
    project = await client.post(
        f"{team_url}/projects", json={"name": "Billing"}, headers=admin_headers
    )
    payload = {
        "month": 6,
        "year": 2026,
        "total_working_days": 22,
        "available_days": 20,
        "allocations": [{"project_id": project.json()["id"], "allocated_days": 15}],
    }

    # Act
    created = await client.post(f"{team_url}/bandwidth", json=payload, headers=member_headers)
    duplicate = await client.post(f"{team_url}/bandwidth", json=payload, headers=member_headers)
    report_id = created.json()["id"]
    submitted = await client.post(
        f"{team_url}/bandwidth/{report_id}/submit", headers=member_headers
    )
    pending = await client.get(f"{team_url}/bandwidth/pending", headers=admin_headers)
    blank = await client.post(
        f"{team_url}/bandwidth/{report_id}/reject", json={"reason": "  "}, headers=admin_headers
    )
    rejected = await client.post(
        f"{team_url}/bandwidth/{report_id}/reject",
        json={"reason": "Leave is missing"},
        headers=admin_headers,
    )
    edited = await client.put(
        f"{team_url}/bandwidth/{report_id}",
        json={"notes": "Added leave"},
        headers=member_headers,
    )

    # Assert
    assert created.status_code == 201
    assert created.json()["allocations"][0]["allocated_percentage"] == 75
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "REPORT_EXISTS"
    assert submitted.json()["status"] == "submitted"
    assert [r["id"] for r in pending.json()] == [report_id]
    assert blank.status_code == 400
    assert blank.json()["error"]["code"] == "REJECTION_REASON_REQUIRED"
    assert rejected.json()["status"] == "rejected"
    assert edited.json()["status"] == "draft"
    assert edited.json()["rejection_reason"] is None

    notifications = await client.get(f"{team_url}/notifications", headers=member_headers)
    types = [n["type"] for n in notifications.json()["notifications"]]
    assert "bandwidth_rejected" in types
    assert "team_invite" in types


@pytest.mark.asyncio
async def test_member_cannot_approve_bandwidth(client: AsyncClient, team_url, add_member):
    _, member_headers = await add_member("dev@acme.com")
    created = await client.post(
        f"{team_url}/bandwidth",
        json={"month": 7, "year": 2026, "total_working_days": 21, "available_days": 21},
        headers=member_headers,
    )
    report_id = created.json()["id"]
    await client.post(f"{team_url}/bandwidth/{report_id}/submit", headers=member_headers)

    response = await client.post(
        f"{team_url}/bandwidth/{report_id}/approve", headers=member_headers
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_over_allocated_report_cannot_be_submitted(
    client: AsyncClient, admin, team_url, add_member
):
    _, admin_headers = admin
    _, member_headers = await add_member("dev@acme.com")
    project = await client.post(
        f"{team_url}/projects", json={"name": "Search"}, headers=admin_headers
    )
    created = await client.post(
        f"{team_url}/bandwidth",
        json={
            "month": 8,
            "year": 2026,
            "total_working_days": 21,
            "available_days": 10,
            "allocations": [{"project_id": project.json()["id"], "allocated_days": 12}],
        },
        headers=member_headers,
    )

    response = await client.post(
        f"{team_url}/bandwidth/{created.json()['id']}/submit", headers=member_headers
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "OVER_ALLOCATED"


@pytest.mark.asyncio
async def test_notifications_mark_read(client: AsyncClient, team_url, add_member):
    # Adding a member notifies them
    _, headers = await add_member("dev@acme.com")
    listed = await client.get(f"{team_url}/notifications", headers=headers)
    assert listed.json()["unread_count"] == 1
    notification_id = listed.json()["notifications"][0]["id"]

    marked = await client.patch(
        f"{team_url}/notifications/{notification_id}/read", headers=headers
    )
    assert marked.status_code == 200
    assert marked.json()["is_read"] is True

    unread = await client.get(f"{team_url}/notifications?unread_only=true", headers=headers)
    assert unread.json() == {"notifications": [], "unread_count": 0}

    deleted = await client.delete(f"{team_url}/notifications/{notification_id}", headers=headers)
    assert deleted.status_code == 200
    again = await client.delete(f"{team_url}/notifications/{notification_id}", headers=headers)
    assert again.status_code == 404
    assert again.json()["error"]["code"] == "NOTIFICATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_admin_dashboard(client: AsyncClient, admin, team_url, add_member):
    _, headers = admin
    await add_member("dev@acme.com")
    await client.post(f"{team_url}/projects", json={"name": "Ops"}, headers=headers)

    response = await client.get(f"{team_url}/admin/dashboard", headers=headers)

    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["total_members"] == 2
    assert stats["total_projects"] == 1
    assert stats["completion_rate"] == 0


@pytest.mark.asyncio
async def test_team_statistics_require_report_access(
    client: AsyncClient, admin, team_url, add_member
):
    _, admin_headers = admin
    _, member_headers = await add_member("dev@acme.com")

    allowed = await client.get(f"{team_url}/admin/statistics", headers=admin_headers)
    denied = await client.get(f"{team_url}/admin/statistics", headers=member_headers)

    assert allowed.status_code == 200
    assert allowed.json()["velocity_history"] == []
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "INSUFFICIENT_PERMISSION"
