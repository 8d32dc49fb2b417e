import pytest
from httpx import AsyncClient

from config import ApplicationConfig

API = ApplicationConfig.API_PREFIX


@pytest.fixture
def team_url(team):
    return f"{API}/teams/{team['id']}"


async def _publish(client, team_url, headers, **fields):
    payload = {"title": "Weekly update", "content": "All green"}
    payload.update(fields)
    response = await client.post(f"{team_url}/newsletters", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_newsletter_listing_filters_and_pins(client: AsyncClient, admin, team_url):
    # Arrange
    _, headers = admin
    project = await client.post(f"{team_url}/projects", json={"name": "Billing"}, headers=headers)
    project_id = project.json()["id"]
    pinned = await _publish(client, team_url, headers, title="Holiday calendar", is_pinned=True)
    release = await _publish(
        client,
        team_url,
        headers,
        title="Billing release",
        summary="Invoices v2",
        tags=["release"],
        project_id=project_id,
    )
    latest = await _publish(client, team_url, headers, title="Retro notes")

    # Act
    everything = await client.get(f"{team_url}/newsletters", headers=headers)
    by_tag = await client.get(f"{team_url}/newsletters?tag=release", headers=headers)
    by_search = await client.get(f"{team_url}/newsletters?search=INVOICES", headers=headers)
    by_project = await client.get(
        f"{team_url}/newsletters?project_id={project_id}", headers=headers
    )
    paged = await client.get(f"{team_url}/newsletters?page=2&limit=2", headers=headers)

    # Assert
    assert everything.status_code == 200
    assert [n["id"] for n in everything.json()["newsletters"]] == [
        pinned["id"],
        latest["id"],
        release["id"],
    ]
    assert [n["id"] for n in by_tag.json()["newsletters"]] == [release["id"]]
    assert [n["id"] for n in by_search.json()["newsletters"]] == [release["id"]]
    assert by_project.json()["newsletters"][0]["project"]["name"] == "Billing"
    assert by_project.json()["pagination"]["total"] == 1
    assert [n["id"] for n in paged.json()["newsletters"]] == [release["id"]]
    assert paged.json()["pagination"]["pages"] == 2


@pytest.mark.asyncio
async def test_only_author_or_team_lead_changes_newsletter(
    client: AsyncClient, admin, team_url, add_member
):
    # Arrange
    _, admin_headers = admin
    _, author_headers = await add_member("author@acme.com")
    _, other_headers = await add_member("other@acme.com")
    newsletter = await _publish(client, team_url, author_headers)
    url = f"{team_url}/newsletters/{newsletter['id']}"

    # Act
    read = await client.get(url, headers=other_headers)
    foreign_edit = await client.put(url, json={"title": "Hijacked"}, headers=other_headers)
    own_edit = await client.put(url, json={"title": " Edited "}, headers=author_headers)
    foreign_delete = await client.delete(url, headers=other_headers)
    admin_delete = await client.delete(url, headers=admin_headers)
    gone = await client.get(url, headers=admin_headers)

    # Assert
    assert read.status_code == 200
    assert read.json()["can_edit"] is False
    assert foreign_edit.status_code == 403
    assert own_edit.status_code == 200
    assert own_edit.json()["title"] == "Edited"
    assert own_edit.json()["updated_by_user"]["email"] == "author@acme.com"
    assert foreign_delete.status_code == 403
    assert admin_delete.status_code == 200
    assert gone.status_code == 404
    assert gone.json()["error"]["code"] == "NEWSLETTER_NOT_FOUND"


@pytest.mark.asyncio
async def test_newsletter_input_is_validated(client: AsyncClient, admin, team_url, add_member):
    _, headers = admin
    _, viewer_headers = await add_member("viewer@acme.com", role="viewer")

    blank = await client.post(
        f"{team_url}/newsletters", json={"title": "  ", "content": "Body"}, headers=headers
    )
    unknown_project = await client.post(
        f"{team_url}/newsletters",
        json={"title": "Update", "content": "Body", "project_id": team_url.rsplit("/", 1)[1]},
        headers=headers,
    )
    from_viewer = await client.post(
        f"{team_url}/newsletters",
        json={"title": "Update", "content": "Body"},
        headers=viewer_headers,
    )

    assert blank.status_code == 422
    assert unknown_project.status_code == 400
    assert unknown_project.json()["error"]["code"] == "INVALID_PROJECT"
    assert from_viewer.status_code == 403


@pytest.mark.asyncio
async def test_deleting_project_keeps_its_newsletters(client: AsyncClient, admin, team_url):
    _, headers = admin
    project = await client.post(f"{team_url}/projects", json={"name": "Legacy"}, headers=headers)
    project_id = project.json()["id"]
    newsletter = await _publish(client, team_url, headers, project_id=project_id)

    deleted = await client.delete(f"{team_url}/projects/{project_id}", headers=headers)
    kept = await client.get(f"{team_url}/newsletters/{newsletter['id']}", headers=headers)

    assert deleted.json()["cascade"]["newsletters_detached"] == 1
    assert kept.status_code == 200
    assert kept.json()["project_id"] is None
