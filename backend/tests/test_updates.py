"""
Updates API: defaults on create, list filters, author-only edit and delete.
"""

import datetime as dt

import pytest


@pytest.fixture
def project(fake_client):
    account = fake_client.seed("accounts", name="Acme Logistics", type="Enterprise", status="Active")
    return fake_client.seed("projects", account_id=account["id"], name="Routing", status="Proposal")


@pytest.fixture
def other_profile(fake_client):
    return fake_client.seed("profiles", name="Omar", pin="777777", Type="User", user_id="auth-omar")


def test_create_update_defaults(client, fake_client, project, user_profile, auth_headers):
    res = client.post(
        "/api/v1/updates",
        json={"project_id": project["id"], "content": "  Called procurement  "},
        headers=auth_headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["type"] == "general"
    assert body["date"] == dt.date.today().isoformat()
    assert body["created_by"] == user_profile["id"]
    assert body["content"] == "Called procurement"
    assert body["project_name"] == "Routing"
    assert body["account_name"] == "Acme Logistics"
    assert body["author_name"] == "Jane Doe"
    assert fake_client.tables["updates"][0]["created_by"] == user_profile["id"]


def test_create_update_ignores_client_supplied_author(client, project, user_profile, other_profile, auth_headers):
    res = client.post(
        "/api/v1/updates",
        json={"project_id": project["id"], "content": "x", "created_by": other_profile["id"]},
        headers=auth_headers,
    )
    assert res.json()["created_by"] == user_profile["id"]


@pytest.mark.parametrize(
    "payload",
    [
        {"content": "no project"},
        {"project_id": "p", "content": "   "},
        {"project_id": "p", "content": "x", "type": "sms"},
        {"project_id": "p", "content": "x", "date": "not-a-date"},
    ],
)
def test_create_update_validation(client, auth_headers, payload):
    assert client.post("/api/v1/updates", json=payload, headers=auth_headers).status_code == 422


def test_create_update_unknown_project_is_400(client, auth_headers):
    res = client.post("/api/v1/updates", json={"project_id": "nope", "content": "x"}, headers=auth_headers)
    assert res.status_code == 400


def test_list_updates_filters(client, fake_client, project, user_profile, other_profile, auth_headers):
    fake_client.seed("updates", project_id=project["id"], created_by=user_profile["id"], content="Demo booked", type="meeting", date="2025-03-02")
    fake_client.seed("updates", project_id=project["id"], created_by=other_profile["id"], content="Pricing sent", type="email", date="2025-03-05")

    updates = client.get("/api/v1/updates", headers=auth_headers).json()["updates"]
    assert [u["content"] for u in updates] == ["Pricing sent", "Demo booked"]
    assert updates[0]["author_name"] == "Omar"

    mine = client.get("/api/v1/updates", params={"created_by": user_profile["id"]}, headers=auth_headers).json()["updates"]
    assert [u["content"] for u in mine] == ["Demo booked"]

    by_account = client.get("/api/v1/updates", params={"q": "acme"}, headers=auth_headers).json()["updates"]
    assert len(by_account) == 2

    by_content = client.get("/api/v1/updates", params={"q": "PRICING"}, headers=auth_headers).json()["updates"]
    assert [u["content"] for u in by_content] == ["Pricing sent"]


def test_list_updates_capped_at_50(client, fake_client, project, user_profile, auth_headers):
    for i in range(55):
        fake_client.seed("updates", project_id=project["id"], created_by=user_profile["id"], content=f"n{i}", type="general", date=f"2025-01-{(i % 28) + 1:02d}")
    updates = client.get("/api/v1/updates", headers=auth_headers).json()["updates"]
    assert len(updates) == 50


def test_author_can_edit(client, fake_client, project, user_profile, auth_headers):
    row = fake_client.seed("updates", project_id=project["id"], created_by=user_profile["id"], content="draft", type="general", date="2025-03-02")
    res = client.patch(f"/api/v1/updates/{row['id']}", json={"content": "final", "type": "call"}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["content"] == "final"
    assert row["type"] == "call"


def test_non_author_cannot_edit_or_delete(client, fake_client, project, other_profile, auth_headers):
    row = fake_client.seed("updates", project_id=project["id"], created_by=other_profile["id"], content="theirs", type="general", date="2025-03-02")

    res = client.patch(f"/api/v1/updates/{row['id']}", json={"content": "mine now"}, headers=auth_headers)
    assert res.status_code == 403
    assert res.json()["detail"] == "Only the author can edit this update"

    res = client.delete(f"/api/v1/updates/{row['id']}", headers=auth_headers)
    assert res.status_code == 403
    assert row["content"] == "theirs"
    assert len(fake_client.tables["updates"]) == 1


def test_author_can_delete(client, fake_client, project, user_profile, auth_headers):
    row = fake_client.seed("updates", project_id=project["id"], created_by=user_profile["id"], content="oops", type="general", date="2025-03-02")
    assert client.delete(f"/api/v1/updates/{row['id']}", headers=auth_headers).status_code == 200
    assert fake_client.tables["updates"] == []


def test_edit_unknown_update_is_404(client, auth_headers):
    assert client.patch("/api/v1/updates/nope", json={"content": "x"}, headers=auth_headers).status_code == 404
