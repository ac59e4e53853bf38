"""
Projects API: create with account reference, list filters, detail, partial update, delete.
"""

import pytest


@pytest.fixture
def acme(fake_client):
    return fake_client.seed("accounts", name="Acme Logistics", type="Enterprise", status="Active")


def test_created_project_appears_in_list(client, acme, auth_headers):
    res = client.post(
        "/api/v1/projects",
        json={
            "name": "Fleet telematics",
            "account_id": acme["id"],
            "value": 125000,
            "start_date": "2025-04-01",
            "end_date": "2025-09-30",
        },
        headers=auth_headers,
    )
    assert res.status_code == 201
    created = res.json()
    assert created["status"] == "Need Analysis"
    assert created["account"] == {"id": acme["id"], "name": "Acme Logistics", "type": "Enterprise"}

    listed = client.get("/api/v1/projects", headers=auth_headers).json()["projects"]
    assert [p["id"] for p in listed] == [created["id"]]
    assert listed[0]["value"] == 125000
    assert listed[0]["start_date"] == "2025-04-01"


def test_create_project_unknown_account_is_400(client, auth_headers):
    res = client.post(
        "/api/v1/projects",
        json={"name": "Orphan", "account_id": "missing"},
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Account not found"


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "account_id": "x"},
        {"name": "P"},
        {"name": "P", "account_id": "x", "status": "Won"},
        {"name": "P", "account_id": "x", "value": -1},
        {"name": "P", "account_id": "x", "start_date": "2025-05-01", "end_date": "2025-04-01"},
    ],
)
def test_create_project_validation(client, auth_headers, payload):
    res = client.post("/api/v1/projects", json=payload, headers=auth_headers)
    assert res.status_code == 422


def test_create_project_blank_optionals_become_null(client, acme, auth_headers):
    res = client.post(
        "/api/v1/projects",
        json={"name": "P", "account_id": acme["id"], "value": "", "start_date": "", "description": " "},
        headers=auth_headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["value"] is None
    assert body["start_date"] is None
    assert body["description"] is None


def test_list_filters(client, fake_client, acme, auth_headers):
    other = fake_client.seed("accounts", name="Bolt Labs", type="Startup", status="Active")
    fake_client.seed("projects", account_id=acme["id"], name="Routing", status="Proposal", created_at="2025-01-01T00:00:00+00:00")
    fake_client.seed("projects", account_id=other["id"], name="Pilot", status="Need Analysis", created_at="2025-02-01T00:00:00+00:00")

    all_projects = client.get("/api/v1/projects", headers=auth_headers).json()["projects"]
    assert [p["name"] for p in all_projects] == ["Pilot", "Routing"]

    by_account = client.get("/api/v1/projects", params={"q": "bolt"}, headers=auth_headers).json()["projects"]
    assert [p["name"] for p in by_account] == ["Pilot"]

    by_name = client.get("/api/v1/projects", params={"q": "ROUT"}, headers=auth_headers).json()["projects"]
    assert [p["name"] for p in by_name] == ["Routing"]

    by_status = client.get("/api/v1/projects", params={"status": "Proposal"}, headers=auth_headers).json()["projects"]
    assert [p["name"] for p in by_status] == ["Routing"]

    assert client.get("/api/v1/projects", params={"status": "Bogus"}, headers=auth_headers).status_code == 422


def test_project_detail_with_updates(client, fake_client, acme, user_profile, auth_headers):
    project = fake_client.seed("projects", account_id=acme["id"], name="Routing", status="Proposal")
    fake_client.seed("updates", project_id=project["id"], created_by=user_profile["id"], content="first", type="call", date="2025-01-01")
    fake_client.seed("updates", project_id=project["id"], created_by=user_profile["id"], content="second", type="email", date="2025-02-01")

    res = client.get(f"/api/v1/projects/{project['id']}", headers=auth_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["project"]["account"]["name"] == "Acme Logistics"
    assert [u["content"] for u in body["updates"]] == ["second", "first"]
    assert body["updates"][0]["account_name"] == "Acme Logistics"


def test_project_detail_unknown_is_404(client, auth_headers):
    assert client.get("/api/v1/projects/nope", headers=auth_headers).status_code == 404


def test_update_project(client, fake_client, acme, auth_headers):
    project = fake_client.seed("projects", account_id=acme["id"], name="Routing", status="Proposal", start_date="2025-03-01")
    res = client.patch(
        f"/api/v1/projects/{project['id']}",
        json={"status": "Closed Won", "value": 5000},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["status"] == "Closed Won"
    assert project["value"] == 5000


def test_update_project_end_before_existing_start_is_422(client, fake_client, acme, auth_headers):
    project = fake_client.seed("projects", account_id=acme["id"], name="Routing", status="Proposal", start_date="2025-03-01")
    res = client.patch(
        f"/api/v1/projects/{project['id']}",
        json={"end_date": "2025-02-01"},
        headers=auth_headers,
    )
    assert res.status_code == 422


def test_delete_project(client, fake_client, acme, auth_headers):
    project = fake_client.seed("projects", account_id=acme["id"], name="Routing", status="Proposal")
    res = client.delete(f"/api/v1/projects/{project['id']}", headers=auth_headers)
    assert res.status_code == 200
    assert fake_client.tables["projects"] == []
    assert client.delete(f"/api/v1/projects/{project['id']}", headers=auth_headers).status_code == 404


@pytest.mark.parametrize(
    "payload",
    [{"name": None}, {"account_id": None}, {"status": None}, {"status": None, "name": None}],
)
def test_update_project_null_required_field_is_422(client, fake_client, acme, auth_headers, payload):
    project = fake_client.seed("projects", account_id=acme["id"], name="Routing", status="Proposal")
    res = client.patch(f"/api/v1/projects/{project['id']}", json=payload, headers=auth_headers)
    assert res.status_code == 422
    assert (project["name"], project["status"], project["account_id"]) == ("Routing", "Proposal", acme["id"])


def test_update_project_blank_optionals_become_null(client, fake_client, acme, auth_headers):
    project = fake_client.seed(
        "projects",
        account_id=acme["id"],
        name="Routing",
        status="Proposal",
        value=4000,
        start_date="2025-03-01",
        end_date="2025-06-01",
    )
    res = client.patch(
        f"/api/v1/projects/{project['id']}",
        json={"value": "", "start_date": " ", "end_date": ""},
        headers=auth_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["value"] is None
    assert body["start_date"] is None
    assert body["end_date"] is None
