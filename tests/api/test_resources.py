"""Builder and project CRUD over HTTP."""

import pytest

pytestmark = pytest.mark.api


def builder_payload(**overrides):
    payload = {
        "companyName": "Skyline Developers",
        "type": "Residential",
        "yearsActive": 12,
        "registeredAddress": "4th Floor, MG Road, Bengaluru",
        "cin": "U45200KA2012PTC012345",
        "gst": "29ABCDE1234F1Z5",
        "website": "https://skylinedevelopers.in",
        "contactPerson": "R. Iyer",
        "email": "contact@skylinedevelopers.in",
        "phone": "+91 80 5555 0101",
        "regions": ["Bengaluru"],
        "overview": "Mid-segment residential towers.",
        "keyProjects": ["Skyline Heights"],
    }
    payload.update(overrides)
    return payload


def project_payload(**overrides):
    payload = {
        "title": "Lakeview Residences",
        "builderName": "Skyline Developers",
        "city": "Pune",
        "location": "Hinjewadi Phase 2",
        "stage": "Under Construction",
        "priceRange": "85L - 1.4Cr",
        "expectedYield": "7-9%",
        "configurations": "2, 3 BHK",
        "area": "950 - 1450 sq ft",
        "possession": "Dec 2027",
        "reraNumber": "P52100012345",
    }
    payload.update(overrides)
    return payload


def test_create_then_verify_builder(client):
    created = client.post("/api/builders", json=builder_payload())
    assert created.status_code == 201
    builder = created.json()
    assert builder["id"]
    assert builder["createdAt"] == "2026-01-01T00:00:00Z"

    patched = client.patch(f"/api/builders/{builder['id']}", json={"verified": True})
    assert patched.status_code == 200
    assert patched.json()["verified"] is True
    assert patched.json()["companyName"] == "Skyline Developers"
    assert "updatedAt" in patched.json()

    fetched = client.get(f"/api/builders/{builder['id']}")
    assert fetched.json() == patched.json()


def test_create_builder_missing_required_field(client):
    payload = builder_payload()
    del payload["cin"]

    response = client.post("/api/builders", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Invalid builder payload"
    assert "cin" in body["meta"]["errors"]["fieldErrors"]
    assert client.get("/api/builders").json() == []


def test_create_project_defaults_counters(client):
    response = client.post("/api/projects", json=project_payload())

    assert response.status_code == 201
    assert response.json()["views"] == 0
    assert response.json()["inquiries"] == 0


def test_list_projects(client):
    client.post("/api/projects", json=project_payload(title="A"))
    client.post("/api/projects", json=project_payload(title="B"))

    response = client.get("/api/projects")

    assert response.status_code == 200
    assert [p["title"] for p in response.json()] == ["A", "B"]


def test_get_missing_project_is_404(client):
    response = client.get("/api/projects/missing")

    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found"


def test_patch_with_wrong_type_is_rejected(client):
    project = client.post("/api/projects", json=project_payload()).json()

    response = client.patch(f"/api/projects/{project['id']}", json={"totalUnits": "200"})

    assert response.status_code == 400
    assert client.get(f"/api/projects/{project['id']}").json() == project


def test_patch_missing_project_is_404(client):
    response = client.patch("/api/projects/missing", json={"featured": True})
    assert response.status_code == 404


def test_delete_project(client):
    project = client.post("/api/projects", json=project_payload()).json()

    response = client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 204
    assert response.content == b""

    assert client.get(f"/api/projects/{project['id']}").status_code == 404
    assert client.delete(f"/api/projects/{project['id']}").status_code == 404


def test_non_object_body_is_rejected(client):
    response = client.post("/api/projects", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["meta"]["errors"]["formErrors"] == ["Expected a JSON object"]


def test_malformed_json_is_rejected(client):
    response = client.post(
        "/api/projects",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


# =============================================================================
# Protected writes
# =============================================================================


@pytest.fixture
def protected_client(document_store, identity, fake_clock):
    from fastapi.testclient import TestClient

    from buildvest.api.main import create_app
    from buildvest.api.services import Services
    from buildvest.config import Settings

    services = Services(
        settings=Settings(environment="test", protect_resource_writes=True),
        store=document_store,
        identity=identity,
        clock=fake_clock,
    )
    return TestClient(create_app(services=services))


def test_protected_writes_require_bearer(protected_client, identity):
    assert protected_client.post("/api/projects", json=project_payload()).status_code == 401

    account_id = identity.add_credential("admin@buildvest.in", "hunter22")
    headers = {"Authorization": f"Bearer {identity.token_for(account_id)}"}
    assert protected_client.post("/api/projects", json=project_payload(), headers=headers).status_code == 201


def test_protected_writes_leave_reads_open(protected_client):
    assert protected_client.get("/api/projects").status_code == 200
