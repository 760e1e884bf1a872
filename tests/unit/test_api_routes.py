"""
HTTP surface - API4 endpoint and health check
"""

import pytest
from fastapi.testclient import TestClient

from entity_api.app import create_app
from entity_api.database import connection
from entity_api.models.response import Api4Response, status_code_for


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(connection, "DATABASE_URL", "sqlite:///:memory:")
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.mark.unit
class TestApi4Routes:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_create_get_delete(self, client):
        response = client.post("/api4/Contact/create", json={"values": {"contact_type": "Individual", "first_name": "Ann"}})
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["entity"] == "Contact"
        assert body["action"] == "create"
        contact_id = body["values"][0]["id"]

        response = client.post("/api4/Contact/get", json={"where": [["id", "=", contact_id]], "selectRowCount": True})
        assert response.json()["count"] == 1

        response = client.post("/api4/Contact/delete", json={"where": [["id", "=", contact_id]]})
        assert response.json()["values"] == [{"id": contact_id}]

    def test_metadata_actions(self, client):
        response = client.post("/api4/Contact/getFields", json={"includeCustom": False})
        names = [field["name"] for field in response.json()["values"]]
        assert "id" in names

        response = client.post("/api4/Entity/get")
        assert response.status_code == 200
        assert "Contact" in [row["name"] for row in response.json()["values"]]

    def test_wrong_param_type_is_400(self, client):
        response = client.post("/api4/Contact/get", json={"debug": "not a bool"})
        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["entity"] == "Contact"
        assert body["error"]["type"] == "INVALID_PARAMETER"
        assert "debug" in body["error"]["message"]
        assert "type" in body["error"]["message"]

    def test_validation_error_is_400(self, client):
        response = client.post("/api4/Contact/delete", json={})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Parameter 'where' is required."

    def test_unauthorized_is_403(self, client, monkeypatch):
        monkeypatch.setattr("entity_api.actions.API_USER_PERMISSIONS", ["access CiviCRM"])
        response = client.post("/api4/Contact/delete", json={"where": [["id", "=", 1]]})
        assert response.status_code == 403
        assert response.json()["error"]["type"] == "UNAUTHORIZED_OPERATION"

    def test_unknown_entity_is_404(self, client):
        response = client.post("/api4/Spaceship/get")
        assert response.status_code == 404

    def test_unknown_action_is_404(self, client):
        response = client.post("/api4/Entity/create", json={"values": {}})
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Api Entity create does not exist."


@pytest.mark.unit
class TestApi4Response:

    def test_build_success(self):
        response = Api4Response.build_success(entity="Tag", action="get", values=[{"id": 1}])
        assert response.ok is True
        assert response.count == 1
        assert response.error is None

    def test_build_error(self):
        response = Api4Response.build_error(error_type="INVALID_QUERY", message="bad", entity="Tag")
        assert response.ok is False
        assert response.error.type == "INVALID_QUERY"
        assert response.values == []

    @pytest.mark.parametrize("error_code,status_code", [
        ("UNAUTHORIZED_OPERATION", 403),
        ("RESOURCE_NOT_FOUND", 404),
        ("CONFLICT", 409),
        ("INVALID_PARAMETER", 400),
    ])
    def test_status_codes(self, error_code, status_code):
        assert status_code_for(error_code) == status_code
