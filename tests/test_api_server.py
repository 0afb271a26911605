"""Tests for the CloudScope Flask API."""

import pytest

from cloudscope.api.errors import STATUS_CODES, status_for
from cloudscope.api.server import create_app
from cloudscope.core.errors import (
    BackendError,
    CloudScopeError,
    EnumerationInProgressError,
    GroupNotFoundError,
    PersistenceError,
    ValidationError,
)
from cloudscope.core.models import PermissionProfile

CREDENTIAL = {"id": 1, "provider": "AWS", "region": "us-east-1", "name": "prod"}


def _client_for(backend, memory_store, fast_settings):
    app = create_app(backend=backend, store=memory_store, settings=fast_settings)
    app.config["TESTING"] = True
    return app.test_client()


class TestMeta:
    """Tests for health, types and metrics endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"

    def test_types(self, client):
        """Test the catalog listing with all first and aliases."""
        data = client.get("/types/AWS").get_json()
        assert data["provider"] == "AWS"
        assert data["types"][0] == {"code": "all", "label": "All Resources"}
        assert data["aliases"] == {"iam": ["iamRoles", "iamUsers"]}

    def test_types_aliyun_by_name(self, client):
        data = client.get("/types/aliyun").get_json()
        assert data["provider"] == "阿里云"
        assert [t["code"] for t in data["types"]] == ["all", "ecs", "oss", "ramRoles", "ramUsers"]

    def test_types_unknown_provider(self, client):
        data = client.get("/types/Oracle").get_json()
        assert [t["code"] for t in data["types"]] == ["all"]

    def test_metrics(self, client):
        client.get("/health")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert b"cloudscope_http_requests_total" in response.data

    def test_unknown_route(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert "error" in response.get_json()


class TestEnumerations:
    """Tests for enumeration endpoints."""

    def test_run_and_fetch(self, client, fake_backend):
        """Test a run returns final state and can be fetched with filters."""
        response = client.post("/enumerations", json={"credential": CREDENTIAL, "resources": ["ec2", "s3"]})

        assert response.status_code == 200
        data = response.get_json()
        assert data["phase"] == "completed"
        assert [r["id"] for r in data["resources"]] == ["i-1", "b1"]
        assert data["progress"]["s3"] == {"percent": 100, "status": "1 resources", "state": "done"}
        assert fake_backend.calls == [("enumerate", 1, "ec2,s3")]

        fetched = client.get("/enumerations/1?type=s3").get_json()
        assert [r["id"] for r in fetched["resources"]] == ["b1"]
        assert fetched["regions"] == {"us-east-1": {"total": 2, "by_type": {"ec2": 1, "s3": 1}}}
        assert fetched["running"] is False

    def test_defaults_to_all(self, client, fake_backend):
        client.post("/enumerations", json={"credential": CREDENTIAL})
        assert fake_backend.calls == [("enumerate", 1, "all")]

    def test_cloud_provider_key_accepted(self, client, fake_backend):
        credential = {"id": 5, "cloudProvider": "AWS"}
        response = client.post("/enumerations", json={"credential": credential, "resources": ["ec2"]})
        assert response.status_code == 200
        assert response.get_json()["resources"][0]["region"] == "global"

    def test_run_with_group(self, client, fake_backend):
        """Test a saved group replaces the selection."""
        group = client.post("/groups", json={"name": "storage", "resources": ["s3"]}).get_json()

        response = client.post("/enumerations", json={"credential": CREDENTIAL, "group_id": group["id"]})

        assert response.status_code == 200
        assert response.get_json()["selection"] == ["s3"]
        assert fake_backend.calls == [("enumerate", 1, "s3")]

    def test_resources_and_group_conflict(self, client):
        response = client.post(
            "/enumerations",
            json={"credential": CREDENTIAL, "resources": ["ec2"], "group_id": "g1"},
        )
        assert response.status_code == 400
        assert response.get_json()["error"] == "Provide either resources or group_id, not both"

    def test_missing_credential(self, client):
        response = client.post("/enumerations", json={"resources": ["ec2"]})
        assert response.status_code == 400
        assert response.get_json()["details"]["field"] == "credential"

    def test_empty_selection(self, client, fake_backend):
        response = client.post("/enumerations", json={"credential": CREDENTIAL, "resources": []})
        assert response.status_code == 400
        assert response.get_json()["error"] == "No resource types selected"
        assert fake_backend.calls == []

    def test_backend_failure(self, failing_backend, memory_store, fast_settings):
        """Test backend errors surface as 502 and the run state is failed."""
        client = _client_for(failing_backend, memory_store, fast_settings)

        response = client.post("/enumerations", json={"credential": CREDENTIAL, "resources": ["ec2"]})

        assert response.status_code == 502
        assert response.get_json()["error"] == "Credential not found"
        state = client.get("/enumerations/1").get_json()
        assert state["phase"] == "failed"
        assert state["progress"] == {}

    def test_unknown_enumeration(self, client):
        assert client.get("/enumerations/42").status_code == 404

    def test_cancel_without_run(self, client):
        assert client.post("/enumerations/1/cancel").get_json() == {"cancelled": False}


class TestGroups:
    """Tests for resource group endpoints."""

    def test_crud(self, client):
        created = client.post("/groups", json={"name": "compute", "resources": ["ec2", "eks"]})
        assert created.status_code == 201
        group_id = created.get_json()["id"]

        assert [g["id"] for g in client.get("/groups").get_json()["groups"]] == [group_id]

        patched = client.patch(f"/groups/{group_id}", json={"resources": ["ec2"]}).get_json()
        assert patched["name"] == "compute"
        assert patched["resources"] == ["ec2"]

        assert client.delete(f"/groups/{group_id}").get_json() == {"deleted": group_id}
        assert client.get(f"/groups/{group_id}").status_code == 404

    def test_empty_name(self, client, memory_store):
        response = client.post("/groups", json={"name": " ", "resources": ["ec2"]})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Group name must not be empty", "details": {"field": "name"}}
        assert memory_store.get("resourceGroups") is None

    def test_missing_body(self, client):
        assert client.post("/groups").status_code == 400


class TestGraphs:
    """Tests for graph endpoints."""

    def test_topology_after_run(self, client):
        client.post("/enumerations", json={"credential": CREDENTIAL, "resources": ["ec2"]})

        graph = client.get("/graphs/topology/1").get_json()

        assert graph["nodes"][0]["label"] == "prod (AWS)"
        assert [n["id"] for n in graph["nodes"]] == ["account", "ec2-i_1"]

    def test_topology_without_run(self, client):
        assert client.get("/graphs/topology/1").status_code == 404

    def test_escalation(self, client, fake_backend, admin_profile):
        fake_backend.profile = admin_profile

        data = client.post("/graphs/escalation", json={"credential_id": 1}).get_json()

        assert data["terminal"] is False
        assert [t["id"] for t in data["matchedTechniques"]] == ["passrole_ec2"]
        assert data["graph"]["nodes"][0]["id"] == "root"

    def test_terminal_profile_conflict(self, client, fake_backend):
        """Test root profiles are refused unless forced."""
        fake_backend.profile = PermissionProfile(user_type="Root")

        refused = client.post("/graphs/escalation", json={"credential_id": 1})
        forced = client.post("/graphs/escalation", json={"credential_id": 1, "force": True})

        assert refused.status_code == 409
        assert refused.get_json()["details"]["terminal"] is True
        assert forced.status_code == 200
        assert forced.get_json()["graph"]["nodes"][0]["label"] == "Root"

    def test_attack_path(self, client, fake_backend, admin_profile):
        fake_backend.profile = admin_profile
        client.post("/enumerations", json={"credential": CREDENTIAL, "resources": ["ec2", "s3"]})

        graph = client.post("/graphs/attack-path", json={"credential": CREDENTIAL}).get_json()

        assert [n["id"] for n in graph["nodes"]] == ["start", "permissions", "escalation", "ec2", "s3", "end"]

    def test_attack_path_requires_credential(self, client):
        response = client.post("/graphs/attack-path", json={})
        assert response.status_code == 400
        assert response.get_json()["details"]["field"] == "credential"

    def test_attack_path_credential_needs_provider(self, client):
        response = client.post("/graphs/attack-path", json={"credential": {"id": 1}})
        assert response.status_code == 400
        assert response.get_json()["details"]["field"] == "credential.provider"


class TestErrorMapping:
    """Tests for domain error status codes."""

    @pytest.mark.parametrize("error,status", [
        (ValidationError("bad"), 400),
        (GroupNotFoundError("g1"), 404),
        (EnumerationInProgressError(1), 409),
        (BackendError("down"), 502),
        (PersistenceError("disk"), 500),
        (CloudScopeError("other"), 500),
    ])
    def test_status_for(self, error, status):
        assert status_for(error) == status

    def test_every_mapped_error_is_domain_error(self):
        assert all(issubclass(error_type, CloudScopeError) for error_type, _ in STATUS_CODES)
