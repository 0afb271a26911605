"""Tests for cloudscope.core models, graph types and registry."""

import pytest

from cloudscope.core.errors import BackendError, NormalizationError, ValidationError
from cloudscope.core.graph import Graph, GraphEdge, GraphNode, Position
from cloudscope.core.models import Credential, PermissionProfile, Provider, Resource, ResourceGroup
from cloudscope.core.registry import NormalizerRegistry, provider_key


class TestProvider:
    """Tests for Provider resolution."""

    @pytest.mark.parametrize("value,expected", [
        ("AWS", Provider.AWS),
        ("aws", Provider.AWS),
        ("阿里云", Provider.ALIYUN),
        ("Aliyun", Provider.ALIYUN),
        ("alibaba", Provider.ALIYUN),
        (" gcp ", Provider.GCP),
        ("azure", Provider.AZURE),
        (Provider.GCP, Provider.GCP),
    ])
    def test_resolve(self, value, expected):
        assert Provider.resolve(value) is expected

    def test_unknown(self):
        assert Provider.resolve("Oracle") is None
        assert Provider.resolve(None) is None

    def test_provider_key(self):
        assert provider_key("阿里云") == "aliyun"
        assert provider_key("Oracle") == "oracle"


class TestResource:
    """Tests for Resource."""

    def test_to_dict_flattens_attributes(self):
        resource = Resource(id="i-1", name="web", type="ec2", status="running", region="us-east-1",
                            attributes={"vpcId": "vpc-1", "id": "shadowed"})
        assert resource.to_dict() == {
            "id": "i-1",
            "name": "web",
            "type": "ec2",
            "status": "running",
            "region": "us-east-1",
            "vpcId": "vpc-1",
        }

    def test_from_dict_round_trip(self):
        data = {"id": "b1", "name": "b1", "type": "s3", "status": "active", "region": "global", "objects": []}
        assert Resource.from_dict(data).to_dict() == data

    @pytest.mark.parametrize("field", ["id", "name", "type", "status", "region"])
    def test_empty_core_field_rejected(self, field):
        values = {"id": "i-1", "name": "n", "type": "ec2", "status": "running", "region": "r"}
        values[field] = " "
        with pytest.raises(NormalizationError):
            Resource(**values)

    def test_non_string_ids_coerced(self):
        resource = Resource(id=123, name="n", type="compute", status="RUNNING", region="us-central1")
        assert resource.id == "123"
        assert resource.key == ("compute", "us-central1", "123")


class TestOtherModels:
    """Tests for credentials, groups and profiles."""

    def test_credential_from_dict(self):
        credential = Credential.from_dict({"id": 3, "cloudProvider": "AWS", "name": "prod"})
        assert credential.provider == "AWS"
        assert credential.region == ""
        assert credential.display_name == "prod (AWS)"
        assert credential.provider_enum is Provider.AWS

    def test_group_from_dict(self):
        group = ResourceGroup.from_dict({"id": 1, "name": "g", "resources": ["ec2"]})
        assert group.to_dict() == {"id": "1", "name": "g", "resources": ["ec2"], "created": ""}

    def test_profile_to_dict(self, admin_profile):
        data = admin_profile.to_dict()
        assert data["userType"] == "IAM User"
        assert data["potentialEscalation"] == ["iam:PassRole"]
        assert not admin_profile.is_terminal

    def test_root_is_terminal(self):
        assert PermissionProfile(user_type="Root").is_terminal


class TestErrors:
    """Tests for the error taxonomy."""

    def test_validation_error_dict(self):
        error = ValidationError("Group name must not be empty", field="name")
        assert error.to_dict() == {"error": "Group name must not be empty", "details": {"field": "name"}}

    def test_backend_error_without_status(self):
        assert BackendError("Backend unreachable").to_dict() == {"error": "Backend unreachable"}


class TestGraph:
    """Tests for graph serialization."""

    def test_round_trip(self):
        graph = Graph(
            nodes=[GraphNode(id="a", label="A", position=Position(x=1, y=2), style="vpc", data={"k": 1})],
            edges=[GraphEdge(id="a->b", source="a", target="b", hint="contains")],
        )
        assert Graph.from_dict(graph.to_dict()).to_dict() == graph.to_dict()

    def test_edge_omits_unset_fields(self):
        assert GraphEdge(id="a->b", source="a", target="b").to_dict() == {"id": "a->b", "source": "a", "target": "b"}


class TestNormalizerRegistry:
    """Tests for an isolated registry."""

    def test_register_and_get(self):
        registry = NormalizerRegistry()

        @registry.normalizer(name="ec2", provider="AWS")
        def normalize(raw, defaults):
            """Normalize things.

            More text.
            """

        assert registry.get("ec2", "aws") is normalize
        assert registry.get("ec2", "GCP") is None
        assert "aws:ec2" in registry
        assert registry.list_names("AWS") == ["ec2"]
        assert registry.get_metadata("ec2", "AWS")["description"] == "Normalize things."

    def test_get_all_by_provider(self):
        registry = NormalizerRegistry()
        registry.register("ecs", item=len, provider="阿里云")
        registry.register("ec2", item=len, provider="AWS")
        assert list(registry.get_all("Aliyun")) == ["aliyun:ecs"]
        assert len(registry) == 2
