"""Tests for the AWS normalizers."""

import pytest

from cloudscope.core.errors import NormalizationError
from cloudscope.core.registry import normalizers
from cloudscope.normalizers import NormalizerDefaults, normalize_items
from cloudscope.normalizers.aws.compute import normalize_ec2, normalize_eks, normalize_lambda
from cloudscope.normalizers.aws.iam import normalize_iam_role, normalize_iam_user
from cloudscope.normalizers.aws.messaging import normalize_sns_topic, normalize_sqs_queue
from cloudscope.normalizers.aws.network import normalize_elb, normalize_route_table, normalize_vpc
from cloudscope.normalizers.aws.security import normalize_kms_key, normalize_trail
from cloudscope.normalizers.aws.storage import normalize_dynamodb, normalize_rds, normalize_s3

DEFAULTS = NormalizerDefaults(region="us-east-1", provider="AWS")


class TestEC2:
    """Tests for EC2 instance normalization."""

    def test_minimal_instance(self):
        """Test an untagged instance falls back to 'Instance <id>'."""
        resource = normalize_ec2({"instanceId": "i-1", "state": "running"}, DEFAULTS)
        assert resource.to_dict() == {
            "id": "i-1",
            "name": "Instance i-1",
            "type": "ec2",
            "status": "running",
            "region": "us-east-1",
        }

    def test_name_tag_from_map(self):
        """Test tags.Name is used as the name."""
        resource = normalize_ec2(
            {"instanceId": "i-2", "state": "stopped", "tags": {"Name": "web"}, "region": "eu-west-1"},
            DEFAULTS,
        )
        assert resource.name == "web"
        assert resource.region == "eu-west-1"
        assert resource.status == "stopped"

    def test_name_tag_from_list(self):
        """Test AWS-style [{Key, Value}] tag lists."""
        resource = normalize_ec2(
            {"instanceId": "i-3", "tags": [{"Key": "Name", "Value": "db"}], "vpcId": "vpc-1"},
            DEFAULTS,
        )
        assert resource.name == "db"
        assert resource.get("vpcId") == "vpc-1"

    def test_state_object(self):
        """Test {"Name": ...} state shapes are flattened."""
        resource = normalize_ec2({"instanceId": "i-4", "state": {"Code": 16, "Name": "running"}}, DEFAULTS)
        assert resource.status == "running"

    def test_empty_ips_dropped(self):
        """Test empty IP strings do not become attributes."""
        resource = normalize_ec2({"instanceId": "i-5", "publicIp": "", "privateIp": "10.0.0.1"}, DEFAULTS)
        assert "publicIp" not in resource.to_dict()
        assert resource.get("privateIp") == "10.0.0.1"

    def test_missing_instance_id(self):
        """Test a missing natural key raises NormalizationError."""
        with pytest.raises(NormalizationError) as exc_info:
            normalize_ec2({"state": "running"}, DEFAULTS)
        assert exc_info.value.resource_type == "ec2"

    def test_non_mapping_item(self):
        """Test non-object items are rejected."""
        with pytest.raises(NormalizationError):
            normalize_ec2("i-1", DEFAULTS)


class TestS3:
    """Tests for S3 bucket normalization."""

    def test_minimal_bucket(self):
        """Test a bare bucket gets active status and an empty object list."""
        resource = normalize_s3({"bucketName": "b1"}, DEFAULTS)
        assert resource.to_dict() == {
            "id": "b1",
            "name": "b1",
            "type": "s3",
            "status": "active",
            "region": "us-east-1",
            "objects": [],
        }

    def test_objects_copied_verbatim(self):
        """Test objects and moreObjects are copied as-is."""
        objects = [{"key": "a.txt", "size": 3, "lastModified": "2024-01-01T00:00:00Z"}]
        resource = normalize_s3({"bucketName": "b2", "objects": objects, "moreObjects": True}, DEFAULTS)
        assert resource.get("objects") == objects
        assert resource.get("moreObjects") is True

    def test_objects_must_be_list(self):
        """Test a malformed object listing raises."""
        with pytest.raises(NormalizationError):
            normalize_s3({"bucketName": "b3", "objects": "nope"}, DEFAULTS)


class TestIAM:
    """Tests for IAM normalizers."""

    def test_role(self):
        """Test roles are keyed by roleId and named by roleName."""
        resource = normalize_iam_role(
            {"roleName": "Admin", "roleId": "AROA1", "arn": "arn:aws:iam::1:role/Admin"}, DEFAULTS
        )
        assert resource.id == "AROA1"
        assert resource.name == "Admin"
        assert resource.status == "active"
        assert resource.get("arn") == "arn:aws:iam::1:role/Admin"

    def test_role_without_id_uses_name(self):
        """Test GCP-style roles that carry only roleName."""
        resource = normalize_iam_role({"roleName": "roles/compute.admin"}, DEFAULTS)
        assert resource.id == "roles/compute.admin"

    def test_user(self):
        """Test users are keyed by userId."""
        resource = normalize_iam_user({"userName": "alice", "userId": "AIDA1"}, DEFAULTS)
        assert resource.id == "AIDA1"
        assert resource.name == "alice"
        assert resource.type == "iamUsers"

    def test_user_missing_id(self):
        """Test a user without userId raises."""
        with pytest.raises(NormalizationError):
            normalize_iam_user({"userName": "alice"}, DEFAULTS)


class TestOtherTypes:
    """Tests for the remaining AWS types."""

    def test_vpc(self):
        resource = normalize_vpc({"vpcId": "vpc-1", "cidrBlock": "10.0.0.0/16", "state": "available"}, DEFAULTS)
        assert resource.name == "vpc-1"
        assert resource.status == "available"
        assert resource.get("cidrBlock") == "10.0.0.0/16"

    def test_route_table_defaults_to_active(self):
        resource = normalize_route_table({"routeTableId": "rtb-1", "vpcId": "vpc-1"}, DEFAULTS)
        assert resource.status == "active"
        assert resource.get("vpcId") == "vpc-1"

    def test_elb_state_object(self):
        resource = normalize_elb(
            {"loadBalancerName": "lb", "loadBalancerArn": "arn:lb", "state": {"Code": "active"}}, DEFAULTS
        )
        assert resource.id == "arn:lb"
        assert resource.name == "lb"
        assert resource.status == "active"

    def test_eks(self):
        resource = normalize_eks(
            {"name": "c1", "status": "ACTIVE", "resourcesVpcConfig": {"VpcId": "vpc-9"}}, DEFAULTS
        )
        assert resource.status == "ACTIVE"
        assert resource.get("vpcId") == "vpc-9"

    def test_lambda_defaults_to_active(self):
        resource = normalize_lambda({"functionName": "fn", "runtime": "python3.12"}, DEFAULTS)
        assert resource.status == "active"
        assert resource.get("runtime") == "python3.12"

    def test_lambda_ignores_state(self):
        """Test a Lambda state field never overrides the active status."""
        resource = normalize_lambda({"functionName": "fn", "state": "Pending"}, DEFAULTS)
        assert resource.status == "active"

    def test_kms_named_by_description(self):
        resource = normalize_kms_key({"keyId": "k1", "description": "main key", "keyState": "Enabled"}, DEFAULTS)
        assert resource.name == "main key"
        assert resource.status == "Enabled"

    def test_rds(self):
        resource = normalize_rds({"dbInstanceIdentifier": "db1", "status": "available", "engine": "postgres"}, DEFAULTS)
        assert resource.status == "available"
        assert resource.get("engine") == "postgres"

    def test_dynamodb(self):
        resource = normalize_dynamodb({"tableName": "t1", "tableStatus": "ACTIVE"}, DEFAULTS)
        assert resource.id == "t1"
        assert resource.status == "ACTIVE"

    def test_cloudtrail_home_region(self):
        resource = normalize_trail({"name": "trail", "homeRegion": "us-west-2"}, DEFAULTS)
        assert resource.region == "us-west-2"

    def test_sns_name_from_arn(self):
        resource = normalize_sns_topic({"topicArn": "arn:aws:sns:us-east-1:1:alerts"}, DEFAULTS)
        assert resource.name == "alerts"
        assert resource.status == "active"

    def test_sqs_name_from_url(self):
        resource = normalize_sqs_queue({"queueUrl": "https://sqs.us-east-1.amazonaws.com/1/jobs"}, DEFAULTS)
        assert resource.name == "jobs"


class TestRegistration:
    """Tests that importing the package registers every AWS type."""

    def test_all_aws_codes_registered(self):
        """Test each AWS catalog code has a normalizer."""
        from cloudscope.catalog import all_codes

        for code in all_codes("AWS"):
            assert f"aws:{code}" in normalizers

    def test_description_from_docstring(self):
        """Test registry metadata takes the docstring's first line."""
        meta = normalizers.get_metadata("ec2", provider="aws")
        assert meta["description"] == "Normalize an EC2 instance."


class TestNormalizeItems:
    """Tests for normalize_items."""

    def test_absent_field_is_empty(self):
        """Test a missing payload field yields no resources."""
        assert normalize_items("ec2", "AWS", None, DEFAULTS) == []

    def test_field_must_be_list(self):
        """Test a non-list payload field raises."""
        with pytest.raises(NormalizationError):
            normalize_items("s3", "AWS", {"bucketName": "b1"}, DEFAULTS)

    def test_unregistered_code(self):
        """Test codes without a normalizer raise."""
        with pytest.raises(NormalizationError):
            normalize_items("bogus", "AWS", [], DEFAULTS)

    def test_order_preserved(self):
        """Test items come back in input order."""
        items = [{"instanceId": "i-2"}, {"instanceId": "i-1"}]
        assert [r.id for r in normalize_items("ec2", "AWS", items, DEFAULTS)] == ["i-2", "i-1"]
