"""Resource type catalog.

Maps each provider to its ordered list of resource-type codes, the label
shown for each code and the backend payload field that carries its items.
Selections are expanded here before an enumeration run:

    >>> expand(["iam", "ec2", "iam"], "AWS")
    ('iamRoles', 'iamUsers', 'ec2')
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from .constants import ALL_TYPES
from .core.models import Provider, ResourceTypeDescriptor


class ResourceType(str, Enum):
    """Every resource-type code known to any provider."""

    # AWS
    EC2 = "ec2"
    S3 = "s3"
    IAM_ROLES = "iamRoles"
    IAM_USERS = "iamUsers"
    VPC = "vpc"
    ROUTE = "route"
    ELB = "elb"
    EKS = "eks"
    KMS = "kms"
    RDS = "rds"
    LAMBDA = "lambda"
    API_GATEWAY = "apigateway"
    CLOUDTRAIL = "cloudtrail"
    CLOUDWATCH = "cloudwatch"
    DYNAMODB = "dynamodb"
    SECRETS = "secrets"
    SNS = "sns"
    SQS = "sqs"
    # Aliyun
    ECS = "ecs"
    OSS = "oss"
    RAM_ROLES = "ramRoles"
    RAM_USERS = "ramUsers"
    # GCP / Azure
    COMPUTE = "compute"
    STORAGE = "storage"
    ROLE_ASSIGNMENTS = "roleAssignments"


class CatalogEntry(NamedTuple):
    type: ResourceType
    label: str
    payload_field: str


_CATALOG: Dict[Provider, Tuple[CatalogEntry, ...]] = {
    Provider.AWS: (
        CatalogEntry(ResourceType.EC2, "EC2 Instances", "instances"),
        CatalogEntry(ResourceType.S3, "S3 Buckets", "buckets"),
        CatalogEntry(ResourceType.IAM_ROLES, "IAM Roles", "roles"),
        CatalogEntry(ResourceType.IAM_USERS, "IAM Users", "users"),
        CatalogEntry(ResourceType.VPC, "VPCs", "vpcs"),
        CatalogEntry(ResourceType.ROUTE, "Route Tables", "routeTables"),
        CatalogEntry(ResourceType.ELB, "Load Balancers", "elbs"),
        CatalogEntry(ResourceType.EKS, "EKS Clusters", "eksClusters"),
        CatalogEntry(ResourceType.KMS, "KMS Keys", "kmsKeys"),
        CatalogEntry(ResourceType.RDS, "RDS Instances", "rdsInstances"),
        CatalogEntry(ResourceType.LAMBDA, "Lambda Functions", "lambdaFunctions"),
        CatalogEntry(ResourceType.API_GATEWAY, "API Gateways", "apiGateways"),
        CatalogEntry(ResourceType.CLOUDTRAIL, "CloudTrail Trails", "cloudTrails"),
        CatalogEntry(ResourceType.CLOUDWATCH, "CloudWatch Log Groups", "cloudWatchLogGroups"),
        CatalogEntry(ResourceType.DYNAMODB, "DynamoDB Tables", "dynamoDBTables"),
        CatalogEntry(ResourceType.SECRETS, "Secrets Manager Secrets", "secrets"),
        CatalogEntry(ResourceType.SNS, "SNS Topics", "snsTopics"),
        CatalogEntry(ResourceType.SQS, "SQS Queues", "sqsQueues"),
    ),
    Provider.ALIYUN: (
        CatalogEntry(ResourceType.ECS, "ECS Instances", "instances"),
        CatalogEntry(ResourceType.OSS, "OSS Buckets", "buckets"),
        CatalogEntry(ResourceType.RAM_ROLES, "RAM Roles", "roles"),
        CatalogEntry(ResourceType.RAM_USERS, "RAM Users", "users"),
    ),
    Provider.GCP: (
        CatalogEntry(ResourceType.COMPUTE, "Compute Instances", "instances"),
        CatalogEntry(ResourceType.STORAGE, "Storage Buckets", "buckets"),
        CatalogEntry(ResourceType.IAM_ROLES, "IAM Roles", "roles"),
        CatalogEntry(ResourceType.IAM_USERS, "IAM Users", "users"),
    ),
    Provider.AZURE: (
        CatalogEntry(ResourceType.COMPUTE, "Virtual Machines", "virtualMachines"),
        CatalogEntry(ResourceType.STORAGE, "Storage Accounts", "storageAccounts"),
        CatalogEntry(ResourceType.ROLE_ASSIGNMENTS, "Role Assignments", "roleAssignments"),
    ),
}

_ALIASES: Dict[Provider, Dict[str, Tuple[ResourceType, ...]]] = {
    Provider.AWS: {"iam": (ResourceType.IAM_ROLES, ResourceType.IAM_USERS)},
    Provider.ALIYUN: {"ram": (ResourceType.RAM_ROLES, ResourceType.RAM_USERS)},
    Provider.GCP: {"iam": (ResourceType.IAM_ROLES, ResourceType.IAM_USERS)},
    Provider.AZURE: {"iam": (ResourceType.ROLE_ASSIGNMENTS,)},
}

_ALL_DESCRIPTOR = ResourceTypeDescriptor(code=ALL_TYPES, label="All Resources")

Selection = Union[str, Iterable[Any]]


def entries(provider: Any) -> Tuple[CatalogEntry, ...]:
    """Ordered catalog entries for a provider (empty for unknown providers)."""
    resolved = Provider.resolve(provider)
    if resolved is None:
        return ()
    return _CATALOG[resolved]


def all_codes(provider: Any) -> Tuple[str, ...]:
    """Every concrete type code for a provider, in catalog order."""
    return tuple(entry.type.value for entry in entries(provider))


def list_types(provider: Any) -> List[ResourceTypeDescriptor]:
    """List the selectable type descriptors for a provider.

    The first descriptor is always ``all``; unknown providers get only that.
    """
    descriptors = [_ALL_DESCRIPTOR]
    descriptors.extend(ResourceTypeDescriptor(code=e.type.value, label=e.label) for e in entries(provider))
    return descriptors


def aliases(provider: Any) -> Dict[str, Tuple[str, ...]]:
    resolved = Provider.resolve(provider)
    if resolved is None:
        return {}
    return {alias: tuple(t.value for t in types) for alias, types in _ALIASES[resolved].items()}


def _split(selection: Selection) -> List[str]:
    if isinstance(selection, str):
        raw = selection.split(",")
    else:
        raw = [s.value if isinstance(s, Enum) else str(s) for s in selection]
    return [code.strip() for code in raw if code and code.strip()]


def expand(selection: Selection, provider: Any) -> Tuple[str, ...]:
    """Expand ``all`` and provider aliases, dropping duplicates.

    Codes that are not in the provider's catalog are kept so that the
    orchestrator can report them per type. The result is stable under
    repeated expansion.

    Args:
        selection: Requested codes, or a comma-joined string of codes
        provider: Provider enum or credential provider string

    Returns:
        Ordered tuple of unique type codes
    """
    provider_aliases = aliases(provider)
    expanded: List[str] = []
    seen = set()
    for code in _split(selection):
        if code == ALL_TYPES:
            candidates: Iterable[str] = all_codes(provider)
        elif code in provider_aliases:
            candidates = provider_aliases[code]
        else:
            candidates = (code,)
        for candidate in candidates:
            if candidate not in seen:
                seen.add(candidate)
                expanded.append(candidate)
    return tuple(expanded)


def is_full_selection(selection: Iterable[str], provider: Any) -> bool:
    """True when the selection covers every type the provider offers."""
    codes = all_codes(provider)
    return bool(codes) and set(selection) == set(codes)


def payload_field(code: str, provider: Any) -> Optional[str]:
    """Backend response field holding the raw items for a type code."""
    for entry in entries(provider):
        if entry.type.value == code:
            return entry.payload_field
    return None


def label_for(code: str, provider: Any) -> str:
    for entry in entries(provider):
        if entry.type.value == code:
            return entry.label
    return code
