"""Resource containment topology: account -> VPC -> instance.

`build_topology` is a pure function of the resource list. Node ids derive
from resource ids, and positions from the order in which VPCs and
instances appear, so the same input always yields the same graph.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Set

from ..constants import (
    TOPOLOGY_BASE_X,
    TOPOLOGY_CHILD_SPACING,
    TOPOLOGY_COLUMN_WIDTH,
    TOPOLOGY_ROOT_ID,
    TOPOLOGY_ROOT_X,
    TOPOLOGY_ROOT_Y,
    TOPOLOGY_ROW_OFFSET,
    TOPOLOGY_VPC_ROW,
)
from ..core.graph import Graph, GraphNode, Position
from ..core.models import Resource
from .layout import as_resources, edge, unique_node_id

logger = logging.getLogger(__name__)

# Resource types drawn as compute instances
INSTANCE_TYPES = frozenset({"ec2", "ecs", "compute"})

CONTAINS_HINT = "contains"


def _instance_node(resource: Resource, node: str, x: float, y: float) -> GraphNode:
    data: Dict[str, Any] = {"status": resource.status, "region": resource.region}
    for key in ("instanceType", "privateIp", "publicIp"):
        if resource.get(key):
            data[key] = resource.get(key)
    return GraphNode(
        id=node,
        label=resource.name,
        position=Position(x=x, y=y),
        style="instance",
        data=data,
    )


def _distinct(resources: Iterable[Resource]) -> List[Resource]:
    """Drop repeats of the same (type, region, id), keeping first-seen order."""
    seen = set()
    unique: List[Resource] = []
    for resource in resources:
        if resource.key in seen:
            continue
        seen.add(resource.key)
        unique.append(resource)
    return unique


def build_topology(resources: Iterable[Any], account_label: str = "Account") -> Graph:
    """Build the containment graph of VPCs and instances.

    Resources are distinct by ``(type, region, id)``. Instances nest under
    the VPC with the same id in the same region. Ids that sanitize to a
    node id already taken get a numeric suffix, so no resource is dropped.

    Args:
        resources: Normalized resources (objects or flattened dicts)
        account_label: Label of the root node

    Returns:
        Graph with the root first, then VPCs each followed by their
        instances, then instances with no matching VPC
    """
    items = _distinct(as_resources(resources))
    graph = Graph()
    graph.nodes.append(
        GraphNode(
            id=TOPOLOGY_ROOT_ID,
            label=account_label,
            position=Position(x=TOPOLOGY_ROOT_X, y=TOPOLOGY_ROOT_Y),
            style="account",
        )
    )
    used: Set[str] = {TOPOLOGY_ROOT_ID}

    vpcs = [r for r in items if r.type == "vpc"]
    vpc_keys = {(vpc.id, vpc.region) for vpc in vpcs}
    instances = [r for r in items if r.type in INSTANCE_TYPES]

    for index, vpc in enumerate(vpcs):
        vpc_node = unique_node_id("vpc", vpc.id, used)
        vpc_x = TOPOLOGY_BASE_X + index * TOPOLOGY_COLUMN_WIDTH
        graph.nodes.append(
            GraphNode(
                id=vpc_node,
                label=vpc.name,
                position=Position(x=vpc_x, y=TOPOLOGY_VPC_ROW),
                style="vpc",
                data={"cidrBlock": vpc.get("cidrBlock"), "region": vpc.region},
            )
        )
        graph.edges.append(edge(TOPOLOGY_ROOT_ID, vpc_node, hint=CONTAINS_HINT))

        children = [r for r in instances if (r.get("vpcId"), r.region) == (vpc.id, vpc.region)]
        for child_index, instance in enumerate(children):
            child_node = unique_node_id(instance.type, instance.id, used)
            graph.nodes.append(
                _instance_node(
                    instance,
                    child_node,
                    x=vpc_x + child_index * TOPOLOGY_CHILD_SPACING,
                    y=TOPOLOGY_VPC_ROW + TOPOLOGY_ROW_OFFSET,
                )
            )
            graph.edges.append(edge(vpc_node, child_node, hint=CONTAINS_HINT))

    column = len(vpcs)
    for instance in instances:
        if (instance.get("vpcId"), instance.region) in vpc_keys:
            continue
        instance_node = unique_node_id(instance.type, instance.id, used)
        graph.nodes.append(
            _instance_node(
                instance,
                instance_node,
                x=TOPOLOGY_BASE_X + column * TOPOLOGY_COLUMN_WIDTH,
                y=TOPOLOGY_VPC_ROW,
            )
        )
        graph.edges.append(edge(TOPOLOGY_ROOT_ID, instance_node, hint=CONTAINS_HINT))
        column += 1

    logger.debug(f"Built topology with {len(graph.nodes)} nodes and {len(graph.edges)} edges")
    return graph
