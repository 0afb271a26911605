"""Privilege-escalation graphs.

- `build_escalation_graph`: star layout from the permission profile to every
  catalog technique, arranged in a fixed grid.
- `build_attack_path`: credential -> permissions -> escalation -> resource
  types -> takeover overview.
- `match_techniques`: techniques whose required actions are all granted.

All three are pure and do no I/O. Whether a terminal (root/administrator)
profile should be graphed at all is up to the caller.
"""

from __future__ import annotations

import logging
from fnmatch import fnmatchcase
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..constants import (
    ATTACK_PATH_CENTER_X,
    ATTACK_PATH_RESOURCE_SPACING,
    ATTACK_PATH_RESOURCE_X,
    ATTACK_PATH_ROW_HEIGHT,
    ESCALATION_COLUMN_WIDTH,
    ESCALATION_COLUMNS,
    ESCALATION_ROOT_ID,
    ESCALATION_ROW_HEIGHT,
    SUGGESTED_PATH_HINT,
)
from ..core.graph import Graph, GraphNode, Position
from ..core.models import Credential, EscalationTechnique, PermissionProfile
from .layout import as_resources, edge, node_id
from .techniques import TECHNIQUES

logger = logging.getLogger(__name__)

# Attack path: (node id, label, resource types counted)
ATTACK_PATH_RESOURCES = (
    ("ec2", "EC2 Instances", ("ec2",)),
    ("s3", "S3 Buckets", ("s3",)),
    ("iam", "IAM Resources", ("iamUsers", "iamRoles")),
)


def build_escalation_graph(
    profile: PermissionProfile,
    catalog: Sequence[EscalationTechnique] = TECHNIQUES,
) -> Graph:
    """Connect a permission profile to every technique in the catalog.

    The root sits above the middle column; technique ``i`` is placed at
    column ``i % 3`` of row ``1 + i // 3``. Every edge goes from the root
    to a distinct technique node and carries the suggested-path hint.

    Args:
        profile: Permission profile of the credential
        catalog: Techniques to lay out

    Returns:
        Graph with ``len(catalog) + 1`` nodes and ``len(catalog)`` edges
    """
    graph = Graph()
    graph.nodes.append(
        GraphNode(
            id=ESCALATION_ROOT_ID,
            label=profile.user_type,
            position=Position(x=ESCALATION_COLUMN_WIDTH * (ESCALATION_COLUMNS // 2), y=0),
            style="root",
            data={
                "user": profile.user,
                "riskLevel": profile.risk_level,
                "permissions": len(profile.permissions),
            },
        )
    )

    used = {ESCALATION_ROOT_ID}
    for index, technique in enumerate(catalog):
        technique_node = node_id("technique", technique.id)
        if technique_node in used:
            technique_node = f"{technique_node}_{index}"
        used.add(technique_node)

        column = index % ESCALATION_COLUMNS
        row = 1 + index // ESCALATION_COLUMNS
        graph.nodes.append(
            GraphNode(
                id=technique_node,
                label=technique.name,
                position=Position(x=column * ESCALATION_COLUMN_WIDTH, y=row * ESCALATION_ROW_HEIGHT),
                style=f"risk-{technique.risk.lower()}",
                data={
                    "description": technique.description,
                    "type": technique.type,
                    "risk": technique.risk,
                },
            )
        )
        graph.edges.append(edge(ESCALATION_ROOT_ID, technique_node, hint=SUGGESTED_PATH_HINT))

    return graph


def _granted(action: str, permissions: Iterable[str]) -> bool:
    action = action.lower()
    for permission in permissions:
        if fnmatchcase(action, permission.strip().lower()):
            return True
    return False


def match_techniques(
    profile: PermissionProfile,
    catalog: Sequence[EscalationTechnique] = TECHNIQUES,
) -> List[EscalationTechnique]:
    """Return the catalog entries whose required actions are all granted.

    Granted permissions may use ``*`` wildcards (``*``, ``iam:*``,
    ``iam:Put*``). Techniques without required actions never match.
    """
    permissions = [p for p in profile.permissions if p]
    return [
        technique
        for technique in catalog
        if technique.permissions and all(_granted(a, permissions) for a in technique.permissions)
    ]


def build_attack_path(
    credential: Credential,
    profile: PermissionProfile,
    resources: Iterable[Any],
) -> Graph:
    """Summarize how a credential could lead to platform takeover.

    Nodes, top to bottom: the credential, a permission analysis node (only
    when the profile has permissions), an escalation node (only when it
    lists potential escalations), one node per resource category present,
    and a final takeover node.
    """
    counts: Dict[str, int] = {}
    for resource in as_resources(resources):
        counts[resource.type] = counts.get(resource.type, 0) + 1

    graph = Graph()
    start = "start"
    graph.nodes.append(
        GraphNode(
            id=start,
            label=f"{credential.name or credential.id} ({credential.provider})",
            position=Position(x=ATTACK_PATH_CENTER_X, y=ATTACK_PATH_ROW_HEIGHT // 2),
            style="credential",
            data={"description": "AKSK credential"},
        )
    )
    tail = start

    if profile.permissions:
        graph.nodes.append(
            GraphNode(
                id="permissions",
                label="Permission Analysis",
                position=Position(x=ATTACK_PATH_CENTER_X, y=ATTACK_PATH_ROW_HEIGHT * 1.5),
                style="permissions",
                data={"description": f"Risk level: {profile.risk_level}"},
            )
        )
        graph.edges.append(edge(start, "permissions", label="analyze permissions"))
        tail = "permissions"

        if profile.potential_escalation:
            graph.nodes.append(
                GraphNode(
                    id="escalation",
                    label="Privilege Escalation",
                    position=Position(x=ATTACK_PATH_CENTER_X, y=ATTACK_PATH_ROW_HEIGHT * 2.5),
                    style="escalation",
                    data={"description": "Potential escalation paths", "paths": list(profile.potential_escalation)},
                )
            )
            graph.edges.append(edge("permissions", "escalation", label="escalate"))
            tail = "escalation"

    present: List[str] = []
    for index, (category, label, types) in enumerate(ATTACK_PATH_RESOURCES):
        count = sum(counts.get(t, 0) for t in types)
        if not count:
            continue
        graph.nodes.append(
            GraphNode(
                id=category,
                label=label,
                position=Position(
                    x=ATTACK_PATH_RESOURCE_X + index * ATTACK_PATH_RESOURCE_SPACING,
                    y=ATTACK_PATH_ROW_HEIGHT * 3.5,
                ),
                style="resource",
                data={"description": f"Count: {count}", "count": count},
            )
        )
        graph.edges.append(edge(tail, category, label="access resources"))
        present.append(category)

    end = "end"
    graph.nodes.append(
        GraphNode(
            id=end,
            label="Platform Takeover",
            position=Position(x=ATTACK_PATH_CENTER_X, y=ATTACK_PATH_ROW_HEIGHT * 4.5),
            style="takeover",
            data={"description": "Obtain administrator access"},
        )
    )
    for category in present:
        graph.edges.append(edge(category, end, label="exploit resources"))

    logger.debug(f"Built attack path with {len(graph.nodes)} nodes")
    return graph


def escalation_summary(profile: PermissionProfile, catalog: Optional[Sequence[EscalationTechnique]] = None) -> Dict[str, Any]:
    """Profile plus the techniques it can perform, for API and CLI output."""
    matched = match_techniques(profile, catalog if catalog is not None else TECHNIQUES)
    return {
        "profile": profile.to_dict(),
        "terminal": profile.is_terminal,
        "matchedTechniques": [t.to_dict() for t in matched],
    }
