"""CloudScope command line interface.

Usage:
    cloudscope types AWS
    cloudscope enumerate --credential-id 3 --provider AWS --region us-east-1 --types ec2 s3
    cloudscope groups create --name compute --types ec2 eks
    cloudscope graph topology --credential-id 3 --provider AWS --region us-east-1
    cloudscope graph escalation --credential-id 3
    cloudscope serve --port 9850

Results are printed to stdout as JSON; errors go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from . import __version__
from .config import Settings, configure_logging, get_settings
from .constants import DEFAULT_REGION
from .core.errors import CloudScopeError
from .core.models import Credential

logger = logging.getLogger(__name__)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _credential(args: argparse.Namespace) -> Credential:
    return Credential(
        id=args.credential_id,
        provider=args.provider,
        region=args.region or "",
        name=getattr(args, "name", None) or "",
    )


def _backend(settings: Settings):
    from .backend.client import HttpBackendClient

    return HttpBackendClient(settings=settings)


def _groups(settings: Settings):
    from .groups import ResourceGroupRegistry
    from .repositories.json_store import JsonFileStore

    return ResourceGroupRegistry(JsonFileStore(settings.group_store_path))


def cmd_types(args: argparse.Namespace, settings: Settings) -> int:
    from .catalog import aliases, list_types

    _emit({
        "provider": args.provider,
        "types": [t.to_dict() for t in list_types(args.provider)],
        "aliases": {k: list(v) for k, v in aliases(args.provider).items()},
    })
    return 0


def cmd_enumerate(args: argparse.Namespace, settings: Settings) -> int:
    from .enumeration.orchestrator import EnumerationOrchestrator

    requested: List[str] = args.types or ["all"]
    if args.group:
        requested = _groups(settings).apply_selection(args.group)

    orchestrator = EnumerationOrchestrator(_backend(settings), settings=settings)
    if args.progress:
        def report(state, event) -> None:
            if event is not None:
                print(f"[{event.percent:3d}%] {event.code}: {event.status}", file=sys.stderr)

        orchestrator.store_for(args.credential_id).subscribe(report)

    state = orchestrator.run(_credential(args), requested)
    _emit(state.to_dict())
    return 0


def cmd_groups(args: argparse.Namespace, settings: Settings) -> int:
    registry = _groups(settings)
    if args.groups_command == "list":
        _emit([g.to_dict() for g in registry.list()])
    elif args.groups_command == "create":
        _emit(registry.create(args.name, args.types).to_dict())
    elif args.groups_command == "delete":
        registry.delete(args.group_id)
        _emit({"deleted": args.group_id})
    else:
        print("error: groups requires a subcommand (list, create, delete)", file=sys.stderr)
        return 1
    return 0


def cmd_graph(args: argparse.Namespace, settings: Settings) -> int:
    from .graphs import build_attack_path, build_escalation_graph, build_topology, escalation_summary
    from .normalizers import NormalizerDefaults, normalize_payload

    backend = _backend(settings)
    if args.graph_command == "escalation":
        profile = backend.escalate(args.credential_id)
        if profile.is_terminal and not args.force:
            _emit({**escalation_summary(profile), "graph": None})
            return 0
        _emit({**escalation_summary(profile), "graph": build_escalation_graph(profile).to_dict()})
        return 0

    if args.graph_command not in ("topology", "attack-path"):
        print("error: graph requires a subcommand (topology, escalation, attack-path)", file=sys.stderr)
        return 1

    credential = _credential(args)
    stored = backend.stored_resources(credential.id)
    defaults = NormalizerDefaults(region=credential.region or DEFAULT_REGION, provider=credential.provider)
    resources = normalize_payload(stored, credential.provider, defaults)

    if args.graph_command == "topology":
        _emit(build_topology(resources, account_label=credential.display_name).to_dict())
    else:
        profile = backend.escalate(credential.id)
        _emit(build_attack_path(credential, profile, resources).to_dict())
    return 0


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    from .api.server import create_app

    app = create_app(settings=settings)
    logger.info(f"Starting CloudScope API on {args.host}:{args.port}")
    app.run(host=args.host, port=args.port, threaded=True)
    return 0


def _add_credential_args(parser: argparse.ArgumentParser, with_provider: bool = True) -> None:
    parser.add_argument("--credential-id", type=int, required=True, help="Backend credential id")
    if with_provider:
        parser.add_argument("--provider", required=True, help="Provider (AWS, Aliyun, GCP, Azure)")
        parser.add_argument("--region", help="Default region for items without one")
        parser.add_argument("--name", help="Credential display name")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="cloudscope", description="Cloud resource enumeration and graph views")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Override CLOUDSCOPE_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    types_parser = subparsers.add_parser("types", help="List resource types for a provider")
    types_parser.add_argument("provider")

    enum_parser = subparsers.add_parser("enumerate", help="Enumerate resources for a credential")
    _add_credential_args(enum_parser)
    selection = enum_parser.add_mutually_exclusive_group()
    selection.add_argument("--types", nargs="+", help="Resource type codes or aliases (default: all)")
    selection.add_argument("--group", help="Use the types of a saved resource group")
    enum_parser.add_argument("--progress", action="store_true", help="Print progress events to stderr")

    groups_parser = subparsers.add_parser("groups", help="Manage resource groups")
    groups_sub = groups_parser.add_subparsers(dest="groups_command")
    groups_sub.add_parser("list", help="List saved groups")
    create_parser = groups_sub.add_parser("create", help="Create a group")
    create_parser.add_argument("--name", required=True)
    create_parser.add_argument("--types", nargs="+", required=True)
    delete_parser = groups_sub.add_parser("delete", help="Delete a group")
    delete_parser.add_argument("group_id")

    graph_parser = subparsers.add_parser("graph", help="Build graph views")
    graph_sub = graph_parser.add_subparsers(dest="graph_command")
    _add_credential_args(graph_sub.add_parser("topology", help="Account/VPC/instance topology"))
    escalation_parser = graph_sub.add_parser("escalation", help="Privilege escalation techniques")
    _add_credential_args(escalation_parser, with_provider=False)
    escalation_parser.add_argument("--force", action="store_true", help="Graph terminal profiles too")
    _add_credential_args(graph_sub.add_parser("attack-path", help="Credential to takeover overview"))

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=settings.api_host)
    serve_parser.add_argument("--port", type=int, default=settings.api_port)

    return parser.parse_args(argv)


COMMANDS = {
    "types": cmd_types,
    "enumerate": cmd_enumerate,
    "groups": cmd_groups,
    "graph": cmd_graph,
    "serve": cmd_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.command is None:
        print("usage: cloudscope {types,enumerate,groups,graph,serve} ...", file=sys.stderr)
        return 1

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)
    try:
        return COMMANDS[args.command](args, settings)
    except CloudScopeError as e:
        logger.debug(f"{type(e).__name__}: {e.message}")
        print(f"error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
