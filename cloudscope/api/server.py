"""CloudScope Flask API server.

Exposes the resource type catalog, enumeration runs, resource groups and
graph views over HTTP. Every response body is JSON; errors are ``{error}``.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Type, TypeVar

from flask import Flask, jsonify, request
from flask_cors import CORS
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .. import __version__
from ..backend.client import BackendClient, HttpBackendClient
from ..catalog import aliases, list_types
from ..config import Settings, get_settings
from ..core.errors import ValidationError
from ..core.models import Credential, Provider
from ..enumeration.orchestrator import EnumerationOrchestrator
from ..graphs import build_attack_path, build_escalation_graph, build_topology, escalation_summary
from ..groups import ResourceGroupRegistry
from ..inventory import filter_resources, summarize_by_region
from ..repositories.base import KeyValueStore
from ..repositories.json_store import JsonFileStore
from .errors import ConflictError, NotFoundError, handle_api_errors
from .metrics import init_metrics
from .models import (
    AttackPathRequest,
    EnumerationRequest,
    EscalationRequest,
    GroupCreateRequest,
    GroupUpdateRequest,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def parse_body(model: Type[M]) -> M:
    """Validate the JSON request body against a pydantic model."""
    body = request.get_json(silent=True)
    if body is None:
        body = {}
    try:
        return model.model_validate(body)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", "Invalid request body").replace("Value error, ", "")
        raise ValidationError(message, field=field) from e


def create_app(
    backend: Optional[BackendClient] = None,
    store: Optional[KeyValueStore] = None,
    settings: Optional[Settings] = None,
    orchestrator: Optional[EnumerationOrchestrator] = None,
) -> Flask:
    """Create the Flask application.

    Args:
        backend: Backend client (defaults to HttpBackendClient from settings)
        store: Resource group store (defaults to a JsonFileStore)
        settings: Settings instance (defaults to get_settings())
        orchestrator: Pre-built orchestrator, mainly for tests

    Returns:
        Configured Flask application
    """
    settings = settings or get_settings()
    backend = backend or HttpBackendClient(settings=settings)
    store = store or JsonFileStore(settings.group_store_path)
    orchestrator = orchestrator or EnumerationOrchestrator(backend, settings=settings)
    groups = ResourceGroupRegistry(store)
    credentials: Dict[str, Credential] = {}

    app = Flask(__name__)
    CORS(app, origins=settings.get_cors_origins())
    handle_api_errors(app)
    init_metrics(app, __version__)

    app.extensions["cloudscope"] = {
        "backend": backend,
        "orchestrator": orchestrator,
        "groups": groups,
    }

    def last_state_or_404(credential_id: str):
        state = orchestrator.last_state(credential_id)
        if state is None:
            raise NotFoundError("Enumeration for credential", credential_id)
        return state

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "version": __version__})

    @app.route("/types/<provider>")
    def types(provider: str):
        resolved = Provider.resolve(provider)
        return jsonify({
            "provider": resolved.value if resolved else provider,
            "types": [t.to_dict() for t in list_types(provider)],
            "aliases": {k: list(v) for k, v in aliases(provider).items()},
        })

    @app.route("/enumerations", methods=["POST"])
    def start_enumeration():
        body = parse_body(EnumerationRequest)
        credential = body.credential.to_credential()
        requested = groups.apply_selection(body.group_id) if body.group_id else body.resources
        credentials[str(credential.id)] = credential
        state = orchestrator.run(credential, requested)
        return jsonify(state.to_dict())

    @app.route("/enumerations/<credential_id>")
    def get_enumeration(credential_id: str):
        state = last_state_or_404(credential_id)
        resource_type = request.args.get("type", "all")
        region = request.args.get("region", "all")
        payload = state.to_dict()
        payload["resources"] = [r.to_dict() for r in filter_resources(state.resources, resource_type, region)]
        payload["regions"] = summarize_by_region(state.resources)
        payload["running"] = orchestrator.is_running(credential_id)
        return jsonify(payload)

    @app.route("/enumerations/<credential_id>/cancel", methods=["POST"])
    def cancel_enumeration(credential_id: str):
        return jsonify({"cancelled": orchestrator.cancel(credential_id)})

    @app.route("/groups", methods=["GET"])
    def list_groups():
        return jsonify({"groups": [g.to_dict() for g in groups.list()]})

    @app.route("/groups", methods=["POST"])
    def create_group():
        body = parse_body(GroupCreateRequest)
        group = groups.create(body.name, body.resources)
        return jsonify(group.to_dict()), 201

    @app.route("/groups/<group_id>", methods=["GET"])
    def get_group(group_id: str):
        return jsonify(groups.get(group_id).to_dict())

    @app.route("/groups/<group_id>", methods=["PATCH"])
    def update_group(group_id: str):
        body = parse_body(GroupUpdateRequest)
        group = groups.update(group_id, name=body.name, resources=body.resources)
        return jsonify(group.to_dict())

    @app.route("/groups/<group_id>", methods=["DELETE"])
    def delete_group(group_id: str):
        groups.delete(group_id)
        return jsonify({"deleted": group_id})

    @app.route("/graphs/topology/<credential_id>")
    def topology(credential_id: str):
        state = last_state_or_404(credential_id)
        credential = credentials.get(credential_id)
        label = credential.display_name if credential else "Account"
        return jsonify(build_topology(state.resources, account_label=label).to_dict())

    @app.route("/graphs/escalation", methods=["POST"])
    def escalation():
        body = parse_body(EscalationRequest)
        profile = backend.escalate(body.credential_id)
        summary = escalation_summary(profile)
        if profile.is_terminal and not body.force:
            raise ConflictError(
                f"{profile.user_type} already has full control; escalation is not meaningful",
                details={"terminal": True, "profile": summary["profile"]},
            )
        summary["graph"] = build_escalation_graph(profile).to_dict()
        return jsonify(summary)

    @app.route("/graphs/attack-path", methods=["POST"])
    def attack_path():
        credential = parse_body(AttackPathRequest).credential.to_credential()
        profile = backend.escalate(credential.id)
        state = orchestrator.last_state(credential.id)
        resources = state.resources if state else ()
        return jsonify(build_attack_path(credential, profile, resources).to_dict())

    return app


