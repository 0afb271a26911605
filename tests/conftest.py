"""Pytest configuration and shared fixtures for CloudScope tests.

This module provides common fixtures used across multiple test modules,
including a fake backend, in-memory group store, fast settings and a
Flask test client.
"""

from __future__ import annotations

import os
import threading
from typing import Any, Dict, List, Optional

import pytest

from cloudscope.config import Settings, get_settings
from cloudscope.core.errors import BackendError
from cloudscope.core.models import Credential, PermissionProfile
from cloudscope.repositories.memory import InMemoryStore


# ============================================================================
# Custom Pytest Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers", "slow: marks tests that take a long time to run"
    )


# ============================================================================
# Backend Fakes
# ============================================================================

class FakeBackend:
    """In-process stand-in for the cloud backend.

    Attributes:
        response: Body returned by enumerate()
        error: Exception raised by enumerate() instead of returning
        profile: Profile returned by escalate()
        stored: Body returned by stored_resources()
        gate: Optional event enumerate() waits on before returning
        calls: Recorded (method, args) tuples
    """

    def __init__(
        self,
        response: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
        profile: Optional[PermissionProfile] = None,
        stored: Optional[Dict[str, Any]] = None,
    ):
        self.response = response if response is not None else {"result": {}}
        self.error = error
        self.profile = profile or PermissionProfile(user_type="IAM User", permissions=[])
        self.stored = stored or {}
        self.gate: Optional[threading.Event] = None
        self.entered = threading.Event()
        self.calls: List[tuple] = []

    def enumerate(self, credential_id: Any, resource_type: str) -> Dict[str, Any]:
        self.calls.append(("enumerate", credential_id, resource_type))
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(5)
        if self.error is not None:
            raise self.error
        return self.response

    def escalate(self, credential_id: Any) -> PermissionProfile:
        self.calls.append(("escalate", credential_id))
        if self.error is not None:
            raise self.error
        return self.profile

    def stored_resources(self, credential_id: Any) -> Dict[str, Any]:
        self.calls.append(("stored_resources", credential_id))
        return self.stored


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Backend returning one EC2 instance and one S3 bucket."""
    return FakeBackend(
        response={
            "result": {
                "instances": [{"instanceId": "i-1", "state": "running"}],
                "buckets": [{"bucketName": "b1"}],
            }
        }
    )


@pytest.fixture
def make_backend():
    """Factory for backends with a custom enumerate response."""
    return FakeBackend


@pytest.fixture
def failing_backend() -> FakeBackend:
    """Backend whose calls are rejected."""
    return FakeBackend(error=BackendError("Credential not found", status_code=404))


# ============================================================================
# Domain Fixtures
# ============================================================================

@pytest.fixture
def aws_credential() -> Credential:
    """AWS credential with a default region."""
    return Credential(id=1, provider="AWS", region="us-east-1", name="prod")


@pytest.fixture
def admin_profile() -> PermissionProfile:
    return PermissionProfile(
        user_type="IAM User",
        user="alice",
        permissions=["iam:PassRole", "ec2:RunInstances", "s3:GetObject"],
        risk_level="High",
        potential_escalation=["iam:PassRole"],
    )


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


# ============================================================================
# Settings / App Fixtures
# ============================================================================

@pytest.fixture
def fast_settings(tmp_path) -> Settings:
    """Settings with fast progress ticks and a temporary group store."""
    return Settings(
        progress_tick_interval=0.01,
        group_store_path=tmp_path / "groups.json",
        backend_url="http://backend.test/api",
    )


@pytest.fixture
def app(fake_backend, memory_store, fast_settings):
    """Flask app wired to the fake backend and in-memory store."""
    from cloudscope.api.server import create_app

    application = create_app(backend=fake_backend, store=memory_store, settings=fast_settings)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture
def clean_environment():
    """Fixture that cleans CloudScope environment variables.

    Removes CLOUDSCOPE_* env vars and the cached settings before the test
    and restores both after.
    """
    saved = {k: v for k, v in os.environ.items() if k.startswith("CLOUDSCOPE_")}
    for key in saved:
        del os.environ[key]
    get_settings.cache_clear()

    yield

    for key in [k for k in os.environ if k.startswith("CLOUDSCOPE_")]:
        del os.environ[key]
    os.environ.update(saved)
    get_settings.cache_clear()
