"""
tests/conftest.py - pytest 공통 fixture

AWS 테스트 환경, 호출을 기록하는 업로더, 정적 엔티티 레지스트리를 제공합니다.

Usage:
    def test_something(uploader, fake_registry, make_config):
        collector = InventoryCollector(make_config(), uploader, registry=fake_registry)
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

# put the project root on sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.aws.accounts import AccountInfo  # noqa: E402
from core.config import CollectorConfig  # noqa: E402
from inventory.registry import EntityHandler, EntityRegistry  # noqa: E402
from inventory.scope import Scope  # noqa: E402

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """AWS test credentials, no AIC_* leakage from the host"""
    for name in list(os.environ):
        if name.startswith("AIC_"):
            monkeypatch.delenv(name, raising=False)

    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")

    yield


# =============================================================================
# Uploader
# =============================================================================


@dataclass
class RecordingUploader:
    """Uploader recording every call in order

    Attributes:
        calls: ("save" | "sweep", kwargs) tuples
        parts_per_save: parts reported per save (simulates adapter splitting)
        fail_on_save: 1-based save number that raises
    """

    calls: List[tuple] = field(default_factory=list)
    parts_per_save: int = 1
    fail_on_save: Optional[int] = None
    error: Exception = field(default_factory=lambda: ConnectionError("ingress down"))

    @property
    def saves(self) -> List[Dict[str, Any]]:
        return [kwargs for kind, kwargs in self.calls if kind == "save"]

    @property
    def sweeps(self) -> List[Dict[str, Any]]:
        return [kwargs for kind, kwargs in self.calls if kind == "sweep"]

    def save_inventory(self, collections, inventory_name, schema_name, refresh_state_uuid, refresh_state_part_uuid):
        if self.fail_on_save is not None and len(self.saves) + 1 == self.fail_on_save:
            raise self.error
        self.calls.append(
            (
                "save",
                {
                    "collections": {c.name: len(c) for c in collections},
                    "inventory_name": inventory_name,
                    "schema_name": schema_name,
                    "refresh_state_uuid": refresh_state_uuid,
                    "refresh_state_part_uuid": refresh_state_part_uuid,
                },
            )
        )
        return self.parts_per_save

    def sweep_inventory(self, inventory_name, schema_name, refresh_state_uuid, total_parts, sweep_scope):
        self.calls.append(
            (
                "sweep",
                {
                    "inventory_name": inventory_name,
                    "schema_name": schema_name,
                    "refresh_state_uuid": refresh_state_uuid,
                    "total_parts": total_parts,
                    "sweep_scope": list(sweep_scope),
                },
            )
        )


@pytest.fixture
def uploader():
    """Recording uploader"""
    return RecordingUploader()


# =============================================================================
# Registry
# =============================================================================


class FakeSource:
    """Records per (entity type, account, region); raises when the value is an exception"""

    def __init__(self, records: Optional[Dict[tuple, Any]] = None):
        self.records = records or {}
        self.calls: List[tuple] = []

    def set(self, entity_type: str, records, account_id: str = "111111111111", region: str = "us-east-1"):
        self.records[(entity_type, account_id, region)] = records

    def collector(self, entity_type: str):
        def collect(ctx, scope: Scope):
            self.calls.append((entity_type, scope.account_id, scope.region))
            records = self.records.get((entity_type, scope.account_id, scope.region), [])
            if isinstance(records, Exception):
                raise records
            return iter(records)

        return collect


def fake_parser(collection: str):
    def parse(batcher, record, scope):
        batcher.append(collection, {"source_ref": record, "region": scope.region})

    return parse


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def fake_registry(fake_source):
    """vms (related: network_adapters, floating_ips), volumes, networks"""
    registry = EntityRegistry()
    registry.register(
        EntityHandler(
            "vms",
            fake_source.collector("vms"),
            fake_parser("vms"),
            "vms",
            related=("network_adapters", "floating_ips"),
        )
    )
    for name in ("network_adapters", "floating_ips", "volumes", "networks"):
        registry.register(EntityHandler(name, fake_source.collector(name), fake_parser(name), name))
    return registry


# =============================================================================
# Accounts / config / session factory
# =============================================================================

MASTER = AccountInfo(account_id="111111111111", name="master", master=True)
MEMBER = AccountInfo(account_id="222222222222", name="member")
OTHER = AccountInfo(account_id="333333333333", name="other")


@pytest.fixture
def accounts():
    return [MASTER, MEMBER, OTHER]


@pytest.fixture
def make_config():
    """CollectorConfig factory with test defaults"""

    def _make(**overrides) -> CollectorConfig:
        values = {
            "source": "src-1",
            "entity_types": ("vms",),
            "default_limit": 1000,
            "poll_time": 0,
            "standalone_mode": False,
        }
        values.update(overrides)
        return CollectorConfig(**values)

    return _make


@pytest.fixture
def mock_session_factory():
    """SessionFactory double whose clients are MagicMocks"""
    factory = MagicMock()
    factory.client.return_value = MagicMock()
    return factory
