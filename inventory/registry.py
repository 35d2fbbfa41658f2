"""
inventory/registry.py - 엔티티 타입 레지스트리

엔티티 타입별 레코드 스트림(collect), 파서, 같은 refresh run에서 함께
수집되는 연관 타입을 매핑합니다.

Example:
    registry = default_registry()
    handler = registry.get("vms")
    for record in handler.collect(ctx, scope):
        handler.parse(batcher, record, scope)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.exceptions import ConfigError

from .batcher import EntityBatcher
from .parsers import cloudformation as cloudformation_parsers
from .parsers import ec2 as ec2_parsers
from .parsers import organizations as organizations_parsers
from .parsers import pricing as pricing_parsers
from .parsers import service_catalog as service_catalog_parsers
from .scope import Scope
from .sources import cloudformation as cloudformation_sources
from .sources import ec2 as ec2_sources
from .sources import organizations as organizations_sources
from .sources import pricing as pricing_sources
from .sources import service_catalog as service_catalog_sources
from .sources.base import SourceContext

CollectFn = Callable[[SourceContext, Scope], Iterable[Any]]
ParseFn = Callable[[EntityBatcher, Any, Scope], None]


class EntityType(str, Enum):
    """수집 가능한 엔티티 타입"""

    SOURCE_REGIONS = "source_regions"
    SUBSCRIPTIONS = "subscriptions"
    FLAVORS = "flavors"
    VOLUME_TYPES = "volume_types"
    ORCHESTRATION_STACKS = "orchestration_stacks"
    VMS = "vms"
    NETWORK_ADAPTERS = "network_adapters"
    FLOATING_IPS = "floating_ips"
    VOLUMES = "volumes"
    NETWORKS = "networks"
    SUBNETS = "subnets"
    SECURITY_GROUPS = "security_groups"
    SERVICE_OFFERINGS = "service_offerings"
    SERVICE_PLANS = "service_plans"
    SERVICE_INSTANCES = "service_instances"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EntityHandler:
    """엔티티 타입 하나의 레코드 스트림과 파서

    Attributes:
        entity_type: type name
        collect: (ctx, scope) -> lazy iterable of raw records
        parse: (batcher, record, scope) -> None
        collection: primary collection the parser writes
        related: types collected in the same run right after this one
    """

    entity_type: str
    collect: CollectFn
    parse: ParseFn
    collection: str
    related: tuple[str, ...] = ()


class EntityRegistry:
    """타입 이름별 엔티티 핸들러"""

    def __init__(self) -> None:
        self._handlers: dict[str, EntityHandler] = {}

    def register(self, handler: EntityHandler) -> None:
        """Add a handler

        Raises:
            ConfigError: the type already has a handler
        """
        name = str(handler.entity_type)
        if name in self._handlers:
            raise ConfigError("entity_types", f"entity type '{name}' is already registered")
        self._handlers[name] = handler

    def get(self, entity_type: str) -> EntityHandler:
        try:
            return self._handlers[str(entity_type)]
        except KeyError:
            raise ConfigError("entity_types", f"unknown entity type '{entity_type}'") from None

    def __contains__(self, entity_type: object) -> bool:
        return str(entity_type) in self._handlers

    def types(self) -> list[str]:
        return list(self._handlers)

    def related(self, entity_type: str) -> tuple[str, ...]:
        return self.get(entity_type).related

    def seed_collections(self, entity_type: str) -> list[str]:
        """Primary collections of a type and of its related types"""
        handler = self.get(entity_type)
        return [handler.collection] + [self.get(t).collection for t in handler.related]

    def validate(self, entity_types: Sequence[str]) -> None:
        """Check that every type (and every related type) is registered

        Raises:
            ConfigError: unknown type
        """
        unknown = [t for t in entity_types if t not in self]
        if unknown:
            raise ConfigError(
                "entity_types",
                f"unknown entity types {unknown}, known: {sorted(self._handlers)}",
            )
        for entity_type in entity_types:
            missing = [t for t in self.related(entity_type) if t not in self]
            if missing:
                raise ConfigError(
                    "entity_types",
                    f"related types {missing} of '{entity_type}' are not registered",
                )


def default_registry() -> EntityRegistry:
    registry = EntityRegistry()
    for handler in (
        EntityHandler(
            EntityType.SOURCE_REGIONS, ec2_sources.source_regions, ec2_parsers.parse_source_regions, "source_regions"
        ),
        EntityHandler(
            EntityType.SUBSCRIPTIONS,
            organizations_sources.subscriptions,
            organizations_parsers.parse_subscriptions,
            "subscriptions",
        ),
        EntityHandler(EntityType.FLAVORS, ec2_sources.flavors, ec2_parsers.parse_flavors, "flavors"),
        EntityHandler(
            EntityType.VOLUME_TYPES, pricing_sources.volume_types, pricing_parsers.parse_volume_types, "volume_types"
        ),
        EntityHandler(
            EntityType.ORCHESTRATION_STACKS,
            cloudformation_sources.orchestration_stacks,
            cloudformation_parsers.parse_orchestration_stacks,
            "orchestration_stacks",
        ),
        EntityHandler(
            EntityType.VMS,
            ec2_sources.vms,
            ec2_parsers.parse_vms,
            "vms",
            related=(EntityType.NETWORK_ADAPTERS.value, EntityType.FLOATING_IPS.value),
        ),
        EntityHandler(
            EntityType.NETWORK_ADAPTERS,
            ec2_sources.network_adapters,
            ec2_parsers.parse_network_adapters,
            "network_adapters",
        ),
        EntityHandler(
            EntityType.FLOATING_IPS, ec2_sources.floating_ips, ec2_parsers.parse_floating_ips, "floating_ips"
        ),
        EntityHandler(EntityType.VOLUMES, ec2_sources.volumes, ec2_parsers.parse_volumes, "volumes"),
        EntityHandler(EntityType.NETWORKS, ec2_sources.networks, ec2_parsers.parse_networks, "networks"),
        EntityHandler(EntityType.SUBNETS, ec2_sources.subnets, ec2_parsers.parse_subnets, "subnets"),
        EntityHandler(
            EntityType.SECURITY_GROUPS,
            ec2_sources.security_groups,
            ec2_parsers.parse_security_groups,
            "security_groups",
        ),
        EntityHandler(
            EntityType.SERVICE_OFFERINGS,
            service_catalog_sources.service_offerings,
            service_catalog_parsers.parse_service_offerings,
            "service_offerings",
        ),
        EntityHandler(
            EntityType.SERVICE_PLANS,
            service_catalog_sources.service_plans,
            service_catalog_parsers.parse_service_plans,
            "service_plans",
        ),
        EntityHandler(
            EntityType.SERVICE_INSTANCES,
            service_catalog_sources.service_instances,
            service_catalog_parsers.parse_service_instances,
            "service_instances",
        ),
    ):
        registry.register(handler)
    return registry
