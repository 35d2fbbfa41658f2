"""
inventory/sources/ec2.py - EC2 레코드 스트림

엔티티 타입마다 함수 하나: (ctx, scope) -> EC2 원시 레코드(boto3 응답 dict)의
lazy iterable.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..scope import Scope
from .base import PaginatedQuery, SourceContext


def _instances(page: dict[str, Any]) -> Iterable[dict[str, Any]]:
    for reservation in page.get("Reservations", []):
        yield from reservation.get("Instances", [])


def vms(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(ctx, scope, "ec2", "describe_instances", "Reservations", extract=_instances)


def network_adapters(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(ctx, scope, "ec2", "describe_network_interfaces", "NetworkInterfaces")


def floating_ips(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(ctx, scope, "ec2", "describe_addresses", "Addresses")


def volumes(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(ctx, scope, "ec2", "describe_volumes", "Volumes")


def networks(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(ctx, scope, "ec2", "describe_vpcs", "Vpcs")


def subnets(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(ctx, scope, "ec2", "describe_subnets", "Subnets")


def security_groups(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(ctx, scope, "ec2", "describe_security_groups", "SecurityGroups")


def source_regions(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    """The scope's own region, master account only"""
    if not scope.master:
        return ()
    return PaginatedQuery(
        ctx,
        scope,
        "ec2",
        "describe_regions",
        "Regions",
        params={"RegionNames": [scope.region]},
    )


def flavors(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    """Instance types, listed once from the master account's default region"""
    if not ctx.is_global_scope(scope):
        return ()
    return PaginatedQuery(ctx, scope, "ec2", "describe_instance_types", "InstanceTypes")
