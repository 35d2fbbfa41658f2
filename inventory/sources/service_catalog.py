"""
inventory/sources/service_catalog.py - Service Catalog 레코드 스트림

scope의 계정/리전에 있는 상품(service_offerings), 상품별 provisioning
artifact(service_plans), 프로비저닝된 상품(service_instances)을 조회합니다.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from ..scope import Scope
from .base import PaginatedQuery, SourceContext

SERVICE = "servicecatalog"


def _products(ctx: SourceContext, scope: Scope) -> PaginatedQuery:
    return PaginatedQuery(ctx, scope, SERVICE, "search_products_as_admin", "ProductViewDetails")


def service_offerings(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return _products(ctx, scope)


def service_plans(ctx: SourceContext, scope: Scope) -> Iterator[dict[str, Any]]:
    """One record per (product, provisioning artifact)

    Record:
        {"Product": ProductViewSummary, "ProvisioningArtifact": {...}, "LaunchPaths": [...]}
    """
    for product in _products(ctx, scope):
        summary = product.get("ProductViewSummary", {})
        product_id = summary.get("ProductId")
        if not product_id:
            continue

        params = {"ProductId": product_id}
        launch_paths = list(PaginatedQuery(ctx, scope, SERVICE, "list_launch_paths", "LaunchPathSummaries", params))
        artifacts = PaginatedQuery(
            ctx, scope, SERVICE, "list_provisioning_artifacts", "ProvisioningArtifactDetails", params
        )
        for artifact in artifacts:
            yield {"Product": summary, "ProvisioningArtifact": artifact, "LaunchPaths": launch_paths}


def service_instances(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(
        ctx,
        scope,
        SERVICE,
        "scan_provisioned_products",
        "ProvisionedProducts",
        params={"AccessLevelFilter": {"Key": "Account", "Value": "self"}},
    )
