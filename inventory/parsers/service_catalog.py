"""
inventory/parsers/service_catalog.py - Service Catalog 레코드 파서
"""

from __future__ import annotations

from typing import Any

from ..batcher import EntityBatcher
from ..scope import Scope
from ..types import ServiceInstance, ServiceOffering, ServicePlan, lazy_find


def service_plan_ref(product_id: str, artifact_id: str) -> str:
    return f"{product_id}__{artifact_id}"


def parse_service_offerings(batcher: EntityBatcher, product: dict[str, Any], scope: Scope) -> None:
    summary = product.get("ProductViewSummary", {})
    product_id = summary["ProductId"]

    batcher.append(
        "service_offerings",
        ServiceOffering(
            source_ref=product_id,
            name=summary.get("Name") or product_id,
            description=summary.get("ShortDescription"),
            source_created_at=product.get("CreatedTime"),
            source_region=scope.source_region,
            subscription=scope.subscription,
            extra={
                "arn": product.get("ProductARN"),
                "status": product.get("Status"),
                "type": summary.get("Type"),
                "owner": summary.get("Owner"),
                "distributor": summary.get("Distributor"),
                "support_email": summary.get("SupportEmail"),
                "support_url": summary.get("SupportUrl"),
            },
        ),
    )


def parse_service_plans(batcher: EntityBatcher, record: dict[str, Any], scope: Scope) -> None:
    product = record["Product"]
    artifact = record["ProvisioningArtifact"]
    product_id = product["ProductId"]

    batcher.append(
        "service_plans",
        ServicePlan(
            source_ref=service_plan_ref(product_id, artifact["Id"]),
            name=f"{product.get('Name') or product_id} {artifact.get('Name') or artifact['Id']}",
            description=artifact.get("Description"),
            service_offering=lazy_find("service_offerings", source_ref=product_id),
            source_created_at=artifact.get("CreatedTime"),
            source_region=scope.source_region,
            subscription=scope.subscription,
            extra={
                "artifact_id": artifact["Id"],
                "active": artifact.get("Active"),
                "guidance": artifact.get("Guidance"),
                "launch_paths": [
                    {"id": path.get("Id"), "name": path.get("Name")} for path in record.get("LaunchPaths", [])
                ],
            },
        ),
    )


def parse_service_instances(batcher: EntityBatcher, provisioned: dict[str, Any], scope: Scope) -> None:
    product_id = provisioned.get("ProductId")
    artifact_id = provisioned.get("ProvisioningArtifactId")

    batcher.append(
        "service_instances",
        ServiceInstance(
            source_ref=provisioned["Id"],
            name=provisioned.get("Name") or provisioned["Id"],
            service_offering=lazy_find("service_offerings", source_ref=product_id) if product_id else None,
            service_plan=(
                lazy_find("service_plans", source_ref=service_plan_ref(product_id, artifact_id))
                if product_id and artifact_id
                else None
            ),
            source_created_at=provisioned.get("CreatedTime"),
            source_region=scope.source_region,
            subscription=scope.subscription,
            extra={
                "arn": provisioned.get("Arn"),
                "type": provisioned.get("Type"),
                "status": provisioned.get("Status"),
                "status_message": provisioned.get("StatusMessage"),
                "last_record_id": provisioned.get("LastRecordId"),
            },
        ),
    )
