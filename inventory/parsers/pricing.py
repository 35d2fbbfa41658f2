"""
inventory/parsers/pricing.py - Pricing API 레코드 파서
"""

from __future__ import annotations

from typing import Any

from ..batcher import EntityBatcher
from ..scope import Scope
from ..types import VolumeType


def parse_volume_types(batcher: EntityBatcher, price: dict[str, Any], scope: Scope) -> None:
    attributes = price.get("product", {}).get("attributes", {})
    name = attributes["volumeApiName"]

    batcher.append(
        "volume_types",
        VolumeType(
            source_ref=name,
            name=name,
            description=attributes.get("volumeType"),
            extra={
                "storage_media": attributes.get("storageMedia"),
                "max_volume_size": attributes.get("maxVolumeSize"),
                "max_iops": attributes.get("maxIopsvolume"),
                "max_throughput": attributes.get("maxThroughputvolume"),
            },
        ),
    )
