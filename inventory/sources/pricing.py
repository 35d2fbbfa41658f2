"""
inventory/sources/pricing.py - Pricing API 레코드 스트림

Pricing API는 us-east-1에서만 제공되며 각 상품을 JSON 문자열로 반환합니다.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import Any

from ..scope import Scope
from .base import PaginatedQuery, SourceContext

PRICING_REGION = "us-east-1"


def _price_list(page: dict[str, Any]) -> Iterable[dict[str, Any]]:
    for document in page.get("PriceList", []):
        yield json.loads(document) if isinstance(document, str) else document


def volume_types(ctx: SourceContext, scope: Scope) -> Iterator[dict[str, Any]]:
    """EBS storage products of the default region, one per volume API name

    Listed once, from the master account's default region.
    """
    if not ctx.is_global_scope(scope):
        return

    query = PaginatedQuery(
        ctx,
        scope,
        "pricing",
        "get_products",
        "PriceList",
        params={
            "ServiceCode": "AmazonEC2",
            "Filters": [
                {"Type": "TERM_MATCH", "Field": "productFamily", "Value": "Storage"},
                {"Type": "TERM_MATCH", "Field": "regionCode", "Value": ctx.default_region},
            ],
        },
        extract=_price_list,
        region=PRICING_REGION,
    )

    seen: set[str] = set()
    for price in query:
        attributes = price.get("product", {}).get("attributes", {})
        name = attributes.get("volumeApiName")
        if not name or name in seen:
            continue
        seen.add(name)
        yield price
