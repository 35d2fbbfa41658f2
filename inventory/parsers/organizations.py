"""
inventory/parsers/organizations.py - Organizations 레코드 파서
"""

from __future__ import annotations

from typing import Any

from ..batcher import EntityBatcher
from ..scope import Scope
from ..types import Subscription


def parse_subscriptions(batcher: EntityBatcher, account: dict[str, Any], scope: Scope) -> None:
    batcher.append(
        "subscriptions",
        Subscription(
            source_ref=account["Id"],
            name=account.get("Name") or account["Id"],
            extra={
                "email": account.get("Email"),
                "status": account.get("Status"),
                "master": account["Id"] == scope.account_id,
            },
        ),
    )
