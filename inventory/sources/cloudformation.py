"""
inventory/sources/cloudformation.py - CloudFormation 레코드 스트림
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..scope import Scope
from .base import PaginatedQuery, SourceContext


def orchestration_stacks(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    return PaginatedQuery(ctx, scope, "cloudformation", "describe_stacks", "Stacks")
