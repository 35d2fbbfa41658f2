"""
inventory/parsers/cloudformation.py - CloudFormation 레코드 파서
"""

from __future__ import annotations

from typing import Any

from ..batcher import EntityBatcher
from ..scope import Scope
from ..types import OrchestrationStack
from .helpers import parse_tags


def parse_orchestration_stacks(batcher: EntityBatcher, stack: dict[str, Any], scope: Scope) -> None:
    stack_id = stack["StackId"]

    batcher.append(
        "orchestration_stacks",
        OrchestrationStack(
            source_ref=stack_id,
            name=stack.get("StackName", stack_id),
            description=stack.get("Description"),
            status=stack.get("StackStatus"),
            status_reason=stack.get("StackStatusReason"),
            source_created_at=stack.get("CreationTime"),
            source_region=scope.source_region,
            subscription=scope.subscription,
        ),
    )
    parse_tags(batcher, "orchestration_stacks", "orchestration_stack", stack_id, stack.get("Tags"))
