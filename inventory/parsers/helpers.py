"""
inventory/parsers/helpers.py - 공통 파싱 헬퍼
"""

from __future__ import annotations

from typing import Any

from ..batcher import EntityBatcher
from ..types import TagLink, lazy_find

CLOUDFORMATION_STACK_TAG = "aws:cloudformation:stack-id"


def get_from_tags(tags: list[dict[str, Any]] | None, key: str) -> str | None:
    """Value of a tag, key compared case-insensitively"""
    key = key.lower()
    for tag in tags or []:
        if str(tag.get("Key", "")).lower() == key:
            return tag.get("Value")
    return None


def name_from_tags(tags: list[dict[str, Any]] | None, default: str) -> str:
    return get_from_tags(tags, "name") or default


def stack_from_tags(tags: list[dict[str, Any]] | None) -> dict[str, Any] | None:
    """Lazy reference to the CloudFormation stack that created the resource"""
    stack_id = get_from_tags(tags, CLOUDFORMATION_STACK_TAG)
    if not stack_id:
        return None
    return lazy_find("orchestration_stacks", source_ref=stack_id)


def parse_tags(
    batcher: EntityBatcher,
    collection: str,
    resource_key: str,
    source_ref: str,
    tags: list[dict[str, Any]] | None,
) -> None:
    """Append one <resource>_tags link per tag

    Tags in the aws: namespace are skipped, they are managed by AWS.
    """
    link_collection = f"{resource_key}_tags"
    for tag in tags or []:
        key = tag.get("Key", "")
        if not key or key.startswith("aws:"):
            continue
        batcher.append(
            link_collection,
            TagLink(
                resource_key=resource_key,
                resource=lazy_find(collection, source_ref=source_ref),
                tag=lazy_find("tags", name=key, value=tag.get("Value", ""), namespace="amazon"),
            ),
        )
