"""
core/region/availability.py - 리전 가용성 조회

EC2.describe_regions()로 계정에서 활성화된 리전을 조회하고,
설정된 리전 패턴으로 필터링합니다.

Usage:
    from core.region.availability import get_available_regions, filter_regions

    regions = get_available_regions(session, "us-east-1")
    regions = filter_regions(regions, ["us-*", "eu-west-1"])
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.aws.client import get_client

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionInfo:
    """리전 정보

    Attributes:
        region_name: region code (e.g. "us-east-1")
        endpoint: EC2 endpoint of the region
        opt_in_status: "opt-in-not-required", "opted-in" or "not-opted-in"
    """

    region_name: str
    endpoint: str = ""
    opt_in_status: str = "opt-in-not-required"

    @property
    def is_opted_in(self) -> bool:
        """Region is enabled for the account"""
        return self.opt_in_status in ("opt-in-not-required", "opted-in")

    def to_dict(self) -> dict[str, Any]:
        return {
            "region_name": self.region_name,
            "endpoint": self.endpoint,
            "opt_in_status": self.opt_in_status,
            "is_opted_in": self.is_opted_in,
        }


def describe_regions(session: boto3.Session, region: str) -> list[RegionInfo]:
    """All regions with their opt-in status

    Errors propagate; a failed region listing fails the whole cycle.
    """
    ec2 = get_client(session, "ec2", region_name=region)
    response = ec2.describe_regions(AllRegions=True)
    return [
        RegionInfo(
            region_name=item.get("RegionName", ""),
            endpoint=item.get("Endpoint", ""),
            opt_in_status=item.get("OptInStatus", "opt-in-not-required"),
        )
        for item in response.get("Regions", [])
    ]


def get_available_regions(session: boto3.Session, region: str) -> list[str]:
    """Enabled region codes, sorted

    Args:
        session: boto3 Session of the master account
        region: region used for the API call

    Returns:
        list of region codes
    """
    return sorted(info.region_name for info in describe_regions(session, region) if info.is_opted_in)


def filter_regions(regions: Iterable[str], patterns: Iterable[str]) -> list[str]:
    """Keep the regions matching any fnmatch pattern (no patterns = keep all)"""
    patterns = list(patterns)
    regions = list(regions)
    if not patterns:
        return regions

    selected = [r for r in regions if any(fnmatch.fnmatch(r, p) for p in patterns)]
    unmatched = [p for p in patterns if not any(fnmatch.fnmatch(r, p) for r in regions)]
    if unmatched:
        logger.warning("Region patterns without a match: %s", ", ".join(unmatched))
    return selected
