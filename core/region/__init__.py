"""
core/region - 리전 조회
"""

from .availability import RegionInfo, describe_regions, filter_regions, get_available_regions

__all__ = ["RegionInfo", "describe_regions", "filter_regions", "get_available_regions"]
