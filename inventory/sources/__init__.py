"""
inventory/sources - AWS 서비스별 소스 레코드 스트림
"""

from .base import PaginatedQuery, SourceContext

__all__ = ["PaginatedQuery", "SourceContext"]
