# core/__init__.py
"""
core - 수집기 인프라

아키텍처:
    core/
    ├── aws/            # boto3 클라이언트, 세션, 계정, 에러 카테고리
    ├── region/         # 리전 조회
    ├── config.py       # 설정, 로깅, CollectorConfig
    └── exceptions.py   # 예외 계층

Usage:
    from core.config import CollectorConfig, setup_logging
    from core.exceptions import SourceFetchError, is_access_denied
"""

from core import aws, config, exceptions, region

__all__: list[str] = [
    # subpackages
    "aws",
    "region",
    # modules
    "config",
    "exceptions",
]
