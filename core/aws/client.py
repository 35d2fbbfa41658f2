"""
core/aws/client.py - boto3 클라이언트 헬퍼

재시도(adaptive 모드), 타임아웃, 커넥션 풀이 설정된 boto3 클라이언트를 생성합니다.
전송 계층 재시도는 여기서만 처리하며, 수집기는 사이클 안에서 재시도하지 않습니다.

Example:
    from core.aws.client import get_client

    ec2 = get_client(session, "ec2", region_name="us-east-1")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, cast

from botocore.config import Config

if TYPE_CHECKING:
    import boto3

RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_RETRY_MODE: RetryMode = "adaptive"
DEFAULT_CONNECT_TIMEOUT = 10  # seconds
DEFAULT_READ_TIMEOUT = 30  # seconds
DEFAULT_MAX_POOL_CONNECTIONS = 10


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
    **kwargs: Any,
) -> Any:
    """Create a boto3 client with retry configuration

    Args:
        session: boto3 Session
        service_name: AWS service name (ec2, organizations, ...)
        region_name: region (None = session default)
        max_attempts: maximum attempts per call
        retry_mode: botocore retry mode
        connect_timeout: connect timeout in seconds
        read_timeout: read timeout in seconds
        max_pool_connections: HTTP pool size
        **kwargs: extra arguments for session.client()

    Returns:
        boto3 client
    """
    config = Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
    )

    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    # boto3-stubs wants a Literal service name
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )
