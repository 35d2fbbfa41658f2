"""
core/aws/errors.py - AWS 에러 분류

AWS(또는 인벤토리 저장소) 호출 중 발생한 예외를 몇 가지 카테고리로 분류합니다.
수집기는 카테고리에 따라 실패한 사이클의 보고 방식을 결정합니다.

주요 구성 요소:
- ErrorCategory: 에러 카테고리 enum
- categorize_error: 예외 -> ErrorCategory
- get_error_code: 예외 -> AWS 에러 코드 또는 클래스명
"""

from __future__ import annotations

from enum import Enum

from core.exceptions import (
    ConfigError,
    IngressError,
    RunStateError,
    is_access_denied,
    is_not_found,
    is_throttling,
)


class ErrorCategory(Enum):
    """에러 카테고리"""

    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    THROTTLING = "throttling"
    TIMEOUT = "timeout"
    EXPIRED_TOKEN = "expired_token"
    NETWORK = "network"
    INGRESS = "ingress"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


def get_error_code(error: Exception) -> str:
    """Extract the error code

    ClientError (directly or wrapped as cause) yields the AWS code, anything
    else the exception class name.

    Args:
        error: exception

    Returns:
        error code string
    """
    response = getattr(error, "response", None)
    if response is not None:
        code: str = response.get("Error", {}).get("Code", "Unknown")
        return code

    cause = getattr(error, "cause", None)
    if isinstance(cause, Exception) and cause is not error:
        return get_error_code(cause)

    return error.__class__.__name__


def categorize_error(error: Exception) -> ErrorCategory:
    """Classify an exception

    Args:
        error: exception to classify

    Returns:
        error category
    """
    if isinstance(error, (ConfigError, RunStateError)):
        return ErrorCategory.CONFIGURATION
    if is_access_denied(error):
        return ErrorCategory.ACCESS_DENIED
    if is_throttling(error):
        return ErrorCategory.THROTTLING
    if is_not_found(error):
        return ErrorCategory.NOT_FOUND
    if isinstance(error, IngressError):
        return ErrorCategory.INGRESS

    code = get_error_code(error)
    if "Timeout" in code:
        return ErrorCategory.TIMEOUT
    if code in ("ExpiredToken", "ExpiredTokenException"):
        return ErrorCategory.EXPIRED_TOKEN

    if isinstance(error, (ConnectionError, TimeoutError, OSError)):
        return ErrorCategory.NETWORK

    return ErrorCategory.UNKNOWN
