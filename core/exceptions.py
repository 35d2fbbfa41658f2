"""
core/exceptions.py - 인벤토리 수집기 예외 계층

수집기 전반에서 사용하는 예외 클래스입니다. 모든 커스텀 에러는 메시지,
원인 예외(cause), details 딕셔너리를 가지므로 동일한 방식으로 로깅/직렬화됩니다.

계층 구조:
    InventoryError (기본)
    ├── ConfigError        (잘못되거나 불완전한 설정)
    ├── SourceFetchError   (프로바이더 레코드 조회/페이지네이션 실패)
    ├── IngressError       (인벤토리 저장소 업로드 또는 sweep 호출 실패)
    └── RunStateError      (refresh run 계약 위반)

Usage:
    from core.exceptions import SourceFetchError, is_access_denied

    try:
        for record in query:
            ...
    except SourceFetchError as e:
        if is_access_denied(e):
            logger.warning("no access: %s", e)
"""

from typing import Any, Dict, Optional

# =============================================================================
# Base
# =============================================================================


class InventoryError(Exception):
    """수집기 기본 예외

    Attributes:
        message: error message
        cause: original exception (for chaining)
        details: extra context
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Return the exception as a dict"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(InventoryError):
    """잘못된 설정 값"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"Configuration error [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# Source / transport
# =============================================================================


class SourceFetchError(InventoryError):
    """프로바이더 레코드 조회 실패

    Wraps the provider exception (usually botocore ClientError) so the cycle
    boundary knows what was being fetched and for which scope.
    """

    def __init__(
        self,
        message: str,
        scope: Optional[Any] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.scope = scope
        if scope is not None:
            self.details["scope"] = str(scope)


class IngressError(InventoryError):
    """인벤토리 저장소 요청 거부 또는 실패"""

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        full_message = f"Ingress {operation} failed"
        if status_code is not None:
            full_message = f"{full_message} ({status_code})"
        full_message = f"{full_message}: {message}"
        super().__init__(full_message, cause)
        self.operation = operation
        self.status_code = status_code
        self.details.update({"operation": operation, "status_code": status_code})


class RunStateError(InventoryError):
    """sweep으로 닫힌 refresh run을 다시 사용함"""

    def __init__(self, refresh_state_uuid: str, message: str):
        super().__init__(f"Refresh run {refresh_state_uuid}: {message}")
        self.refresh_state_uuid = refresh_state_uuid
        self.details["refresh_state_uuid"] = refresh_state_uuid


# =============================================================================
# Helpers
# =============================================================================

ACCESS_DENIED_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "UnauthorizedAccess",
    "UnauthorizedOperation",
    "AuthFailure",
}

THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
}

NOT_FOUND_CODES = {
    "ResourceNotFoundException",
    "NotFoundException",
    "NoSuchEntity",
    "InvalidInstanceID.NotFound",
}


def _error_code(error: Exception) -> str:
    """Extract a botocore error code, looking through wrapped causes"""
    response = getattr(error, "response", None)
    if response is not None:
        return response.get("Error", {}).get("Code", "")

    cause = getattr(error, "cause", None)
    if isinstance(cause, Exception) and cause is not error:
        return _error_code(cause)

    return ""


def is_access_denied(error: Exception) -> bool:
    """Check whether the error is an access/role denial

    Args:
        error: exception to check

    Returns:
        True for AccessDenied style errors
    """
    return _error_code(error) in ACCESS_DENIED_CODES


def is_throttling(error: Exception) -> bool:
    """Check whether the error is an API throttling error"""
    return _error_code(error) in THROTTLING_CODES


def is_not_found(error: Exception) -> bool:
    """Check whether the error means the resource does not exist"""
    return _error_code(error) in NOT_FOUND_CODES
