"""
core/aws - boto3 세션, 클라이언트, 계정 조회 및 에러 분류

Usage:
    from core.aws import SessionFactory, get_client, list_accounts

    factory = SessionFactory(access_key_id, secret_access_key)
    accounts = list_accounts(factory, "us-east-1")
"""

from .accounts import AccountInfo, get_caller_account, list_accounts
from .client import get_client
from .errors import ErrorCategory, categorize_error, get_error_code
from .session import AssumedCredentials, SessionFactory

__all__: list[str] = [
    "AccountInfo",
    "AssumedCredentials",
    "ErrorCategory",
    "SessionFactory",
    "categorize_error",
    "get_caller_account",
    "get_client",
    "get_error_code",
    "list_accounts",
]
