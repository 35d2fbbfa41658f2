"""
core/aws/session.py - boto3 세션 팩토리

master 계정의 정적 자격 증명으로 boto3 세션을 생성하고, 멤버 계정은
STS로 Role을 assume하여 얻은 자격 증명을 사용합니다.
assume한 자격 증명은 만료 직전까지 Role ARN별로 캐시됩니다.

Usage:
    factory = SessionFactory(access_key_id, secret_access_key)

    # master 계정
    session = factory.get_session("us-east-1")

    # 멤버 계정
    session = factory.get_session(
        "eu-west-1",
        role_arn="arn:aws:iam::111122223333:role/InventoryReader",
    )
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import boto3

from core.config import settings

from .client import get_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssumedCredentials:
    """sts:AssumeRole이 반환한 임시 자격 증명"""

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime

    def is_expiring(self, margin_seconds: int) -> bool:
        return datetime.now(timezone.utc) + timedelta(seconds=margin_seconds) >= self.expiration


class SessionFactory:
    """Role assume을 지원하는 boto3 세션 팩토리

    Attributes:
        access_key_id: static access key (None = default credential chain)
        secret_access_key: static secret key
        role_session_name: RoleSessionName used for sts:AssumeRole
    """

    def __init__(
        self,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        role_session_name: str = "aws-inventory-collector",
        duration_seconds: int = settings.ASSUMED_ROLE_DURATION_SECONDS,
        refresh_margin_seconds: int = settings.ASSUMED_ROLE_REFRESH_MARGIN_SECONDS,
    ):
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.role_session_name = role_session_name
        self._duration_seconds = duration_seconds
        self._refresh_margin_seconds = refresh_margin_seconds
        self._assumed: dict[str, AssumedCredentials] = {}
        self._lock = threading.Lock()

    def base_session(self, region: str) -> boto3.Session:
        """Session of the master account"""
        return boto3.Session(
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            region_name=region,
        )

    def get_session(self, region: str, role_arn: str | None = None) -> boto3.Session:
        """Session for a region, assuming role_arn when given

        Raises:
            botocore.exceptions.ClientError: the role cannot be assumed
        """
        if not role_arn:
            return self.base_session(region)

        credentials = self._assume_role(role_arn, region)
        return boto3.Session(
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key,
            aws_session_token=credentials.session_token,
            region_name=region,
        )

    def client(self, service_name: str, region: str, role_arn: str | None = None):
        """Shortcut: session + retry-configured client"""
        session = self.get_session(region, role_arn)
        return get_client(session, service_name, region_name=region)

    def clear(self) -> None:
        """Drop all cached assumed credentials"""
        with self._lock:
            self._assumed.clear()

    def _assume_role(self, role_arn: str, region: str) -> AssumedCredentials:
        with self._lock:
            cached = self._assumed.get(role_arn)
            if cached and not cached.is_expiring(self._refresh_margin_seconds):
                return cached

        logger.debug("Assuming role %s", role_arn)
        sts = get_client(self.base_session(region), "sts", region_name=region)
        response = sts.assume_role(
            RoleArn=role_arn,
            RoleSessionName=self.role_session_name,
            DurationSeconds=self._duration_seconds,
        )
        raw = response["Credentials"]

        expiration = raw["Expiration"]
        if isinstance(expiration, str):
            expiration = datetime.fromisoformat(expiration.replace("Z", "+00:00"))
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)

        credentials = AssumedCredentials(
            access_key_id=raw["AccessKeyId"],
            secret_access_key=raw["SecretAccessKey"],
            session_token=raw["SessionToken"],
            expiration=expiration,
        )
        with self._lock:
            self._assumed[role_arn] = credentials
        return credentials
