"""
tests/core/aws/test_aws_session.py - core/aws/session.py 및 core/aws/client.py 테스트
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import boto3
from moto import mock_aws

from core.aws.client import get_client
from core.aws.session import AssumedCredentials, SessionFactory

ROLE_ARN = "arn:aws:iam::222222222222:role/Reader"


def _credentials(expires_in: timedelta):
    return {
        "Credentials": {
            "AccessKeyId": "ASIA",
            "SecretAccessKey": "secret",
            "SessionToken": "token",
            "Expiration": datetime.now(timezone.utc) + expires_in,
        }
    }


class TestGetClient:
    def test_retry_config_applied(self):
        session = MagicMock()

        get_client(session, "ec2", region_name="eu-west-1", max_attempts=3)

        _, kwargs = session.client.call_args
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["config"].retries == {"max_attempts": 3, "mode": "adaptive"}


class TestAssumedCredentials:
    def test_is_expiring(self):
        soon = AssumedCredentials("a", "b", "c", datetime.now(timezone.utc) + timedelta(seconds=60))
        later = AssumedCredentials("a", "b", "c", datetime.now(timezone.utc) + timedelta(hours=1))

        assert soon.is_expiring(300) is True
        assert later.is_expiring(300) is False


class TestSessionFactory:
    """Role assume 및 캐시 테스트"""

    def test_master_session_uses_static_keys(self):
        factory = SessionFactory("AKIA", "secret")

        session = factory.get_session("eu-west-1")

        credentials = session.get_credentials()
        assert credentials.access_key == "AKIA"
        assert session.region_name == "eu-west-1"

    def test_assumed_credentials_cached_per_role(self):
        factory = SessionFactory("AKIA", "secret")
        sts = MagicMock()
        sts.assume_role.return_value = _credentials(timedelta(hours=1))

        with patch("core.aws.session.get_client", return_value=sts):
            first = factory.get_session("us-east-1", ROLE_ARN)
            second = factory.get_session("eu-west-1", ROLE_ARN)

        assert sts.assume_role.call_count == 1
        assert first.get_credentials().token == "token"
        assert second.region_name == "eu-west-1"

    def test_expiring_credentials_refreshed(self):
        factory = SessionFactory("AKIA", "secret", refresh_margin_seconds=300)
        sts = MagicMock()
        sts.assume_role.return_value = _credentials(timedelta(seconds=30))

        with patch("core.aws.session.get_client", return_value=sts):
            factory.get_session("us-east-1", ROLE_ARN)
            factory.get_session("us-east-1", ROLE_ARN)

        assert sts.assume_role.call_count == 2

    def test_clear_drops_cache(self):
        factory = SessionFactory("AKIA", "secret")
        sts = MagicMock()
        sts.assume_role.return_value = _credentials(timedelta(hours=1))

        with patch("core.aws.session.get_client", return_value=sts):
            factory.get_session("us-east-1", ROLE_ARN)
            factory.clear()
            factory.get_session("us-east-1", ROLE_ARN)

        assert sts.assume_role.call_count == 2

    def test_string_expiration_parsed(self):
        factory = SessionFactory("AKIA", "secret")
        sts = MagicMock()
        response = _credentials(timedelta(hours=1))
        response["Credentials"]["Expiration"] = "2999-01-01T00:00:00Z"
        sts.assume_role.return_value = response

        with patch("core.aws.session.get_client", return_value=sts):
            factory.get_session("us-east-1", ROLE_ARN)

        assert factory._assumed[ROLE_ARN].expiration.year == 2999

    @mock_aws
    def test_assume_role_with_moto(self):
        factory = SessionFactory()

        ec2 = factory.client("ec2", "us-east-1", ROLE_ARN)

        assert ec2.describe_regions(RegionNames=["us-east-1"])["Regions"]
        assert isinstance(factory.get_session("us-east-1", ROLE_ARN), boto3.Session)
