"""
tests/core/aws/test_aws_accounts.py - core/aws/accounts.py 및 core/aws/errors.py 테스트
"""

from unittest.mock import MagicMock, patch

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from core.aws.accounts import AccountInfo, get_caller_account, list_accounts
from core.aws.errors import ErrorCategory, categorize_error, get_error_code
from core.aws.session import SessionFactory
from core.exceptions import ConfigError, IngressError, RunStateError, SourceFetchError


def _client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "Operation")


class TestAccountInfo:
    def test_display_name(self):
        assert AccountInfo("111111111111", "prod").display_name == "prod (111111111111)"
        assert AccountInfo("111111111111").display_name == "111111111111 (111111111111)"

    def test_to_dict(self):
        assert AccountInfo("1", "a", master=True).to_dict()["master"] is True


class TestListAccounts:
    """계정 조회 테스트"""

    @mock_aws
    def test_caller_is_master(self):
        account = get_caller_account(SessionFactory(), "us-east-1")

        assert account.account_id == "123456789012"
        assert account.master is True

    @mock_aws
    def test_organization_members_after_master(self):
        client = boto3.client("organizations", region_name="us-east-1")
        client.create_organization(FeatureSet="ALL")
        client.create_account(AccountName="zeta", Email="zeta@example.com")
        client.create_account(AccountName="alpha", Email="alpha@example.com")

        accounts = list_accounts(SessionFactory(), "us-east-1")

        assert accounts[0].master is True
        assert accounts[0].account_id == "123456789012"
        members = accounts[1:]
        assert {a.name for a in members} == {"zeta", "alpha"}
        assert [a.account_id for a in members] == sorted(a.account_id for a in members)
        assert not any(a.master for a in members)

    def _patched(self, organizations):
        sts = MagicMock()
        sts.get_caller_identity.return_value = {"Account": "111111111111"}

        def get_client(session, service, region_name=None):
            return sts if service == "sts" else organizations

        return patch("core.aws.accounts.get_client", side_effect=get_client)

    def test_no_organization_returns_master_only(self):
        organizations = MagicMock()
        organizations.get_paginator.return_value.paginate.side_effect = _client_error(
            "AWSOrganizationsNotInUseException"
        )

        with self._patched(organizations):
            accounts = list_accounts(MagicMock(), "us-east-1")

        assert accounts == [AccountInfo("111111111111", "111111111111", master=True)]

    def test_suspended_members_skipped(self):
        organizations = MagicMock()
        organizations.get_paginator.return_value.paginate.return_value = [
            {
                "Accounts": [
                    {"Id": "111111111111", "Name": "main", "Status": "ACTIVE"},
                    {"Id": "333333333333", "Name": "old", "Status": "SUSPENDED"},
                    {"Id": "222222222222", "Name": "dev", "Status": "ACTIVE"},
                ]
            }
        ]

        with self._patched(organizations):
            accounts = list_accounts(MagicMock(), "us-east-1")

        assert [(a.account_id, a.name, a.master) for a in accounts] == [
            ("111111111111", "main", True),
            ("222222222222", "dev", False),
        ]

    def test_unexpected_error_propagates(self):
        organizations = MagicMock()
        organizations.get_paginator.return_value.paginate.side_effect = _client_error("ServiceException")

        with self._patched(organizations), pytest.raises(ClientError):
            list_accounts(MagicMock(), "us-east-1")


class TestCategorizeError:
    """에러 카테고리 테스트"""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (_client_error("AccessDenied"), ErrorCategory.ACCESS_DENIED),
            (_client_error("UnauthorizedOperation"), ErrorCategory.ACCESS_DENIED),
            (_client_error("Throttling"), ErrorCategory.THROTTLING),
            (_client_error("ResourceNotFoundException"), ErrorCategory.NOT_FOUND),
            (_client_error("RequestTimeout"), ErrorCategory.TIMEOUT),
            (_client_error("ExpiredToken"), ErrorCategory.EXPIRED_TOKEN),
            (ConnectionError("reset"), ErrorCategory.NETWORK),
            (IngressError("save_inventory", "boom", status_code=500), ErrorCategory.INGRESS),
            (ConfigError("limits", "bad"), ErrorCategory.CONFIGURATION),
            (RunStateError("run", "already swept"), ErrorCategory.CONFIGURATION),
            (ValueError("parse"), ErrorCategory.UNKNOWN),
        ],
    )
    def test_categories(self, error, expected):
        assert categorize_error(error) is expected

    def test_wrapped_client_error(self):
        error = SourceFetchError("Couldn't fetch 'Volumes'", cause=_client_error("AuthFailure"))

        assert categorize_error(error) is ErrorCategory.ACCESS_DENIED
        assert get_error_code(error) == "AuthFailure"

    def test_code_falls_back_to_class_name(self):
        assert get_error_code(ValueError("x")) == "ValueError"
