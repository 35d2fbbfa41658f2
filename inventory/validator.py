"""
inventory/validator.py - 계정 접근 검증

후보 계정마다 수집기가 실제로 사용할 자격 증명(멤버 계정은 assume한
sub-account Role)으로 가벼운 읽기 호출을 보내 검증합니다.
검증에 실패한 계정은 이번 수집에서 제외되며, 실패가 수집 전체를 중단시키지는 않습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from botocore.exceptions import BotoCoreError, ClientError

from core.aws.accounts import AccountInfo
from core.aws.session import SessionFactory
from core.exceptions import is_access_denied

from .scope import build_scope

logger = logging.getLogger(__name__)


class AccountValidator:
    """후보 계정 접근 검증기

    Attributes:
        session_factory: session factory holding the master credentials
        sub_account_role: role name assumed in member accounts
    """

    def __init__(self, session_factory: SessionFactory, sub_account_role: str):
        self.session_factory = session_factory
        self.sub_account_role = sub_account_role

    def is_valid(self, region: str, account: AccountInfo) -> bool:
        """Probe one account in a reference region

        Returns:
            True when the probe succeeded
        """
        scope = build_scope(region, account, self.sub_account_role)
        try:
            ec2 = self.session_factory.client("ec2", region, scope.sub_account_role_arn)
            ec2.describe_regions(RegionNames=[region])
        except (ClientError, BotoCoreError) as e:
            if is_access_denied(e):
                logger.warning(
                    "Access denied for account %s with role %s, skipping: %s",
                    account.display_name,
                    scope.sub_account_role_arn or "(master credentials)",
                    e,
                )
            else:
                logger.warning("Account %s failed the access probe, skipping: %s", account.display_name, e)
            return False
        except Exception as e:
            logger.warning(
                "Account %s failed the access probe, skipping: [%s, %s]", account.display_name, type(e).__name__, e
            )
            return False
        return True

    def filter_accounts(self, region: str, accounts: Iterable[AccountInfo]) -> list[AccountInfo]:
        """Accounts passing the probe, in their original order"""
        valid = [account for account in accounts if self.is_valid(region, account)]
        logger.info("%d account(s) passed validation", len(valid))
        return valid
