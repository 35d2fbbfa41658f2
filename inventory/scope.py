"""
inventory/scope.py - 작업 단위 scope

Scope는 (리전, 계정[, assume할 Role]) 조합 하나입니다. 한 번의 수집에서
scope 목록은 검증된 계정과 조회된 리전의 곱이며, 계정이 바깥 루프입니다.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from core.aws.accounts import AccountInfo

from .types import lazy_find


@dataclass(frozen=True)
class Scope:
    """작업 단위 하나

    Attributes:
        region: region code
        account_id: account id
        account_name: account name
        master: account the credentials belong to
        sub_account_role_arn: role assumed for non-master accounts
    """

    region: str
    account_id: str
    account_name: str = ""
    master: bool = False
    sub_account_role_arn: str | None = None

    def __str__(self) -> str:
        return f"{self.account_id}/{self.region}"

    @property
    def source_region(self) -> dict[str, Any]:
        """Lazy reference to the scope's region"""
        return lazy_find("source_regions", source_ref=self.region)

    @property
    def subscription(self) -> dict[str, Any]:
        """Lazy reference to the scope's account"""
        return lazy_find("subscriptions", source_ref=self.account_id)


def sub_account_role_arn(account_id: str, role_name: str) -> str:
    return f"arn:aws:iam::{account_id}:role/{role_name}"


def build_scope(region: str, account: AccountInfo, sub_account_role: str) -> Scope:
    """Scope for a region and account

    Non-master accounts are accessed by assuming sub_account_role in them.
    """
    role_arn = None
    if not account.master:
        role_arn = sub_account_role_arn(account.account_id, sub_account_role)

    return Scope(
        region=region,
        account_id=account.account_id,
        account_name=account.name,
        master=account.master,
        sub_account_role_arn=role_arn,
    )


def enumerate_scopes(
    regions: Iterable[str],
    accounts: Iterable[AccountInfo],
    sub_account_role: str,
) -> list[Scope]:
    """Ordered cross product of accounts (outer) and regions (inner)"""
    regions = list(regions)
    return [build_scope(region, account, sub_account_role) for account in accounts for region in regions]
