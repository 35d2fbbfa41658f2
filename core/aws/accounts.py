"""
core/aws/accounts.py - 계정 조회

설정된 자격 증명으로 접근 가능한 계정 목록을 조회합니다.
호출자 자신의 계정이 master 계정이며, AWS Organization을 관리하는 경우
멤버 계정도 함께 조회합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError

from .client import get_client
from .session import SessionFactory

logger = logging.getLogger(__name__)

# caller is not allowed to (or cannot) list organization accounts
ORGANIZATIONS_UNAVAILABLE_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "AWSOrganizationsNotInUseException",
}


@dataclass(frozen=True)
class AccountInfo:
    """AWS 계정 정보

    Attributes:
        account_id: 12 digit account id
        name: account name (falls back to the id)
        master: True for the account the credentials belong to
        email: account email (organization accounts only)
        status: organization account status
    """

    account_id: str
    name: str = ""
    master: bool = False
    email: str | None = None
    status: str = "ACTIVE"

    @property
    def display_name(self) -> str:
        return f"{self.name or self.account_id} ({self.account_id})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "name": self.name,
            "master": self.master,
            "email": self.email,
            "status": self.status,
        }


def get_caller_account(session_factory: SessionFactory, region: str) -> AccountInfo:
    """Account of the configured credentials"""
    sts = get_client(session_factory.base_session(region), "sts", region_name=region)
    identity = sts.get_caller_identity()
    account_id = identity["Account"]
    return AccountInfo(account_id=account_id, name=account_id, master=True)


def list_accounts(session_factory: SessionFactory, region: str) -> list[AccountInfo]:
    """List candidate accounts, master first

    Suspended organization accounts are skipped. Without organization access
    only the master account is returned.

    Args:
        session_factory: session factory holding the master credentials
        region: region used for the STS/Organizations calls

    Returns:
        AccountInfo list
    """
    master = get_caller_account(session_factory, region)

    organizations = get_client(session_factory.base_session(region), "organizations", region_name=region)
    members: list[AccountInfo] = []
    try:
        paginator = organizations.get_paginator("list_accounts")
        for page in paginator.paginate():
            for account in page.get("Accounts", []):
                if account["Id"] == master.account_id:
                    master = AccountInfo(
                        account_id=master.account_id,
                        name=account.get("Name") or master.account_id,
                        master=True,
                        email=account.get("Email"),
                        status=account.get("Status", "ACTIVE"),
                    )
                    continue
                if account.get("Status", "ACTIVE") != "ACTIVE":
                    logger.debug("Skipping %s account %s", account.get("Status"), account["Id"])
                    continue
                members.append(
                    AccountInfo(
                        account_id=account["Id"],
                        name=account.get("Name") or account["Id"],
                        master=False,
                        email=account.get("Email"),
                        status=account.get("Status", "ACTIVE"),
                    )
                )
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "")
        if code not in ORGANIZATIONS_UNAVAILABLE_CODES:
            raise
        logger.info("Organization accounts unavailable (%s), using account %s only", code, master.account_id)
        return [master]

    return [master, *sorted(members, key=lambda a: a.account_id)]
