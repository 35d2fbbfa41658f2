"""
inventory/sources/organizations.py - Organizations 레코드 스트림
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from core.aws.accounts import ORGANIZATIONS_UNAVAILABLE_CODES
from core.exceptions import SourceFetchError

from ..scope import Scope
from .base import PaginatedQuery, SourceContext

logger = logging.getLogger(__name__)


def subscriptions(ctx: SourceContext, scope: Scope) -> Iterable[dict[str, Any]]:
    """Organization accounts, listed once from the master account's default region

    Without an organization (or access to it) the master account itself is
    the only subscription.
    """
    if not ctx.is_global_scope(scope):
        return ()
    return _organization_accounts(ctx, scope)


def _organization_accounts(ctx: SourceContext, scope: Scope) -> Iterator[dict[str, Any]]:
    query = PaginatedQuery(ctx, scope, "organizations", "list_accounts", "Accounts")
    try:
        yield from query
    except SourceFetchError as e:
        response = getattr(e.cause, "response", None) or {}
        code = response.get("Error", {}).get("Code", "")
        if code not in ORGANIZATIONS_UNAVAILABLE_CODES:
            raise
        logger.info("Organization unavailable (%s), reporting account %s only", code, scope.account_id)
        yield {"Id": scope.account_id, "Name": scope.account_name or scope.account_id, "Status": "ACTIVE"}
