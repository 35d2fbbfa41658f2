"""
inventory/sources/base.py - 소스 레코드 스트림

레코드 스트림은 lazy 방식입니다. 엔진이 소비하는 동안 페이지 단위로 조회하므로
scope 전체를 메모리에 올리지 않습니다. 페이지 조회가 실패하면 순회하는 쪽에
SourceFetchError가 발생합니다.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from core.aws.session import SessionFactory
from core.exceptions import SourceFetchError

from ..scope import Scope

logger = logging.getLogger(__name__)


@dataclass
class SourceContext:
    """소스 스트림이 AWS에 접근하는 데 필요한 정보

    Attributes:
        session_factory: session factory with the master credentials
        default_region: region holding global listings (flavors, accounts)
    """

    session_factory: SessionFactory
    default_region: str

    def client(self, service_name: str, scope: Scope, region: str | None = None):
        """Client of a service for the scope's account, in the scope's region unless given"""
        return self.session_factory.client(service_name, region or scope.region, scope.sub_account_role_arn)

    def is_global_scope(self, scope: Scope) -> bool:
        """Master account in the default region; global listings run only there"""
        return scope.master and scope.region == self.default_region


@dataclass
class PaginatedQuery:
    """boto3 목록 조회의 lazy iterator

    Uses the operation's paginator when boto3 has one, a single call
    otherwise.

    Example:
        query = PaginatedQuery(ctx, scope, "ec2", "describe_volumes", "Volumes")
        for volume in query:
            ...
    """

    ctx: SourceContext
    scope: Scope
    service: str
    operation: str
    result_key: str
    params: dict[str, Any] = field(default_factory=dict)
    extract: Callable[[dict[str, Any]], Iterable[Any]] | None = None
    region: str | None = None  # services with a fixed endpoint region (pricing)

    def __iter__(self) -> Iterator[Any]:
        try:
            client = self.ctx.client(self.service, self.scope, self.region)
            if client.can_paginate(self.operation):
                pages = client.get_paginator(self.operation).paginate(**self.params)
            else:
                pages = iter([getattr(client, self.operation)(**self.params)])

            for page in pages:
                items = self.extract(page) if self.extract else page.get(self.result_key, [])
                yield from items
        except (ClientError, BotoCoreError) as e:
            raise SourceFetchError(
                f"Couldn't fetch '{self.result_key}' from {self.service} with {self.scope}",
                scope=self.scope,
                cause=e,
            ) from e
