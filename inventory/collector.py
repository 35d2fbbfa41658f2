"""
inventory/collector.py - 수집 및 sweep 엔진

사이클 1회:
    1. 활성화된 리전과 후보 계정 조회
    2. 접근 검증에 실패한 계정 제외
    3. 설정된 최상위 엔티티 타입마다 순서대로:
       - refresh run 시작
       - 모든 scope(계정 바깥, 리전 안쪽)에 대해 해당 타입과 연관 타입의
         레코드를 파서를 거쳐 배처에 넣고, 한도에 도달하면 part를 flush
       - 남은 레코드 flush
       - run sweep (part가 0개면 생략)

실패하면 그 시점에서 사이클을 중단합니다. 실패 전에 sweep된 run은 그대로
유지되고, 도달하지 못한 타입은 이번 사이클에서 sweep되지 않습니다.
isolate_entity_failures가 켜져 있으면 치명적이지 않은 실패는 해당 타입만 건너뜁니다.

Usage:
    collector = InventoryCollector(config, IngressApiClient(config.ingress_url))
    outcome = collector.collect_cycle()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from core.aws.accounts import AccountInfo, list_accounts
from core.aws.errors import ErrorCategory, categorize_error
from core.aws.session import SessionFactory
from core.config import CollectorConfig
from core.region.availability import filter_regions, get_available_regions

from .batcher import EntityBatcher
from .metrics import CollectorMetrics
from .refresh import InventoryUploader, RefreshRun, RunAllocator
from .registry import EntityRegistry, default_registry
from .scheduler import CycleOutcome, CycleStatus, PollScheduler
from .scope import Scope, enumerate_scopes
from .sources.base import SourceContext
from .sweep import SweepCoordinator
from .validator import AccountValidator

logger = logging.getLogger(__name__)


def outcome_status(category: ErrorCategory) -> CycleStatus:
    """Cycle status of an error category"""
    if category is ErrorCategory.CONFIGURATION:
        return CycleStatus.FATAL
    if category is ErrorCategory.ACCESS_DENIED:
        return CycleStatus.ACCESS_DENIED
    return CycleStatus.TRANSIENT


class InventoryCollector:
    """소스 하나의 수집 및 sweep 엔진

    Attributes:
        config: collector configuration
        uploader: inventory store adapter
        session_factory: boto3 session factory
        registry: entity handlers
        metrics: metrics sink
    """

    def __init__(
        self,
        config: CollectorConfig,
        uploader: InventoryUploader,
        session_factory: SessionFactory | None = None,
        registry: EntityRegistry | None = None,
        metrics: CollectorMetrics | None = None,
    ):
        self.config = config
        self.uploader = uploader
        self.session_factory = session_factory or SessionFactory(config.access_key_id, config.secret_access_key)
        self.registry = registry or default_registry()
        self.registry.validate(config.entity_types)
        self.metrics = metrics or CollectorMetrics()

        self.allocator = RunAllocator()
        self.sweeper = SweepCoordinator(uploader, config.inventory_name, config.schema_name)
        self.validator = AccountValidator(self.session_factory, config.sub_account_role)
        self.context = SourceContext(self.session_factory, config.default_region)

    # =========================================================================
    # Cycle
    # =========================================================================

    def list_regions(self) -> list[str]:
        session = self.session_factory.base_session(self.config.default_region)
        regions = get_available_regions(session, self.config.default_region)
        return filter_regions(regions, self.config.regions)

    def list_accounts(self) -> list[AccountInfo]:
        return list_accounts(self.session_factory, self.config.default_region)

    def valid_accounts(self, accounts: Sequence[AccountInfo]) -> list[AccountInfo]:
        return self.validator.filter_accounts(self.config.default_region, accounts)

    def build_scopes(self) -> list[Scope]:
        """Scopes of one pass: enabled regions x accounts passing validation"""
        regions = self.list_regions()
        accounts = self.valid_accounts(self.list_accounts())
        logger.info("Collecting from %d account(s) in %d region(s)", len(accounts), len(regions))
        return enumerate_scopes(regions, accounts, self.config.sub_account_role)

    def collect_cycle(self) -> CycleOutcome:
        """Run one full pass over every configured entity type

        Never raises; failures are returned as the outcome.
        """
        runs: list[RefreshRun] = []
        first_failure: CycleOutcome | None = None

        try:
            self.session_factory.clear()
            scopes = self.build_scopes()

            for entity_type in self.config.entity_types:
                run = self.begin_run(entity_type)
                runs.append(run)
                try:
                    self.process_entity(entity_type, scopes, run)
                except Exception as e:
                    failure = self._failure(e, runs)
                    if failure.status is CycleStatus.FATAL or not self.config.isolate_entity_failures:
                        raise
                    logger.error("Collecting %s failed, continuing with the next entity type: %s", entity_type, e)
                    first_failure = first_failure or failure
        except Exception as e:
            outcome = self._failure(e, runs)
            logger.error("Collection cycle aborted (%s): %s", outcome.category, e)
            return outcome

        if first_failure is not None:
            return first_failure
        return CycleOutcome(CycleStatus.SUCCESS, runs=runs)

    def _failure(self, error: Exception, runs: list[RefreshRun]) -> CycleOutcome:
        category = categorize_error(error)
        return CycleOutcome(outcome_status(category), error=error, runs=runs, category=category.value)

    # =========================================================================
    # Run
    # =========================================================================

    def begin_run(self, entity_type: str) -> RefreshRun:
        return self.allocator.begin_run(entity_type, self.registry.seed_collections(entity_type))

    def process_entity(self, entity_type: str, scopes: Sequence[Scope], run: RefreshRun | None = None) -> RefreshRun:
        """Collect, save and sweep one top-level entity type over all scopes

        Args:
            entity_type: top-level entity type
            scopes: scopes of the pass
            run: run to fill (a new one is started when omitted)

        Returns:
            the finished run
        """
        run = run or self.begin_run(entity_type)
        logger.info("Collecting %s with :refresh_state_uuid => '%s'...", entity_type, run.refresh_state_uuid)

        batcher = EntityBatcher()
        related = self.registry.related(entity_type)
        for scope in scopes:
            batcher = self._save_entity(entity_type, run, batcher, scope)
            for related_type in related:
                batcher = self._save_entity(related_type, run, batcher, scope)

        # residual records
        self._flush(run, batcher)

        logger.info(
            "Collecting %s with :refresh_state_uuid => '%s'...Complete - Parts [%d]",
            entity_type,
            run.refresh_state_uuid,
            run.total_parts,
        )
        self.sweeper.sweep(run)
        return run

    def _save_entity(self, entity_type: str, run: RefreshRun, batcher: EntityBatcher, scope: Scope) -> EntityBatcher:
        """Stream one type's records of a scope into the batcher

        Returns:
            the batcher to continue with (a fresh one after a flush)
        """
        handler = self.registry.get(entity_type)
        limit = self.config.limit_for(entity_type)

        for record in handler.collect(self.context, scope):
            batcher.record()
            handler.parse(batcher, record, scope)
            if batcher.size() >= limit:
                self._flush(run, batcher)
                batcher = batcher.reset()
        return batcher

    def _flush(self, run: RefreshRun, batcher: EntityBatcher) -> None:
        part = run.flush(batcher, self.uploader, self.config.inventory_name, self.config.schema_name)
        if part is not None:
            self.metrics.record_parts(run.entity_type, part.parts_written)

    # =========================================================================
    # Scheduling
    # =========================================================================

    def scheduler(self, stop_event=None) -> PollScheduler:
        """Poll scheduler running this collector's cycles"""
        return PollScheduler(
            self.collect_cycle,
            standalone_mode=self.config.standalone_mode,
            poll_time=self.config.poll_time,
            metrics=self.metrics,
            stop_event=stop_event,
        )
