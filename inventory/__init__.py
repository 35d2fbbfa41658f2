"""
inventory - 수집 및 sweep 엔진

아키텍처:
    inventory/
    ├── sources/        # 엔티티 타입별 lazy boto3 레코드 스트림
    ├── parsers/        # 원시 레코드 -> 정규화된 엔티티
    ├── types.py        # 엔티티 데이터클래스, lazy 참조
    ├── batcher.py      # 한도가 있는 엔티티 배처
    ├── refresh.py      # refresh run과 part
    ├── sweep.py        # sweep 코디네이터
    ├── scope.py        # scope 열거
    ├── validator.py    # 계정 접근 검증
    ├── registry.py     # 엔티티 타입 -> 핸들러 테이블
    ├── ingress.py      # 인벤토리 저장소 HTTP 클라이언트
    ├── metrics.py      # prometheus 메트릭
    ├── scheduler.py    # 폴링 스케줄러
    └── collector.py    # 수집 사이클 1회

Usage:
    from core.config import CollectorConfig
    from inventory import IngressApiClient, InventoryCollector

    config = CollectorConfig.from_env()
    uploader = IngressApiClient(config.ingress_url, source=config.source)
    InventoryCollector(config, uploader).scheduler().run()
"""

from .batcher import Collection, EntityBatcher
from .collector import InventoryCollector
from .ingress import IngressApiClient
from .metrics import CollectorMetrics
from .refresh import InventoryUploader, Part, RefreshRun, RunAllocator
from .registry import EntityHandler, EntityRegistry, EntityType, default_registry
from .scheduler import CycleOutcome, CycleStatus, PollScheduler, SchedulerState
from .scope import Scope, build_scope, enumerate_scopes
from .sweep import SweepCoordinator
from .validator import AccountValidator

__all__: list[str] = [
    "AccountValidator",
    "Collection",
    "CollectorMetrics",
    "CycleOutcome",
    "CycleStatus",
    "EntityBatcher",
    "EntityHandler",
    "EntityRegistry",
    "EntityType",
    "IngressApiClient",
    "InventoryCollector",
    "InventoryUploader",
    "Part",
    "PollScheduler",
    "RefreshRun",
    "RunAllocator",
    "SchedulerState",
    "Scope",
    "SweepCoordinator",
    "build_scope",
    "default_registry",
    "enumerate_scopes",
]
