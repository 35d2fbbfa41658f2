"""
inventory/scheduler.py - 폴링 스케줄러

수집 사이클을 반복 실행합니다. 사이클마다 CycleOutcome을 받아 보고하고,
실패는 메트릭에 기록한 뒤 대기(standalone 모드)하거나 종료(single-shot 모드)합니다.
FATAL 결과는 두 모드 모두에서 스케줄러를 종료합니다.

중지 플래그는 threading.Event이며 사이클 경계에서만 확인합니다.
중지 요청은 대기 중인 스케줄러를 깨우지만 실행 중인 사이클을 중단하지는 않습니다.

상태 전이:
    IDLE -> RUNNING -> SLEEPING -> RUNNING -> ... -> STOPPED
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from .metrics import CollectorMetrics
from .refresh import RefreshRun

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


class CycleStatus(Enum):
    """사이클 결과 분류"""

    SUCCESS = "success"
    ACCESS_DENIED = "access_denied"
    TRANSIENT = "transient"
    FATAL = "fatal"


@dataclass
class CycleOutcome:
    """수집 사이클 1회의 결과

    Attributes:
        status: result class
        error: exception that ended the cycle (None on success)
        runs: refresh runs started in the cycle
        category: error category reported to the metrics
    """

    status: CycleStatus
    error: Exception | None = None
    runs: list[RefreshRun] = field(default_factory=list)
    category: str = ""

    @property
    def ok(self) -> bool:
        return self.status is CycleStatus.SUCCESS

    @property
    def swept(self) -> list[str]:
        """Entity types whose run was swept"""
        return [run.entity_type for run in self.runs if run.swept]


class PollScheduler:
    """사이클 루프

    Attributes:
        cycle_fn: runs one cycle and returns its outcome
        standalone_mode: loop until stopped (False = single cycle)
        poll_time: seconds slept between cycles
        metrics: failure metrics sink
        stop_event: stop flag, shareable with signal handlers
    """

    def __init__(
        self,
        cycle_fn: Callable[[], CycleOutcome],
        standalone_mode: bool = True,
        poll_time: float = 30,
        metrics: CollectorMetrics | None = None,
        stop_event: threading.Event | None = None,
    ):
        self.cycle_fn = cycle_fn
        self.standalone_mode = standalone_mode
        self.poll_time = poll_time
        self.metrics = metrics or CollectorMetrics()
        self.stop_event = stop_event or threading.Event()
        self.state = SchedulerState.IDLE
        self.cycles = 0
        self.last_outcome: CycleOutcome | None = None

    @property
    def finished(self) -> bool:
        return self.stop_event.is_set()

    def stop(self) -> None:
        """Request a stop; takes effect at the next cycle boundary"""
        self.stop_event.set()

    def run(self) -> CycleOutcome | None:
        """Run cycles until stopped

        Returns:
            outcome of the last cycle (None when stopped before the first one)
        """
        while not self.finished:
            self.state = SchedulerState.RUNNING
            outcome = self._run_cycle()
            self.last_outcome = outcome
            self._report(outcome)

            if outcome.status is CycleStatus.FATAL or not self.standalone_mode:
                self.stop()
                break

            self.state = SchedulerState.SLEEPING
            self.stop_event.wait(self.poll_time)

        self.state = SchedulerState.STOPPED
        return self.last_outcome

    def _run_cycle(self) -> CycleOutcome:
        self.cycles += 1
        started = time.monotonic()
        try:
            outcome = self.cycle_fn()
        except Exception as e:
            # cycle functions report their own failures; anything escaping is unclassified
            logger.exception("Unhandled error in cycle %d", self.cycles)
            outcome = CycleOutcome(CycleStatus.TRANSIENT, error=e, category="unknown")
        self.metrics.record_cycle(outcome.status.value, time.monotonic() - started)
        return outcome

    def _report(self, outcome: CycleOutcome) -> None:
        if outcome.status is CycleStatus.SUCCESS:
            logger.info("Cycle %d complete, swept %s", self.cycles, outcome.swept)
            return

        self.metrics.record_error(outcome.category or outcome.status.value)

        if outcome.status is CycleStatus.ACCESS_DENIED:
            logger.warning("Cycle %d aborted, access denied: %s", self.cycles, outcome.error)
        elif outcome.status is CycleStatus.TRANSIENT:
            logger.error("Cycle %d failed: %s", self.cycles, outcome.error)
        else:
            logger.critical("Cycle %d failed fatally, stopping: %s", self.cycles, outcome.error)
