"""
tests/inventory/test_inventory_scheduler.py - inventory/scheduler.py 테스트
"""

import threading

from prometheus_client import CollectorRegistry

from inventory.metrics import CollectorMetrics
from inventory.scheduler import CycleOutcome, CycleStatus, PollScheduler, SchedulerState


def _metrics():
    return CollectorMetrics(CollectorRegistry())


def _errors(metrics, category):
    return metrics.get("aic_cycle_errors_total", {"category": category})


class TestSingleShot:
    """1회 실행 후 종료 테스트"""

    def test_runs_one_cycle_and_sets_stop_flag(self):
        calls = []
        scheduler = PollScheduler(lambda: calls.append(1) or CycleOutcome(CycleStatus.SUCCESS), standalone_mode=False)

        outcome = scheduler.run()

        assert calls == [1]
        assert outcome.ok
        assert scheduler.finished
        assert scheduler.state is SchedulerState.STOPPED

    def test_failed_cycle_still_exits_normally(self):
        metrics = _metrics()
        failure = CycleOutcome(CycleStatus.TRANSIENT, error=RuntimeError("x"), category="unknown")
        scheduler = PollScheduler(lambda: failure, standalone_mode=False, metrics=metrics)

        assert scheduler.run() is failure
        assert scheduler.cycles == 1
        assert _errors(metrics, "unknown") == 1

    def test_stopped_before_first_cycle(self):
        event = threading.Event()
        event.set()
        calls = []
        scheduler = PollScheduler(lambda: calls.append(1), standalone_mode=False, stop_event=event)

        assert scheduler.run() is None
        assert calls == []


class TestStandalone:
    """중지될 때까지 반복 테스트"""

    def test_loops_until_stop(self):
        scheduler = None
        outcomes = []

        def cycle():
            outcomes.append(CycleOutcome(CycleStatus.SUCCESS))
            if len(outcomes) == 3:
                scheduler.stop()
            return outcomes[-1]

        scheduler = PollScheduler(cycle, standalone_mode=True, poll_time=0)
        scheduler.run()

        assert scheduler.cycles == 3
        assert scheduler.state is SchedulerState.STOPPED

    def test_failures_do_not_stop_loop(self):
        metrics = _metrics()
        statuses = [CycleStatus.TRANSIENT, CycleStatus.ACCESS_DENIED, CycleStatus.SUCCESS]
        scheduler = None

        def cycle():
            status = statuses[scheduler.cycles - 1]
            if scheduler.cycles == len(statuses):
                scheduler.stop()
            return CycleOutcome(status, error=None if status is CycleStatus.SUCCESS else RuntimeError("x"))

        scheduler = PollScheduler(cycle, standalone_mode=True, poll_time=0, metrics=metrics)
        scheduler.run()

        assert scheduler.cycles == 3
        assert _errors(metrics, "transient") == 1
        assert _errors(metrics, "access_denied") == 1

    def test_fatal_stops_standalone(self):
        calls = []

        def cycle():
            calls.append(1)
            return CycleOutcome(CycleStatus.FATAL, error=ValueError("bad config"), category="configuration")

        scheduler = PollScheduler(cycle, standalone_mode=True, poll_time=0)
        outcome = scheduler.run()

        assert calls == [1]
        assert outcome.status is CycleStatus.FATAL

    def test_unhandled_exception_contained(self):
        metrics = _metrics()

        def cycle():
            raise RuntimeError("boom")

        scheduler = PollScheduler(cycle, standalone_mode=False, metrics=metrics)
        outcome = scheduler.run()

        assert outcome.status is CycleStatus.TRANSIENT
        assert isinstance(outcome.error, RuntimeError)
        assert _errors(metrics, "unknown") == 1

    def test_stop_wakes_sleeping_scheduler(self):
        scheduler = PollScheduler(lambda: CycleOutcome(CycleStatus.SUCCESS), standalone_mode=True, poll_time=60)
        thread = threading.Thread(target=scheduler.run)
        thread.start()

        while scheduler.cycles == 0:
            threading.Event().wait(0.01)
        scheduler.stop()
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert scheduler.cycles == 1

    def test_cycle_metrics_recorded(self):
        metrics = _metrics()
        scheduler = PollScheduler(lambda: CycleOutcome(CycleStatus.SUCCESS), standalone_mode=False, metrics=metrics)

        scheduler.run()

        assert metrics.get("aic_cycles_total", {"status": "success"}) == 1
        assert _errors(metrics, "success") == 0
