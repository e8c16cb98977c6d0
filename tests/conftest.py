import pytest
from unittest.mock import AsyncMock, MagicMock

from src.metrics.accessor import MetricsAccessor
from src.supervisor.models import SupervisorOptions
from src.supervisor.supervisor import Supervisor


class InMemoryPool:
    """Process pool double that records scale calls.

    With ``deferred=True`` a scale call only records the target, the way a
    real pool keeps reporting its old count until processes start or exit.
    """

    def __init__(self, queue, processes=1, deferred=False):
        self._queue = queue
        self.processes = processes
        self.deferred = deferred
        self.scale_calls = []
        self.prune_calls = 0
        self.terminated = False

    def queue(self):
        return self._queue

    def total_process_count(self):
        return self.processes

    def scale(self, target):
        self.scale_calls.append(target)
        if not self.deferred:
            self.processes = target

    def prune_terminating_processes(self):
        self.prune_calls += 1

    def terminate(self):
        self.terminated = True
        self.processes = 0


@pytest.fixture
def make_supervisor():
    """Build a supervisor over in-memory pools: make_supervisor({"a": 1}, max_processes=10)"""

    def _make(counts, deferred=False, **options):
        pools = [InMemoryPool(queue, count, deferred) for queue, count in counts.items()]
        return Supervisor(SupervisorOptions(**options), pools)

    return _make


@pytest.fixture
def make_metrics():
    """Metrics accessor over fixed backlog sizes and runtimes."""

    def _make(sizes, runtimes=None):
        runtimes = runtimes or {}
        backlog = MagicMock()
        backlog.ready_count = AsyncMock(side_effect=lambda connection, queue: sizes[queue])
        runtime_metrics = MagicMock()
        runtime_metrics.runtime_for_queue = AsyncMock(
            side_effect=lambda queue: runtimes.get(queue, 0.0)
        )
        return MetricsAccessor(backlog, runtime_metrics)

    return _make


@pytest.fixture
def make_resolver():
    """Override resolver double returning fixed overrides, or raising."""

    def _make(overrides=None, error=None):
        resolver = MagicMock()
        if error is not None:
            resolver.resolve_overrides = AsyncMock(side_effect=error)
        else:
            resolver.resolve_overrides = AsyncMock(return_value=dict(overrides or {}))
        return resolver

    return _make
