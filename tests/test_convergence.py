import pytest

from src.balancer.convergence import ConvergenceEngine, desired_process_count
from src.supervisor.models import SupervisorOptions


@pytest.fixture
def engine():
    return ConvergenceEngine()


@pytest.fixture
def options():
    return SupervisorOptions(min_processes=1, max_processes=10, balance_max_shift=5)


def test_desired_count_rounds_ideal_up():
    assert desired_process_count(0.48) == 1
    assert desired_process_count(9.52) == 10
    assert desired_process_count(3.0) == 3


def test_override_replaces_ideal():
    assert desired_process_count(9.52, override=2) == 2
    assert desired_process_count(0.1, override=4) == 4


def test_scale_up_is_bounded_by_max_shift(engine, options):
    assert engine.step(current=1, current_total=2, desired=10, options=options, pool_count=2) == 6


def test_scale_up_is_bounded_by_remaining_budget(engine, options):
    assert engine.step(current=5, current_total=8, desired=10, options=options, pool_count=2) == 7


def test_scale_up_reserves_minimum_for_other_pools(engine):
    options = SupervisorOptions(min_processes=2, max_processes=10, balance_max_shift=10)

    # Three other pools keep at least two processes each
    assert engine.step(current=2, current_total=8, desired=10, options=options, pool_count=4) == 4


def test_scale_up_stops_at_desired(engine, options):
    assert engine.step(current=2, current_total=3, desired=4, options=options, pool_count=2) == 4


def test_scale_up_without_headroom_holds(engine, options):
    assert engine.step(current=3, current_total=12, desired=6, options=options, pool_count=2) == 3


def test_scale_up_above_reserve_ceiling_gives_back_one_shift(engine):
    options = SupervisorOptions(min_processes=3, max_processes=10, balance_max_shift=1)

    # Ceiling is 10 - 2 * 3 = 4, but the pool only moves one process per step
    assert engine.step(current=10, current_total=10, desired=11, options=options, pool_count=3) == 9
    assert engine.step(current=5, current_total=9, desired=11, options=options, pool_count=3) == 4


def test_scale_down_is_bounded_by_max_shift(engine, options):
    assert engine.step(current=9, current_total=10, desired=1, options=options, pool_count=2) == 4


def test_scale_down_never_below_minimum(engine, options):
    assert engine.step(current=3, current_total=6, desired=0, options=options, pool_count=2) == 1


def test_scale_down_stops_at_desired(engine, options):
    assert engine.step(current=5, current_total=10, desired=3, options=options, pool_count=2) == 3


def test_equal_desired_keeps_current(engine, options):
    assert engine.step(current=4, current_total=8, desired=4, options=options, pool_count=2) == 4


@pytest.mark.parametrize("current,total,desired", [
    (1, 2, 10), (10, 10, 1), (1, 10, 1), (5, 5, 50), (6, 9, 0), (3, 3, 3),
])
def test_step_stays_in_bounds(engine, options, current, total, desired):
    new = engine.step(current, total, desired, options, pool_count=2)

    assert options.min_processes <= new <= options.max_processes
    assert abs(new - current) <= options.balance_max_shift


class RecordingPool:
    def __init__(self, queue, processes):
        self._queue = queue
        self.processes = processes
        self.scale_calls = []
        self.pruned = False

    def queue(self):
        return self._queue

    def total_process_count(self):
        return self.processes

    def scale(self, target):
        self.scale_calls.append(target)
        self.processes = target

    def prune_terminating_processes(self):
        self.pruned = True


def test_converge_commits_new_count(engine, options):
    pool = RecordingPool("a", 1)
    decision = engine.converge(pool, ideal=9.52, override=None, running_total=2,
                               options=options, pool_count=2)

    assert pool.pruned is True
    assert pool.scale_calls == [6]
    assert decision.desired == 10
    assert decision.previous == 1
    assert decision.committed == 6
    assert decision.running_total == 7
    assert decision.scaled is True


def test_converge_without_change_does_not_scale(engine, options):
    pool = RecordingPool("a", 3)
    decision = engine.converge(pool, ideal=2.4, override=None, running_total=6,
                               options=options, pool_count=2)

    assert pool.scale_calls == []
    assert decision.scaled is False
    assert decision.running_total == 6


def test_converge_uses_override(engine, options):
    pool = RecordingPool("ws-1", 4)
    decision = engine.converge(pool, ideal=9.0, override=2, running_total=8,
                               options=options, pool_count=2)

    assert decision.desired == 2
    assert pool.scale_calls == [2]
    assert decision.running_total == 6
