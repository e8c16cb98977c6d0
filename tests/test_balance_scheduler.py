import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.balancer.exceptions import MetricsUnavailableError
from src.balancer.models import BalanceReport
from src.balancer.scheduler import BalanceScheduler


@pytest.fixture
def supervisor(make_supervisor):
    return make_supervisor({"a": 1, "b": 1}, min_processes=1, max_processes=4, balance_cooldown=0)


def balancer_returning(supervisor, side_effect=None):
    balancer = MagicMock()
    if side_effect is None:
        side_effect = lambda sup: BalanceReport(supervisor=sup.name)
    balancer.balance = AsyncMock(side_effect=side_effect)
    return balancer


@pytest.mark.asyncio
async def test_run_once_records_report(supervisor):
    scheduler = BalanceScheduler(supervisor, balancer_returning(supervisor))

    report = await scheduler.run_once()

    assert report is scheduler.last_report
    assert scheduler.cycles_completed == 1
    assert scheduler.stats()["total_processes"] == 2


@pytest.mark.asyncio
async def test_only_one_cycle_in_flight(supervisor):
    release = asyncio.Event()

    async def slow_balance(sup):
        await release.wait()
        return BalanceReport(supervisor=sup.name)

    balancer = balancer_returning(supervisor, slow_balance)
    scheduler = BalanceScheduler(supervisor, balancer)

    first = asyncio.create_task(scheduler.run_once())
    await asyncio.sleep(0)
    assert scheduler.is_balancing is True

    assert await scheduler.run_once() is None

    release.set()
    assert await first is not None
    assert balancer.balance.await_count == 1


@pytest.mark.asyncio
async def test_failed_cycle_is_reported_and_reraised(supervisor):
    balancer = balancer_returning(supervisor, MetricsUnavailableError("redis down"))
    scheduler = BalanceScheduler(supervisor, balancer)

    with pytest.raises(MetricsUnavailableError):
        await scheduler.run_once()

    assert scheduler.cycles_failed == 1
    assert scheduler.last_error == "redis down"
    assert scheduler.last_report is None
    assert scheduler.is_balancing is False


@pytest.mark.asyncio
async def test_loop_survives_failed_cycles(supervisor):
    balancer = balancer_returning(supervisor, MetricsUnavailableError("redis down"))
    scheduler = BalanceScheduler(supervisor, balancer, interval=0.01)

    await scheduler.start()
    await asyncio.sleep(0.1)
    await scheduler.stop()

    assert balancer.balance.await_count >= 2
    assert scheduler.running is False


@pytest.mark.asyncio
async def test_loop_respects_cooldown(make_supervisor):
    supervisor = make_supervisor({"a": 1}, balance_cooldown=60)
    balancer = balancer_returning(supervisor)
    scheduler = BalanceScheduler(supervisor, balancer, interval=0.01)

    await scheduler.start()
    await asyncio.sleep(0.1)
    await scheduler.stop()

    assert balancer.balance.await_count == 1
