# src/balancer/scheduler.py
import asyncio
import logging
import time
from typing import Optional, Dict, Any

from src.supervisor.supervisor import Supervisor
from .auto_balancer import AutoBalancer
from .exceptions import BalancerError
from .models import BalanceReport

logger = logging.getLogger(__name__)


class BalanceScheduler:
    """Triggers balance cycles for one supervisor, one cycle at a time."""

    def __init__(self, supervisor: Supervisor, balancer: AutoBalancer, interval: float = 1.0):
        self.supervisor = supervisor
        self.balancer = balancer
        self.interval = interval
        self.last_report: Optional[BalanceReport] = None
        self.last_error: Optional[str] = None
        self.last_balance_time: Optional[float] = None
        self.cycles_completed = 0
        self.cycles_failed = 0
        self.running = False
        self._lock = asyncio.Lock()
        self._loop_task: Optional[asyncio.Task] = None

    @property
    def is_balancing(self) -> bool:
        return self._lock.locked()

    async def start(self) -> None:
        """Start the periodic balance loop."""
        if self.running:
            logger.warning(f"Balance loop for {self.supervisor.name} already running")
            return
        self.running = True
        self._loop_task = asyncio.create_task(self._balance_loop())
        logger.info(f"Balance loop started for supervisor {self.supervisor.name}")

    async def _balance_loop(self):
        while self.running:
            if self._cooled_down():
                try:
                    await self.run_once()
                except BalancerError:
                    # Already logged; the next tick retries from committed state
                    pass
                except Exception as e:
                    logger.exception(f"Unexpected error in balance loop: {str(e)}")
            await asyncio.sleep(self.interval)

    def _cooled_down(self) -> bool:
        if self.last_balance_time is None:
            return True
        cooldown = self.supervisor.options.balance_cooldown
        return time.monotonic() - self.last_balance_time >= cooldown

    async def run_once(self) -> Optional[BalanceReport]:
        """Run a single balance cycle, or return None if one is in flight."""
        if self._lock.locked():
            logger.debug(f"Balance cycle for {self.supervisor.name} already in flight, skipping")
            return None

        async with self._lock:
            self.last_balance_time = time.monotonic()
            try:
                report = await self.balancer.balance(self.supervisor)
            except BalancerError as e:
                self.cycles_failed += 1
                self.last_error = str(e)
                logger.error(f"Balance cycle for {self.supervisor.name} abandoned: {str(e)}")
                raise

            self.cycles_completed += 1
            self.last_error = None
            self.last_report = report
            return report

    async def stop(self) -> None:
        """Stop the balance loop."""
        logger.info(f"Stopping balance loop for supervisor {self.supervisor.name}")
        self.running = False

        if self._loop_task is not None:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None

    def stats(self) -> Dict[str, Any]:
        return {
            "supervisor": self.supervisor.name,
            "running": self.running,
            "balancing": self.is_balancing,
            "cycles_completed": self.cycles_completed,
            "cycles_failed": self.cycles_failed,
            "last_error": self.last_error,
            "total_processes": self.supervisor.total_process_count(),
        }
