# src/balancer/auto_balancer.py
import logging
from datetime import datetime, timezone
from typing import Dict, TYPE_CHECKING

from src.supervisor.supervisor import Supervisor
from .allocator import allocate_workers
from .convergence import ConvergenceEngine
from .exceptions import ConfigurationInconsistencyError, RegistryUnavailableError
from .models import BalanceReport

if TYPE_CHECKING:
    from src.metrics.accessor import MetricsAccessor
    from src.throttle.resolver import OverrideResolver

logger = logging.getLogger(__name__)


class AutoBalancer:
    """Balances the workers of a supervisor across its queues."""

    def __init__(
        self,
        metrics: "MetricsAccessor",
        resolver: "OverrideResolver",
        engine: ConvergenceEngine = None,
    ):
        self.metrics = metrics
        self.resolver = resolver
        self.engine = engine or ConvergenceEngine()

    def validate(self, supervisor: Supervisor) -> None:
        options = supervisor.options
        pool_count = len(supervisor.process_pools)

        if options.min_processes > options.max_processes:
            raise ConfigurationInconsistencyError(
                f"Supervisor {options.name}: min_processes ({options.min_processes}) "
                f"exceeds max_processes ({options.max_processes})"
            )
        if pool_count == 0:
            raise ConfigurationInconsistencyError(f"Supervisor {options.name} has no pools")
        if pool_count * options.min_processes > options.max_processes:
            raise ConfigurationInconsistencyError(
                f"Supervisor {options.name}: {pool_count} pools of at least "
                f"{options.min_processes} processes exceed max_processes ({options.max_processes})"
            )

    async def balance(self, supervisor: Supervisor) -> BalanceReport:
        """Run one balance cycle for the supervisor.

        Metrics and configuration errors abort the cycle before any pool is
        scaled. An unreachable lock registry only drops the overrides.
        """
        self.validate(supervisor)

        options = supervisor.options
        report = BalanceReport(supervisor=options.name)

        pools = supervisor.pools_by_queue()
        report.estimates = await self.metrics.estimate_all(pools.keys(), options.connection)

        report.allocations = allocate_workers(
            report.estimates, options, len(supervisor.process_pools)
        )
        report.overrides, report.overrides_degraded = await self._overrides()

        supervisor.prune_terminating_processes()
        running_total = supervisor.total_process_count()

        for queue, ideal in report.allocations.items():
            decision = self.engine.converge(
                pools[queue],
                ideal,
                report.overrides.get(queue),
                running_total,
                options,
                len(supervisor.process_pools),
            )
            running_total = decision.running_total
            report.decisions.append(decision)

        report.finished_at = datetime.now(timezone.utc)
        logger.debug(
            f"Balanced supervisor {options.name}: {len(report.scaled_queues())} pools scaled, "
            f"{running_total} processes"
        )
        return report

    async def _overrides(self):
        try:
            overrides: Dict[str, int] = await self.resolver.resolve_overrides()
            return overrides, False
        except RegistryUnavailableError as e:
            logger.warning(f"Throttle overrides unavailable, using allocations only: {str(e)}")
            return {}, True
