# src/balancer/convergence.py
import logging
import math
from typing import Optional

from src.supervisor.models import SupervisorOptions, ProcessPool
from .models import PoolDecision

logger = logging.getLogger(__name__)


def desired_process_count(ideal: float, override: Optional[int] = None) -> int:
    """A throttle override replaces the ideal count; otherwise round it up."""
    if override is not None:
        return int(override)
    return int(math.ceil(ideal))


class ConvergenceEngine:
    """Moves one pool at a time toward its target by bounded steps."""

    def step(
        self,
        current: int,
        current_total: int,
        desired: int,
        options: SupervisorOptions,
        pool_count: int,
    ) -> int:
        """Return the next process count for a pool.

        ``current_total`` is the live process count of the whole supervisor.
        Scaling up never takes more than the remaining budget or
        ``balance_max_shift``, and always leaves ``min_processes`` for every
        other pool. A pool already above that ceiling gives back at most
        ``balance_max_shift``. Scaling down never drops below
        ``min_processes`` or moves further than ``balance_max_shift``.
        """
        if desired > current:
            # No headroom left means hold
            max_up_shift = max(0, min(
                options.max_processes - current_total,
                options.balance_max_shift,
            ))
            new_count = min(
                current + max_up_shift,
                options.max_processes - (pool_count - 1) * options.min_processes,
                desired,
            )
            # A pool above the reserve ceiling gives back at most one shift per step
            return max(new_count, current - options.balance_max_shift)

        if desired < current:
            max_down_shift = min(
                current_total - options.min_processes,
                options.balance_max_shift,
            )
            return max(
                current - max_down_shift,
                options.min_processes,
                desired,
            )

        return current

    def converge(
        self,
        pool: ProcessPool,
        ideal: float,
        override: Optional[int],
        running_total: int,
        options: SupervisorOptions,
        pool_count: int,
    ) -> PoolDecision:
        """Step a pool toward its target and commit the result.

        ``running_total`` is the supervisor-wide count carried over from the
        pools already handled in this cycle; the returned decision carries it
        forward with this pool's change applied.
        """
        pool.prune_terminating_processes()

        current = pool.total_process_count()
        desired = desired_process_count(ideal, override)
        committed = self.step(current, running_total, desired, options, pool_count)

        if committed != current:
            logger.info(
                f"Scaling {options.name}:{pool.queue()} from {current} to {committed} "
                f"(desired {desired}, ideal {ideal:.2f}"
                f"{', override ' + str(override) if override is not None else ''})"
            )
            pool.scale(committed)

        return PoolDecision(
            queue=pool.queue(),
            ideal=ideal,
            override=override,
            desired=desired,
            previous=current,
            committed=committed,
            running_total=running_total + (committed - current),
        )
