# src/balancer/allocator.py
import logging
from typing import Dict, Mapping

from src.supervisor.models import SupervisorOptions
from .exceptions import ConfigurationInconsistencyError
from .models import ClearTimeEstimate

logger = logging.getLogger(__name__)


def allocate_workers(
    estimates: Mapping[str, ClearTimeEstimate],
    options: SupervisorOptions,
    pool_count: int,
) -> Dict[str, float]:
    """Compute the ideal, unrounded worker count for every queue.

    Exactly one policy applies to the whole supervisor:

    - auto-scaling disabled: the budget is split evenly over the pools;
    - some queue has a non-zero time to clear: each queue gets a share of
      ``max_processes`` proportional to its time to clear;
    - no timing signal at all: a queue with any backlog gets
      ``max_processes`` and an empty one gets ``min_processes``.

    The result is ordered by ascending allocation; ties keep pool order.
    """
    if not options.auto_scaling_enabled():
        if pool_count <= 0:
            raise ConfigurationInconsistencyError(
                f"Supervisor {options.name} has no pools to split {options.max_processes} processes over"
            )
        share = options.max_processes / pool_count
        allocations = {queue: share for queue in estimates}
    else:
        total_time = sum(estimate.time for estimate in estimates.values())

        if total_time > 0:
            allocations = {
                queue: (estimate.time / total_time) * options.max_processes
                for queue, estimate in estimates.items()
            }
        else:
            allocations = {
                queue: float(options.max_processes if estimate.size > 0 else options.min_processes)
                for queue, estimate in estimates.items()
            }

    return dict(sorted(allocations.items(), key=lambda item: item[1]))
