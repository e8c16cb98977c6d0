# src/supervisor/supervisor.py
import logging
from typing import Dict, List, Optional

from .models import SupervisorOptions, ProcessPool
from .pool import RayProcessPool

logger = logging.getLogger(__name__)


class Supervisor:
    """A set of process pools sharing one process budget."""

    def __init__(self, options: SupervisorOptions, process_pools: Optional[List[ProcessPool]] = None):
        self.options = options
        self.process_pools: List[ProcessPool] = list(process_pools or [])
        logger.info(
            f"Supervisor {options.name} initialized with {len(self.process_pools)} pools"
        )

    @property
    def name(self) -> str:
        return self.options.name

    def add_pool(self, queue: str) -> ProcessPool:
        """Create a Ray-backed pool for the queue and start its minimum processes."""
        pool = RayProcessPool(queue, connection=self.options.connection, supervisor=self.name)
        pool.scale(self.options.min_processes)
        self.process_pools.append(pool)
        return pool

    def pools_by_queue(self) -> Dict[str, ProcessPool]:
        return {pool.queue(): pool for pool in self.process_pools}

    def total_process_count(self) -> int:
        return sum(pool.total_process_count() for pool in self.process_pools)

    def prune_terminating_processes(self) -> None:
        for pool in self.process_pools:
            pool.prune_terminating_processes()

    def terminate(self) -> None:
        logger.info(f"Terminating supervisor {self.name}")
        for pool in self.process_pools:
            pool.terminate()
