# src/supervisor/pool.py
from typing import Dict, Any

import ray
from ray.actor import ActorHandle

from src.log_handler.logging_config import get_logger

logger = get_logger(__name__)


class RayProcessPool:
    """Pool of Ray worker actors serving a single queue.

    ``scale`` only signals the desired state: new actors are created with
    ``.remote()`` and surplus actors are asked to stop, without waiting on
    either. Actors asked to stop are held as terminating until
    ``prune_terminating_processes`` sees their stop call finish.
    """

    def __init__(
        self,
        queue: str,
        connection: str = "default",
        supervisor: str = "default",
    ):
        self._queue = queue
        self.connection = connection
        self.supervisor = supervisor
        self.processes: Dict[str, ActorHandle] = {}
        self.terminating: Dict[str, Dict[str, Any]] = {}
        self._sequence = 0

    def queue(self) -> str:
        return self._queue

    def total_process_count(self) -> int:
        return len(self.processes)

    def terminating_process_count(self) -> int:
        return len(self.terminating)

    def scale(self, target: int) -> None:
        """Scale the pool to the given number of live processes."""
        target = max(0, int(target))
        current_count = len(self.processes)

        if target == current_count:
            return

        if target > current_count:
            self._start_processes(target - current_count)
        else:
            self._stop_processes(current_count - target)

        logger.info(
            f"Scaled pool {self.supervisor}:{self._queue} from {current_count} "
            f"to {len(self.processes)} processes"
        )

    def _start_processes(self, count: int) -> None:
        # Import worker class at runtime to avoid circular imports
        from src.supervisor.worker import QueueWorker

        for _ in range(count):
            self._sequence += 1
            worker_id = f"{self.supervisor}-{self._queue}-{self._sequence}"
            self.processes[worker_id] = QueueWorker.remote(
                worker_id, self._queue, self.connection
            )
            logger.debug(f"Added worker {worker_id}")

    def _stop_processes(self, count: int) -> None:
        # Oldest processes are retired first
        for worker_id in list(self.processes)[:count]:
            worker = self.processes.pop(worker_id)
            self.terminating[worker_id] = {
                "worker": worker,
                "stop_ref": worker.stop.remote(),
            }
            logger.debug(f"Worker {worker_id} marked as terminating")

    def prune_terminating_processes(self) -> None:
        """Forget terminating processes whose stop request has completed."""
        if not self.terminating:
            return

        refs = {entry["stop_ref"]: worker_id for worker_id, entry in self.terminating.items()}
        ready, _ = ray.wait(list(refs), num_returns=len(refs), timeout=0)

        for ref in ready:
            worker_id = refs[ref]
            entry = self.terminating.pop(worker_id)
            ray.kill(entry["worker"])
            logger.debug(f"Pruned terminated worker {worker_id}")

    def terminate(self) -> None:
        """Stop every process in the pool and kill the actors without waiting."""
        self.scale(0)
        for worker_id, entry in list(self.terminating.items()):
            ray.kill(entry["worker"])
            del self.terminating[worker_id]
        logger.info(f"Pool {self.supervisor}:{self._queue} terminated")
