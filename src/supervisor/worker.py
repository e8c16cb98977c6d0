# src/supervisor/worker.py
from datetime import datetime, timezone
from typing import Dict, Any, Optional

import ray

from src.log_handler.logging_config import get_logger

logger = get_logger(__name__)


@ray.remote
class QueueWorker:
    """Ray actor standing in for one worker process bound to a queue."""

    def __init__(self, worker_id: str, queue: str, connection: str = "default"):
        self.worker_id = worker_id
        self.queue = queue
        self.connection = connection
        self.started_at = datetime.now(timezone.utc)
        self.stopping_at: Optional[datetime] = None
        logger.info(f"Worker {worker_id} started for queue {connection}:{queue}")

    def get_status(self) -> Dict[str, Any]:
        """Get worker status."""
        return {
            "worker_id": self.worker_id,
            "queue": self.queue,
            "connection": self.connection,
            "started_at": self.started_at.isoformat(),
            "is_stopping": self.stopping_at is not None,
        }

    def stop(self) -> Dict[str, Any]:
        """Ask the worker to finish up and exit."""
        if self.stopping_at is None:
            self.stopping_at = datetime.now(timezone.utc)
            logger.info(f"Worker {self.worker_id} stopping")
        return self.get_status()
