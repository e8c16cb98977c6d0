# src/metrics/accessor.py
import asyncio
import logging
import math
from typing import Dict, Iterable, Optional

from src.balancer.exceptions import MetricsUnavailableError
from src.balancer.models import ClearTimeEstimate
from .sources import BacklogSource, RuntimeMetrics

logger = logging.getLogger(__name__)


class MetricsAccessor:
    """Derives the time needed to clear each queue from backlog and runtime data."""

    def __init__(
        self,
        backlog: BacklogSource,
        runtimes: RuntimeMetrics,
        connection: str = "default",
        timeout: Optional[float] = 5.0,
    ):
        self.backlog = backlog
        self.runtimes = runtimes
        self.connection = connection
        self.timeout = timeout

    async def estimate(self, queue: str, connection: Optional[str] = None) -> ClearTimeEstimate:
        """Return the backlog size and the estimated time to clear it."""
        try:
            size = await asyncio.wait_for(
                self.backlog.ready_count(connection or self.connection, queue), timeout=self.timeout
            )
            runtime = await asyncio.wait_for(
                self.runtimes.runtime_for_queue(queue), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise MetricsUnavailableError(f"Timed out reading metrics for queue {queue}")
        except Exception as e:
            raise MetricsUnavailableError(f"Failed to read metrics for queue {queue}: {str(e)}") from e

        if (
            size is None or size < 0
            or runtime is None or runtime < 0 or not math.isfinite(runtime)
        ):
            raise MetricsUnavailableError(
                f"Invalid metrics for queue {queue}: size={size}, runtime={runtime}"
            )

        time = int(size) * float(runtime)
        if not math.isfinite(time):
            raise MetricsUnavailableError(f"Clear time for queue {queue} is not finite")

        return ClearTimeEstimate(size=int(size), time=time)

    async def estimate_all(
        self, queues: Iterable[str], connection: Optional[str] = None
    ) -> Dict[str, ClearTimeEstimate]:
        estimates = {}
        for queue in queues:
            estimates[queue] = await self.estimate(queue, connection)
            logger.debug(f"Queue {queue}: {estimates[queue]}")
        return estimates
