from .accessor import MetricsAccessor
from .sources import (
    BacklogSource,
    RuntimeMetrics,
    RedisConnections,
    RedisBacklogSource,
    RedisRuntimeMetrics,
)

__all__ = [
    'MetricsAccessor',
    'BacklogSource',
    'RuntimeMetrics',
    'RedisConnections',
    'RedisBacklogSource',
    'RedisRuntimeMetrics'
]
