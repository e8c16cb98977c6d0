# src/metrics/sources.py
import logging
from typing import Dict, Optional, Protocol

import redis.asyncio as redis_async

logger = logging.getLogger(__name__)


class BacklogSource(Protocol):
    async def ready_count(self, connection: str, queue: str) -> int:
        ...


class RuntimeMetrics(Protocol):
    async def runtime_for_queue(self, queue: str) -> float:
        ...


class RedisConnections:
    """Lazily created redis.asyncio clients keyed by connection name."""

    def __init__(self, urls: Dict[str, str], default_url: str = "redis://localhost:6379/0"):
        self.urls = dict(urls)
        self.default_url = default_url
        self._clients: Dict[str, redis_async.Redis] = {}

    def connection(self, name: str = "default") -> redis_async.Redis:
        client = self._clients.get(name)
        if client is None:
            url = self.urls.get(name, self.default_url)
            client = redis_async.from_url(url, decode_responses=True)
            self._clients[name] = client
            logger.info(f"Opened redis connection '{name}' at {url}")
        return client

    async def close(self) -> None:
        for name, client in list(self._clients.items()):
            await client.aclose()
            del self._clients[name]


class RedisBacklogSource:
    """Counts jobs waiting on a Redis list queue."""

    def __init__(self, connections: RedisConnections, prefix: str = ""):
        self.connections = connections
        self.prefix = prefix

    def queue_key(self, queue: str) -> str:
        return f"{self.prefix}queues:{queue}"

    async def ready_count(self, connection: str, queue: str) -> int:
        client = self.connections.connection(connection)
        return int(await client.llen(self.queue_key(queue)))


class RedisRuntimeMetrics:
    """Reads the trailing average job runtime recorded for a queue."""

    def __init__(
        self,
        connections: RedisConnections,
        prefix: str = "",
        connection: str = "default",
        default: float = 0.0,
    ):
        self.connections = connections
        self.prefix = prefix
        self.connection = connection
        self.default = default

    def metrics_key(self, queue: str) -> str:
        return f"{self.prefix}queue:{queue}"

    async def runtime_for_queue(self, queue: str) -> float:
        client = self.connections.connection(self.connection)
        runtime: Optional[str] = await client.hget(self.metrics_key(queue), "runtime")
        if runtime is None:
            return self.default
        return float(runtime)
