# src/throttle/registry.py
import logging
import re
from typing import Optional, Protocol, Set

from redis.exceptions import RedisError

from src.balancer.exceptions import InvalidThrottleKeyError, RegistryUnavailableError
from src.metrics.sources import RedisConnections

logger = logging.getLogger(__name__)

THROTTLE_IDENTIFIER = re.compile(r"(?:^|(?<=:))(?:ws-|sp-)[^:]*(?=:)")


def parse_throttle_identifier(key: str) -> str:
    """Extract the lock identifier (``ws-...`` or ``sp-...``) from a registry key."""
    match = THROTTLE_IDENTIFIER.search(key)
    if not match:
        raise InvalidThrottleKeyError(f"Key {key!r} does not carry a throttle identifier")
    return match.group(0)


class ThrottleRegistry(Protocol):
    async def list_active_throttle_identifiers(self) -> Set[str]:
        ...


class RedisLockRegistry:
    """Discovers active throttle locks by scanning key names in Redis."""

    def __init__(
        self,
        connections: RedisConnections,
        namespace: str = "horizon",
        lock_infix: str = ":key:",
        connection: str = "default",
        scan_count: int = 1000,
    ):
        self.connections = connections
        self.namespace = namespace
        self.lock_infix = lock_infix
        self.connection = connection
        self.scan_count = scan_count

    @property
    def match_pattern(self) -> str:
        return f"*{self.namespace}*"

    async def list_active_throttle_identifiers(self) -> Set[str]:
        client = self.connections.connection(self.connection)
        identifiers: Set[str] = set()

        try:
            async for key in client.scan_iter(match=self.match_pattern, count=self.scan_count):
                identifier = self._identifier_for(key)
                if identifier is not None:
                    identifiers.add(identifier)
        except RedisError as e:
            raise RegistryUnavailableError(f"Failed to scan lock registry: {str(e)}") from e

        return identifiers

    def _identifier_for(self, key) -> Optional[str]:
        if isinstance(key, bytes):
            key = key.decode("utf-8", errors="replace")
        if self.lock_infix not in key:
            return None
        try:
            return parse_throttle_identifier(key)
        except InvalidThrottleKeyError as e:
            logger.debug(f"Skipping lock key: {str(e)}")
            return None
