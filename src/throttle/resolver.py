# src/throttle/resolver.py
import logging
from collections import Counter
from typing import Dict

from .registry import ThrottleRegistry

logger = logging.getLogger(__name__)


def throttle_group(identifier: str) -> str:
    """Group an identifier by its first two dash-separated segments.

    ``ws-42-job7`` belongs to ``ws-42``; ``ws-42`` is its own group.
    """
    return "-".join(identifier.split("-")[:2])


class OverrideResolver:
    """Turns active throttle locks into forced worker counts per queue."""

    def __init__(self, registry: ThrottleRegistry):
        self.registry = registry

    async def resolve_overrides(self) -> Dict[str, int]:
        """Map each throttle group to the number of distinct identifiers in it.

        Raises RegistryUnavailableError when the registry cannot be read.
        """
        identifiers = await self.registry.list_active_throttle_identifiers()
        overrides = dict(Counter(throttle_group(identifier) for identifier in identifiers))
        if overrides:
            logger.debug(f"Throttle overrides: {overrides}")
        return overrides
