from .registry import (
    ThrottleRegistry,
    RedisLockRegistry,
    parse_throttle_identifier,
)
from .resolver import OverrideResolver, throttle_group

__all__ = [
    'ThrottleRegistry',
    'RedisLockRegistry',
    'parse_throttle_identifier',
    'OverrideResolver',
    'throttle_group'
]
