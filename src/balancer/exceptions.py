# src/balancer/exceptions.py
class BalancerError(Exception):
    """Base exception for balancing errors"""
    pass


class MetricsUnavailableError(BalancerError):
    """Raised when a backlog or runtime query fails or times out"""
    pass


class RegistryUnavailableError(BalancerError):
    """Raised when the throttle lock registry cannot be queried"""
    pass


class InvalidThrottleKeyError(BalancerError):
    """Raised when a registry key does not carry a throttle identifier"""
    pass


class ConfigurationInconsistencyError(BalancerError):
    """Raised when supervisor options cannot produce a valid allocation"""
    pass
