from .allocator import allocate_workers
from .auto_balancer import AutoBalancer
from .convergence import ConvergenceEngine, desired_process_count
from .exceptions import (
    BalancerError,
    MetricsUnavailableError,
    RegistryUnavailableError,
    InvalidThrottleKeyError,
    ConfigurationInconsistencyError,
)
from .models import ClearTimeEstimate, PoolDecision, BalanceReport
from .scheduler import BalanceScheduler

__all__ = [
    'allocate_workers',
    'AutoBalancer',
    'ConvergenceEngine',
    'desired_process_count',
    'BalancerError',
    'MetricsUnavailableError',
    'RegistryUnavailableError',
    'InvalidThrottleKeyError',
    'ConfigurationInconsistencyError',
    'ClearTimeEstimate',
    'PoolDecision',
    'BalanceReport',
    'BalanceScheduler'
]

__version__ = '1.0.0'
