# src/api/__init__.py
from .models import PoolStatus, SupervisorStatusResponse
from .router import router
from .exceptions import ReportNotFoundError, BalanceConflictError, MetricsUnavailableHTTPError

__all__ = [
    'PoolStatus',
    'SupervisorStatusResponse',
    'router',
    'ReportNotFoundError',
    'BalanceConflictError',
    'MetricsUnavailableHTTPError'
]
