from .models import SupervisorOptions, ProcessPool
from .pool import RayProcessPool
from .supervisor import Supervisor

__all__ = [
    'SupervisorOptions',
    'ProcessPool',
    'RayProcessPool',
    'Supervisor'
]

__version__ = '1.0.0'
