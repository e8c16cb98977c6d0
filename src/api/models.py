# src/api/models.py
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field

from src.supervisor.models import SupervisorOptions


class PoolStatus(BaseModel):
    queue: str
    processes: int
    terminating: int = 0


class SupervisorStatusResponse(BaseModel):
    name: str
    options: SupervisorOptions
    total_processes: int
    pools: List[PoolStatus] = Field(default_factory=list)
    balancer: Dict[str, Any] = Field(default_factory=dict)
    last_error: Optional[str] = None
