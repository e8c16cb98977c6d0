# src/supervisor/models.py
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class SupervisorOptions(BaseModel):
    name: str = "default"
    connection: str = "default"
    min_processes: int = Field(default=1, ge=0)
    max_processes: int = Field(default=10, ge=0)
    balance_max_shift: int = Field(default=1, ge=1)
    auto_scaling: bool = True
    balance_cooldown: float = Field(default=3.0, ge=0.0)

    def auto_scaling_enabled(self) -> bool:
        return self.auto_scaling


@runtime_checkable
class ProcessPool(Protocol):
    """Control surface the balancer needs from a pool of worker processes."""

    def queue(self) -> str:
        ...

    def total_process_count(self) -> int:
        ...

    def scale(self, target: int) -> None:
        ...

    def prune_terminating_processes(self) -> None:
        ...

    def terminate(self) -> None:
        ...
