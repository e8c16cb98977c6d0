# src/balancer/models.py
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


class ClearTimeEstimate(BaseModel):
    size: int = Field(default=0, ge=0)
    time: float = Field(default=0.0, ge=0.0)  # milliseconds


class PoolDecision(BaseModel):
    queue: str
    ideal: float
    override: Optional[int] = None
    desired: int
    previous: int
    committed: int
    running_total: int

    @computed_field
    @property
    def scaled(self) -> bool:
        return self.committed != self.previous


class BalanceReport(BaseModel):
    supervisor: str
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    estimates: Dict[str, ClearTimeEstimate] = Field(default_factory=dict)
    allocations: Dict[str, float] = Field(default_factory=dict)
    overrides: Dict[str, int] = Field(default_factory=dict)
    overrides_degraded: bool = False
    decisions: List[PoolDecision] = Field(default_factory=list)

    def scaled_queues(self) -> List[str]:
        return [decision.queue for decision in self.decisions if decision.scaled]
