# src/settings.py
import json
import os
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from src.supervisor.models import SupervisorOptions


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class BalancerSettings(BaseModel):
    redis_url: str = "redis://localhost:6379/0"
    connections: Dict[str, str] = Field(default_factory=dict)
    key_prefix: str = ""
    throttle_namespace: str = "horizon"
    throttle_infix: str = ":key:"
    scan_count: int = Field(default=1000, ge=1)
    metrics_timeout: float = Field(default=5.0, gt=0)

    supervisor: str = "supervisor-1"
    connection: str = "default"
    queues: List[str] = Field(default_factory=lambda: ["default"])
    min_processes: int = Field(default=1, ge=0)
    max_processes: int = Field(default=10, ge=0)
    balance_max_shift: int = Field(default=1, ge=1)
    auto_scaling: bool = True
    balance_cooldown: float = Field(default=3.0, ge=0.0)
    balance_interval: float = Field(default=1.0, gt=0)

    ray_address: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/queue_balancer.log"

    @classmethod
    def from_env(cls) -> "BalancerSettings":
        """Build settings from ``BALANCER_*`` environment variables."""
        defaults = cls()
        env = os.environ
        queues = env.get("BALANCER_QUEUES")

        return cls(
            redis_url=env.get("REDIS_URL", defaults.redis_url),
            connections=json.loads(env.get("BALANCER_CONNECTIONS", "{}")),
            key_prefix=env.get("BALANCER_KEY_PREFIX", defaults.key_prefix),
            throttle_namespace=env.get("BALANCER_THROTTLE_NAMESPACE", defaults.throttle_namespace),
            throttle_infix=env.get("BALANCER_THROTTLE_INFIX", defaults.throttle_infix),
            scan_count=int(env.get("BALANCER_SCAN_COUNT", defaults.scan_count)),
            metrics_timeout=float(env.get("BALANCER_METRICS_TIMEOUT", defaults.metrics_timeout)),
            supervisor=env.get("BALANCER_SUPERVISOR", defaults.supervisor),
            connection=env.get("BALANCER_CONNECTION", defaults.connection),
            queues=[q.strip() for q in queues.split(",") if q.strip()] if queues else defaults.queues,
            min_processes=int(env.get("BALANCER_MIN_PROCESSES", defaults.min_processes)),
            max_processes=int(env.get("BALANCER_MAX_PROCESSES", defaults.max_processes)),
            balance_max_shift=int(env.get("BALANCER_MAX_SHIFT", defaults.balance_max_shift)),
            auto_scaling=_env_bool("BALANCER_AUTO_SCALING", defaults.auto_scaling),
            balance_cooldown=float(env.get("BALANCER_COOLDOWN", defaults.balance_cooldown)),
            balance_interval=float(env.get("BALANCER_INTERVAL", defaults.balance_interval)),
            ray_address=env.get("RAY_ADDRESS", defaults.ray_address),
            log_level=env.get("BALANCER_LOG_LEVEL", defaults.log_level),
            log_file=env.get("BALANCER_LOG_FILE", defaults.log_file),
        )

    def supervisor_options(self) -> SupervisorOptions:
        return SupervisorOptions(
            name=self.supervisor,
            connection=self.connection,
            min_processes=self.min_processes,
            max_processes=self.max_processes,
            balance_max_shift=self.balance_max_shift,
            auto_scaling=self.auto_scaling,
            balance_cooldown=self.balance_cooldown,
        )
