import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from src.api import router
from src.balancer import AutoBalancer, BalanceScheduler
from src.log_handler.logging_config import setup_logging, get_logger, shutdown_logging
from src.metrics import MetricsAccessor, RedisConnections, RedisBacklogSource, RedisRuntimeMetrics
from src.ray_init import initialize_ray
from src.settings import BalancerSettings
from src.supervisor import Supervisor
from src.throttle import OverrideResolver, RedisLockRegistry


settings = BalancerSettings.from_env()

log_listener = setup_logging(
    log_level=settings.log_level,
    log_file=settings.log_file,
    module_levels={"ray": "WARNING"},
)
logger = get_logger(__name__)


# Global state management
class AppState:
    def __init__(self):
        self.supervisor: Optional[Supervisor] = None
        self.scheduler: Optional[BalanceScheduler] = None
        self.redis: Optional[RedisConnections] = None


app_state = AppState()


def build_scheduler(settings: BalancerSettings, redis: RedisConnections) -> BalanceScheduler:
    """Wire the supervisor, its pools and the balancer from settings."""
    supervisor = Supervisor(settings.supervisor_options())
    for queue in settings.queues:
        supervisor.add_pool(queue)

    metrics = MetricsAccessor(
        RedisBacklogSource(redis, prefix=settings.key_prefix),
        RedisRuntimeMetrics(redis, prefix=settings.key_prefix),
        connection=settings.connection,
        timeout=settings.metrics_timeout,
    )
    resolver = OverrideResolver(
        RedisLockRegistry(
            redis,
            namespace=settings.throttle_namespace,
            lock_infix=settings.throttle_infix,
            scan_count=settings.scan_count,
        )
    )
    return BalanceScheduler(
        supervisor, AutoBalancer(metrics, resolver), interval=settings.balance_interval
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Starts the Ray-backed pools and the balance loop, and tears them down
    on shutdown.
    """
    logger.info(f"Starting queue balancer for supervisor {settings.supervisor}")
    initialize_ray(address=settings.ray_address)

    app_state.redis = RedisConnections(settings.connections, default_url=settings.redis_url)
    app_state.scheduler = build_scheduler(settings, app_state.redis)
    app_state.supervisor = app_state.scheduler.supervisor
    await app_state.scheduler.start()

    logger.info("Application startup complete")
    yield

    logger.info("Initiating graceful shutdown...")

    shutdown_timeout = 30  # seconds
    try:
        await asyncio.wait_for(app_state.scheduler.stop(), timeout=shutdown_timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Balance loop shutdown timed out after {shutdown_timeout}s")

    app_state.supervisor.terminate()
    await app_state.redis.close()
    logger.info("Application shutdown complete")

    # Ray lifecycle is managed separately
    shutdown_logging()


def create_app() -> FastAPI:
    """Creates and configures the FastAPI application"""
    app = FastAPI(
        title="Queue Balancer",
        description="Balances a supervisor's worker processes across its queues",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(router, prefix="/api/v1")
    return app


def run_app():
    """Runs the application with Uvicorn"""
    try:
        app = create_app()

        config = uvicorn.Config(
            app=app,
            host="0.0.0.0",
            port=8000,
            log_level="info",
            timeout_graceful_shutdown=30,
        )
        server = uvicorn.Server(config)
        server.run()
    except Exception as e:
        logger.error(f"Failed to start application: {str(e)}")
        raise


if __name__ == "__main__":
    run_app()
