# src/api/router.py
import logging
from fastapi import APIRouter, Depends
from typing import TYPE_CHECKING

from .models import PoolStatus, SupervisorStatusResponse
from .exceptions import (
    ReportNotFoundError,
    BalanceConflictError,
    MetricsUnavailableHTTPError,
)
from src.balancer.exceptions import ConfigurationInconsistencyError, MetricsUnavailableError
from src.balancer.models import BalanceReport

# Import for type checking only
if TYPE_CHECKING:
    from src.balancer.scheduler import BalanceScheduler

logger = logging.getLogger(__name__)

router = APIRouter()


def get_scheduler():
    from src.main import app_state

    return app_state.scheduler


@router.get("/supervisor", response_model=SupervisorStatusResponse)
async def get_supervisor(scheduler: "BalanceScheduler" = Depends(get_scheduler)):
    """
    Current process counts of every pool under the supervisor
    """
    supervisor = scheduler.supervisor
    pools = [
        PoolStatus(
            queue=pool.queue(),
            processes=pool.total_process_count(),
            terminating=getattr(pool, "terminating_process_count", lambda: 0)(),
        )
        for pool in supervisor.process_pools
    ]
    return SupervisorStatusResponse(
        name=supervisor.name,
        options=supervisor.options,
        total_processes=supervisor.total_process_count(),
        pools=pools,
        balancer=scheduler.stats(),
        last_error=scheduler.last_error,
    )


@router.get("/supervisor/balance", response_model=BalanceReport)
async def get_last_balance(scheduler: "BalanceScheduler" = Depends(get_scheduler)):
    """
    Report of the last completed balance cycle
    """
    if scheduler.last_report is None:
        raise ReportNotFoundError("No balance cycle has completed yet")
    return scheduler.last_report


@router.post("/supervisor/balance", response_model=BalanceReport)
async def run_balance(scheduler: "BalanceScheduler" = Depends(get_scheduler)):
    """
    Run a balance cycle now
    """
    try:
        report = await scheduler.run_once()
    except MetricsUnavailableError as e:
        raise MetricsUnavailableHTTPError(str(e))
    except ConfigurationInconsistencyError as e:
        raise BalanceConflictError(str(e))

    if report is None:
        raise BalanceConflictError("A balance cycle is already in progress")

    logger.info(f"Manual balance cycle completed for {scheduler.supervisor.name}")
    return report
