# src/ray_init.py
import ray
from typing import Optional
from src.log_handler.logging_config import get_logger


logger = get_logger(__name__)


def initialize_ray(
    address: Optional[str] = None, namespace: str = "queue-balancer", **kwargs
) -> bool:
    """
    Start or join the Ray runtime hosting the pools' worker actors.

    Args:
        address: Optional Ray cluster address to connect to
        namespace: Ray namespace the worker actors are created in
        **kwargs: Additional parameters to pass to ray.init()

    Returns:
        bool: True if Ray was initialized here, False if it was already running
    """
    if ray.is_initialized():
        logger.info("Ray was already initialized externally")
        return False

    init_kwargs = {"ignore_reinit_error": True, "namespace": namespace}
    if address:
        init_kwargs["address"] = address
        logger.info(f"Connecting to Ray cluster at {address}")
    else:
        logger.info("Starting local Ray instance")
    init_kwargs.update(kwargs)

    try:
        ray.init(**init_kwargs)
    except Exception as e:
        logger.error(f"Failed to initialize Ray: {str(e)}")
        raise

    logger.info("Ray initialized successfully")
    return True
