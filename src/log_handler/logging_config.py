# src/log_handler/logging_config.py
import logging
import queue
import os
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from typing import Optional, Union, Dict

# Global variable to ensure we only configure logging once
_logging_configured = False
_log_listener = None

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    return logging.getLevelName(value.upper())


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    module_levels: Optional[Dict[str, Union[int, str]]] = None
) -> QueueListener:
    """
    Configure non-blocking logging for the balancer service.

    Records go through a QueueHandler on the root logger so that a balance
    cycle never waits on console or file I/O.

    Args:
        log_level: Root level, as a number or a name such as "DEBUG"
        log_file: Optional rotating log file
        module_levels: Per-logger levels, e.g. {"src.balancer": "DEBUG"}

    Returns:
        The started QueueListener; stop it with shutdown_logging()
    """
    global _logging_configured, _log_listener

    if _logging_configured and _log_listener is not None:
        return _log_listener

    if log_file and os.path.dirname(log_file):
        os.makedirs(os.path.dirname(log_file), exist_ok=True)

    log_queue = queue.Queue()
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_file:
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    listener = QueueListener(
        log_queue, *handlers, respect_handler_level=True
    )

    root_logger = logging.getLogger()

    # Remove any existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    root_logger.addHandler(QueueHandler(log_queue))
    root_logger.setLevel(_level(log_level))

    for module_name, level in (module_levels or {}).items():
        logging.getLogger(module_name).setLevel(_level(level))

    listener.start()

    _logging_configured = True
    _log_listener = listener

    return listener


def get_logger(name: str) -> logging.Logger:
    """Get the logger for a module, typically called with __name__."""
    return logging.getLogger(name)


def shutdown_logging():
    """Flush and stop the queue listener started by setup_logging()."""
    global _log_listener, _logging_configured

    if _log_listener is not None:
        _log_listener.stop()
        _log_listener = None
        _logging_configured = False
