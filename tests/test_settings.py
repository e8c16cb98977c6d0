import logging

from src.log_handler.logging_config import setup_logging, shutdown_logging
from src.settings import BalancerSettings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/1")
    monkeypatch.setenv("BALANCER_CONNECTIONS", '{"jobs": "redis://jobs:6379/0"}')
    monkeypatch.setenv("BALANCER_QUEUES", "emails, reports,,ws-1")
    monkeypatch.setenv("BALANCER_MAX_PROCESSES", "20")
    monkeypatch.setenv("BALANCER_MAX_SHIFT", "4")
    monkeypatch.setenv("BALANCER_AUTO_SCALING", "false")
    monkeypatch.setenv("BALANCER_COOLDOWN", "0.5")

    settings = BalancerSettings.from_env()

    assert settings.redis_url == "redis://cache:6379/1"
    assert settings.connections == {"jobs": "redis://jobs:6379/0"}
    assert settings.queues == ["emails", "reports", "ws-1"]

    options = settings.supervisor_options()
    assert options.max_processes == 20
    assert options.balance_max_shift == 4
    assert options.auto_scaling_enabled() is False
    assert options.balance_cooldown == 0.5
    assert options.min_processes == 1


def test_settings_defaults(monkeypatch):
    for name in ("REDIS_URL", "BALANCER_QUEUES", "BALANCER_AUTO_SCALING", "BALANCER_CONNECTIONS"):
        monkeypatch.delenv(name, raising=False)

    settings = BalancerSettings.from_env()

    assert settings.queues == ["default"]
    assert settings.auto_scaling is True
    assert settings.throttle_infix == ":key:"


def test_setup_logging_is_idempotent(tmp_path):
    log_file = str(tmp_path / "logs" / "balancer.log")
    root_logger = logging.getLogger()
    saved_handlers, saved_level = list(root_logger.handlers), root_logger.level
    try:
        listener = setup_logging("DEBUG", log_file=log_file, module_levels={"ray": "WARNING"})
        assert setup_logging() is listener
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("ray").level == logging.WARNING
        assert (tmp_path / "logs").is_dir()
    finally:
        shutdown_logging()
        root_logger.handlers = saved_handlers
        root_logger.setLevel(saved_level)
