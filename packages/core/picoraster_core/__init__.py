"""Core app services for settings, logging, and frame performance."""

from .config import AppConfig, config_path, load_config, save_config
from .logging_setup import configure_logging, get_logger, install_crash_hooks, uninstall_crash_hooks
from .performance import BudgetStatus, PerformanceMonitor, PerformanceTargets

__all__ = [
    "AppConfig",
    "BudgetStatus",
    "PerformanceMonitor",
    "PerformanceTargets",
    "config_path",
    "configure_logging",
    "get_logger",
    "install_crash_hooks",
    "load_config",
    "save_config",
    "uninstall_crash_hooks",
]
