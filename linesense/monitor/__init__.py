"""Grid Monitor Service - polls readings and maintains grid status."""

from .config import MonitorConfig, load_config
from .service import GridMonitorService, GridState


def main():
    """Entry point for the grid monitor service."""
    from linesense.shared.logging import setup_logging
    from .service import run_monitor

    config = load_config()
    setup_logging(config.log_level)

    run_monitor(config)


__all__ = ["GridMonitorService", "GridState", "MonitorConfig", "load_config", "main"]
