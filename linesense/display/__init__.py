"""Terminal display of the live grid state."""

from .terminal_monitor import TerminalMonitor


def main():
    """Entry point for the monitor with the terminal display attached."""
    from linesense.monitor.config import load_config
    from linesense.monitor.service import run_monitor
    from linesense.shared.logging import display_log_level, setup_logging

    config = load_config()
    setup_logging(display_log_level(config.log_level))

    monitor = TerminalMonitor()
    try:
        run_monitor(config, listener=monitor.update_display)
    finally:
        monitor.cleanup()


__all__ = ["TerminalMonitor", "main"]
