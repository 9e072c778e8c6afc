"""Power-line telemetry classification and grid status propagation."""

__version__ = "0.1.0"
