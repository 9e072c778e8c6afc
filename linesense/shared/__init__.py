"""Shared utilities for linesense services."""

from .config import get_config_path, load_yaml_config
from .exceptions import (
    ConfigurationError,
    FeedUnavailable,
    LineSenseError,
    MalformedReading,
)
from .logging import setup_logging
from .models import Alert, MaintenancePriority, Reading, RiskAssessment, Severity
from .mqtt import MQTTConfig

__all__ = [
    "Alert",
    "ConfigurationError",
    "FeedUnavailable",
    "LineSenseError",
    "MalformedReading",
    "MaintenancePriority",
    "MQTTConfig",
    "Reading",
    "RiskAssessment",
    "Severity",
    "get_config_path",
    "load_yaml_config",
    "setup_logging",
]
