"""Pure classification and risk scoring of readings."""

from .classifier import (
    DEFAULT_THRESHOLDS,
    Classification,
    ThresholdBand,
    ThresholdTable,
    classify,
    line_status,
    load_percentage,
)
from .risk import MAINTENANCE_PLANS, MaintenancePlan, assess_risk

__all__ = [
    "DEFAULT_THRESHOLDS",
    "MAINTENANCE_PLANS",
    "Classification",
    "MaintenancePlan",
    "ThresholdBand",
    "ThresholdTable",
    "assess_risk",
    "classify",
    "line_status",
    "load_percentage",
]
