"""
Severity classification of power-line readings.

Canonical band table (boundaries are inclusive on the NORMAL side):

    voltage    NORMAL 220..240    WARNING 210..245    CRITICAL outside 210..245
    current    NORMAL <= 12       WARNING <= 15       CRITICAL > 15
    vibration  NORMAL <= 0.5      WARNING <= 0.8      CRITICAL > 0.8

The alert rules in ``linesense.alerts`` use 16 A as their line-break current;
this table uses 15 A, matching the topology propagator.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from linesense.shared.models import Reading, Severity

RATED_CURRENT_A = 20.0


@dataclass(frozen=True)
class ThresholdBand:
    """NORMAL/WARNING limits for one metric.

    A value is NORMAL inside [normal_low, normal_high], WARNING inside
    [warning_low, warning_high], CRITICAL otherwise. A None bound is open.
    """
    normal_high: float
    warning_high: float
    normal_low: Optional[float] = None
    warning_low: Optional[float] = None

    def classify(self, value: float) -> Severity:
        if _within(value, self.normal_low, self.normal_high):
            return Severity.NORMAL
        if _within(value, self.warning_low, self.warning_high):
            return Severity.WARNING
        return Severity.CRITICAL


def _within(value: float, low: Optional[float], high: float) -> bool:
    if low is not None and value < low:
        return False
    return value <= high


@dataclass(frozen=True)
class ThresholdTable:
    voltage: ThresholdBand
    current: ThresholdBand
    vibration: ThresholdBand


DEFAULT_THRESHOLDS = ThresholdTable(
    voltage=ThresholdBand(normal_low=220.0, normal_high=240.0, warning_low=210.0, warning_high=245.0),
    current=ThresholdBand(normal_high=12.0, warning_high=15.0),
    vibration=ThresholdBand(normal_high=0.5, warning_high=0.8),
)

# Same table with the 16 A line-break current used by the alert rules
ALERT_ALIGNED_THRESHOLDS = ThresholdTable(
    voltage=DEFAULT_THRESHOLDS.voltage,
    current=ThresholdBand(normal_high=12.0, warning_high=16.0),
    vibration=DEFAULT_THRESHOLDS.vibration,
)


@dataclass(frozen=True)
class Classification:
    """Per-metric severities plus their maximum."""
    voltage: Severity
    current: Severity
    vibration: Severity
    combined: Severity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "voltage": self.voltage.label,
            "current": self.current.label,
            "vibration": self.vibration.label,
            "combined": self.combined.label,
        }


def classify(reading: Reading, thresholds: ThresholdTable = DEFAULT_THRESHOLDS) -> Classification:
    """Classify a reading against a threshold table. Pure and thread-safe."""
    voltage = thresholds.voltage.classify(reading.voltage)
    current = thresholds.current.classify(reading.current)
    vibration = thresholds.vibration.classify(reading.vibration)
    return Classification(
        voltage=voltage,
        current=current,
        vibration=vibration,
        combined=max(voltage, current, vibration),
    )


def line_status(reading: Reading) -> Severity:
    """Status of the power-line indicator.

    Only current and voltage count here: a line break (> 15 A) is CRITICAL,
    voltage outside 220..240 V is WARNING. Vibration is ignored.
    """
    if reading.current > 15.0:
        return Severity.CRITICAL
    if reading.voltage < 220.0 or reading.voltage > 240.0:
        return Severity.WARNING
    return Severity.NORMAL


def load_percentage(reading: Reading, rated_current: float = RATED_CURRENT_A) -> float:
    """Line load as a percentage of rated current, clamped to 0..100."""
    if rated_current <= 0:
        raise ValueError("rated_current must be positive")
    return max(0.0, min(100.0, reading.current / rated_current * 100.0))
