"""Core data models for power-line telemetry."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Dict, Tuple

from .exceptions import MalformedReading

# Epoch values above this are taken to be milliseconds
_EPOCH_MS_CUTOFF = 1e11


class Severity(IntEnum):
    """Ordered severity shared by classifications, alerts and topology.

    Integer ordering gives "worse than" comparisons, so aggregation is
    just ``max()``.
    """
    NORMAL = 0
    WARNING = 1
    CRITICAL = 2

    @property
    def label(self) -> str:
        """Alert-facing label: normal / warning / critical."""
        return self.name.lower()

    @property
    def node_label(self) -> str:
        """Map-facing label used for poles and wires: clear / warning / fault."""
        return _NODE_LABELS[self]


_NODE_LABELS = {
    Severity.NORMAL: "clear",
    Severity.WARNING: "warning",
    Severity.CRITICAL: "fault",
}


def _parse_timestamp(value: Any) -> datetime:
    """Parse a feed timestamp (ISO text, epoch seconds or millis, or None)."""
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            seconds = value / 1000.0 if value > _EPOCH_MS_CUTOFF else float(value)
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {value!r}") from e
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise ValueError(f"Invalid timestamp: {value!r}")


def _as_float(data: Dict[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool):
        raise ValueError(f"{key} must be numeric, got {value!r}")
    try:
        return float(value)
    except OverflowError as e:
        raise ValueError(f"{key} out of range: {value!r}") from e


@dataclass(frozen=True)
class Reading:
    """A single voltage/current/vibration sample.

    Readings are immutable once created. ``validate()`` enforces the domain
    invariant (finite, non-negative values); construction does not, so that a
    bad sample can still be carried to the point where it is rejected.
    """
    voltage: float
    current: float
    vibration: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def validate(self) -> "Reading":
        """Return self if every metric is finite and non-negative.

        Raises:
            MalformedReading: If any metric is negative, NaN or infinite.
        """
        for name in ("voltage", "current", "vibration"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise MalformedReading(f"{name} out of domain: {value!r}")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reading":
        """Build a reading from a feed object.

        Raises:
            KeyError: If a metric is missing.
            ValueError: If a metric or the timestamp cannot be parsed.
            TypeError: If a metric has an unusable type.
        """
        return cls(
            voltage=_as_float(data, "voltage"),
            current=_as_float(data, "current"),
            vibration=_as_float(data, "vibration"),
            timestamp=_parse_timestamp(data.get("timestamp")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "voltage": self.voltage,
            "current": self.current,
            "vibration": self.vibration,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Alert:
    """An alert raised by a threshold crossing. Identity is ``id``."""
    id: str
    title: str
    message: str
    severity: Severity
    location: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "severity": self.severity.label,
            "location": self.location,
            "timestamp": self.timestamp.isoformat(),
        }


class MaintenancePriority(Enum):
    """Maintenance urgency buckets derived from the risk score."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RiskAssessment:
    """Predictive fault estimate for one reading."""
    line_break_probability: float
    maintenance_priority: MaintenancePriority
    priority_label: str
    estimated_time_to_failure: str
    recommended_actions: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_break_probability": self.line_break_probability,
            "maintenance_priority": self.maintenance_priority.value,
            "priority_label": self.priority_label,
            "estimated_time_to_failure": self.estimated_time_to_failure,
            "recommended_actions": list(self.recommended_actions),
        }

