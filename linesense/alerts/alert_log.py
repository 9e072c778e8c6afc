"""Bounded, most-recent-first alert history fed by threshold crossing rules."""

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from linesense.shared.exceptions import ConfigurationError
from linesense.shared.models import Alert, Reading, Severity

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 8


@dataclass(frozen=True)
class AlertRule:
    """One crossing condition and the alert it raises."""
    prefix: str
    title: str
    severity: Severity
    location: str
    condition: Callable[[Reading], bool]
    message: Callable[[Reading], str]


# Within a group only the first matching rule fires; every group is checked.
DEFAULT_RULES: Tuple[Tuple[AlertRule, ...], ...] = (
    (
        AlertRule(
            prefix="V",
            title="Critical Voltage Fault",
            severity=Severity.CRITICAL,
            location="Pole 1 - Kochi",
            condition=lambda r: r.voltage < 210.0 or r.voltage > 245.0,
            message=lambda r: f"Voltage reading: {r.voltage:.1f}V is outside safe range (210-245V)",
        ),
        AlertRule(
            prefix="V",
            title="Voltage Warning",
            severity=Severity.WARNING,
            location="Pole 1 - Kochi",
            condition=lambda r: r.voltage < 220.0 or r.voltage > 240.0,
            message=lambda r: f"Voltage reading: {r.voltage:.1f}V approaching limits",
        ),
    ),
    (
        AlertRule(
            prefix="C",
            title="Line Break Fault",
            severity=Severity.CRITICAL,
            location="Pole 3 - Kozhikode",
            condition=lambda r: r.current > 16.0,
            message=lambda r: (
                f"Current reading: {r.current:.1f}A exceeds maximum safe level - Line break detected"
            ),
        ),
        AlertRule(
            prefix="C",
            title="High Current Warning",
            severity=Severity.WARNING,
            location="Pole 2 - Thiruvananthapuram",
            condition=lambda r: r.current > 12.0,
            message=lambda r: f"Current reading: {r.current:.1f}A is elevated",
        ),
    ),
    (
        AlertRule(
            prefix="VIB",
            title="Structural Fault Alert",
            severity=Severity.CRITICAL,
            location="Pole 4 - Thrissur",
            condition=lambda r: r.vibration > 0.8,
            message=lambda r: f"High vibration detected: {r.vibration:.2f}g - Check for structural issues",
        ),
    ),
)


class AlertLog:
    """Ring buffer of alerts, newest first.

    Every matching rule produces a new alert on every tick; repeated fault
    conditions are not deduplicated, only evicted once the buffer is full.
    Readers get the whole history as a tuple that is replaced, never
    mutated, so a snapshot is always consistent.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        rules: Optional[Iterable[Iterable[AlertRule]]] = None,
    ):
        if capacity < 1:
            raise ConfigurationError(f"Alert capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.rules = tuple(tuple(group) for group in (rules if rules is not None else DEFAULT_RULES))
        self._alerts: Tuple[Alert, ...] = ()
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    def evaluate(self, reading: Reading) -> List[Alert]:
        """Build the alerts a reading triggers, without recording them."""
        alerts = []
        for group in self.rules:
            for rule in group:
                if rule.condition(reading):
                    alerts.append(Alert(
                        id=f"{rule.prefix}{next(self._sequence)}",
                        title=rule.title,
                        message=rule.message(reading),
                        severity=rule.severity,
                        location=rule.location,
                        timestamp=reading.timestamp,
                    ))
                    break
        return alerts

    def ingest(self, reading: Reading) -> Tuple[Alert, ...]:
        """Evaluate a reading and prepend whatever it triggers.

        Returns:
            The alerts raised by this reading, in rule order.
        """
        with self._lock:
            new_alerts = self.evaluate(reading)
            if new_alerts:
                self._alerts = (tuple(new_alerts) + self._alerts)[:self.capacity]
                for alert in new_alerts:
                    logger.info(f"{alert.severity.label.upper()} alert {alert.id}: {alert.title} ({alert.location})")
            return tuple(new_alerts)

    def snapshot(self) -> Tuple[Alert, ...]:
        """Current history, newest first, at most ``capacity`` entries."""
        return self._alerts

    def clear(self) -> None:
        with self._lock:
            self._alerts = ()

    def __len__(self) -> int:
        return len(self._alerts)
