"""Per-tick recoloring of the pole/wire graph."""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from linesense.shared.models import Reading, Severity
from .graph import Topology, TopologySnapshot
from .policy import LocalityPolicy

logger = logging.getLogger(__name__)

LINE_BREAK_CURRENT = 15.0
MINOR_CURRENT = 12.0


@dataclass(frozen=True)
class FaultFlags:
    """Which fault and minor conditions a reading raises."""
    line_break: bool
    voltage_fault: bool
    vibration_fault: bool
    minor_current: bool
    minor_voltage: bool
    minor_vibration: bool

    @property
    def any_fault(self) -> bool:
        return self.line_break or self.voltage_fault or self.vibration_fault

    @property
    def any_minor(self) -> bool:
        return self.minor_current or self.minor_voltage or self.minor_vibration

    @classmethod
    def from_reading(cls, reading: Reading) -> "FaultFlags":
        voltage, current, vibration = reading.voltage, reading.current, reading.vibration
        return cls(
            line_break=current > LINE_BREAK_CURRENT,
            voltage_fault=voltage < 210.0 or voltage > 245.0,
            vibration_fault=vibration > 0.8,
            minor_current=MINOR_CURRENT < current <= LINE_BREAK_CURRENT,
            minor_voltage=(voltage < 220.0 or voltage > 240.0) and 210.0 <= voltage <= 245.0,
            minor_vibration=0.5 < vibration <= 0.8,
        )


class TopologyStatusPropagator:
    """Recolors designated poles from the latest reading.

    Statuses are recomputed from scratch each tick, so any status can follow
    any other. The new snapshot is built completely before it replaces the
    old one; ``snapshot()`` never returns a partly updated graph.
    """

    def __init__(self, topology: Topology, policy: Optional[LocalityPolicy] = None):
        self.topology = topology
        self.policy = policy or LocalityPolicy()
        self.policy.check_against(topology)
        self._snapshot = topology.snapshot()
        self._lock = threading.Lock()

    def node_statuses(self, reading: Reading) -> Dict[int, Severity]:
        """Statuses of the non-clear nodes for a reading."""
        flags = FaultFlags.from_reading(reading)
        if flags.any_fault:
            return {node_id: Severity.CRITICAL for node_id in self.policy.fault_node_ids}
        if flags.any_minor:
            return {node_id: Severity.WARNING for node_id in self.policy.warning_node_ids}
        return {}

    def propagate(self, reading: Reading) -> TopologySnapshot:
        """Recompute every node and wire for ``reading`` and publish the result."""
        statuses = self.node_statuses(reading)
        snapshot = self.topology.snapshot(statuses)
        with self._lock:
            previous = self._snapshot
            self._snapshot = snapshot
        if snapshot.worst() != previous.worst():
            logger.info(f"Grid status changed: {previous.worst().node_label} -> {snapshot.worst().node_label}")
        return snapshot

    def snapshot(self) -> TopologySnapshot:
        return self._snapshot
