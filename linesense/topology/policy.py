"""Locality policy: which poles may show a fault or a warning."""

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Mapping

from linesense.shared.exceptions import ConfigurationError
from .graph import Topology

# The line-break location of the demo network: Nemom and Kollam City
DEFAULT_FAULT_NODE_IDS = frozenset({3, 16})
# Paravur and Ernakulam
DEFAULT_WARNING_NODE_IDS = frozenset({17, 59})


@dataclass(frozen=True)
class LocalityPolicy:
    """Designated node sets for a single localized fault event.

    A grid-wide fault tick only turns ``fault_node_ids`` CRITICAL and a
    minor-condition tick only turns ``warning_node_ids`` WARNING; every other
    pole stays clear.
    """
    fault_node_ids: FrozenSet[int] = DEFAULT_FAULT_NODE_IDS
    warning_node_ids: FrozenSet[int] = DEFAULT_WARNING_NODE_IDS

    @classmethod
    def from_ids(cls, fault_node_ids: Iterable[int], warning_node_ids: Iterable[int]) -> "LocalityPolicy":
        try:
            return cls(
                fault_node_ids=frozenset(int(i) for i in fault_node_ids),
                warning_node_ids=frozenset(int(i) for i in warning_node_ids),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Designated node ids must be integers: {e}") from e

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LocalityPolicy":
        return cls.from_ids(
            data.get("fault_node_ids", DEFAULT_FAULT_NODE_IDS),
            data.get("warning_node_ids", DEFAULT_WARNING_NODE_IDS),
        )

    def check_against(self, topology: Topology) -> None:
        """Raise ConfigurationError if a designated id is not a node of ``topology``."""
        for label, ids in (("fault", self.fault_node_ids), ("warning", self.warning_node_ids)):
            unknown = sorted(ids - topology.node_ids)
            if unknown:
                raise ConfigurationError(
                    f"{label} node ids {unknown} are not in topology '{topology.name}'"
                )
