"""Pole/wire graph of the monitored network."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import yaml

from linesense.shared.exceptions import ConfigurationError
from linesense.shared.models import Severity

logger = logging.getLogger(__name__)

DEFAULT_TOPOLOGY_PATH = Path(__file__).parent / "data" / "kerala.yaml"


@dataclass(frozen=True)
class Node:
    """A pole. Position is fixed; status is replaced on every propagation."""
    id: int
    name: str
    lat: float
    lng: float
    status: Severity = Severity.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "status": self.status.node_label,
        }


@dataclass(frozen=True)
class Edge:
    """A wire between two poles. Its status is always derived from its ends."""
    node_a: Node
    node_b: Node

    @property
    def status(self) -> Severity:
        return max(self.node_a.status, self.node_b.status)

    @property
    def key(self) -> str:
        return f"{self.node_a.id}-{self.node_b.id}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "node_a": self.node_a.id,
            "node_b": self.node_b.id,
            "status": self.status.node_label,
        }


@dataclass(frozen=True)
class TopologySnapshot:
    """Immutable view of every pole and wire after one propagation."""
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]
    _by_id: Dict[int, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_by_id", {node.id: node for node in self.nodes})

    def node(self, node_id: int) -> Node:
        return self._by_id[node_id]

    def status_of(self, node_id: int) -> Severity:
        return self._by_id[node_id].status

    def affected_nodes(self) -> Tuple[Node, ...]:
        """Nodes that are not clear."""
        return tuple(node for node in self.nodes if node.status > Severity.NORMAL)

    def affected_edges(self) -> Tuple[Edge, ...]:
        return tuple(edge for edge in self.edges if edge.status > Severity.NORMAL)

    def worst(self) -> Severity:
        return max((node.status for node in self.nodes), default=Severity.NORMAL)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


class Topology:
    """Fixed set of poles and the adjacency list of wires between them.

    Built once at startup and validated; nothing here changes afterwards.
    """

    def __init__(self, nodes: Iterable[Node], edges: Iterable[Tuple[int, int]], name: str = "custom"):
        self.name = name
        self.nodes: Tuple[Node, ...] = tuple(nodes)
        self.edges: Tuple[Tuple[int, int], ...] = tuple((int(a), int(b)) for a, b in edges)
        self._validate()
        self.node_ids = frozenset(node.id for node in self.nodes)

    def _validate(self) -> None:
        if not self.nodes:
            raise ConfigurationError(f"Topology '{self.name}' has no nodes")

        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise ConfigurationError(f"Duplicate node id {node.id} in topology '{self.name}'")
            seen.add(node.id)

        for a, b in self.edges:
            if a == b:
                raise ConfigurationError(f"Edge {a}-{b} connects a node to itself")
            missing = [node_id for node_id in (a, b) if node_id not in seen]
            if missing:
                raise ConfigurationError(f"Edge {a}-{b} references unknown node id(s) {missing}")

    def snapshot(self, statuses: Optional[Mapping[int, Severity]] = None) -> TopologySnapshot:
        """Build a snapshot with the given node statuses (missing ids are clear)."""
        statuses = statuses or {}
        nodes = {
            node.id: Node(
                id=node.id,
                name=node.name,
                lat=node.lat,
                lng=node.lng,
                status=statuses.get(node.id, Severity.NORMAL),
            )
            for node in self.nodes
        }
        edges = tuple(Edge(nodes[a], nodes[b]) for a, b in self.edges)
        return TopologySnapshot(nodes=tuple(nodes.values()), edges=edges)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Topology":
        """Create a topology from a mapping with 'nodes' and 'edges' lists."""
        try:
            nodes = [
                Node(
                    id=int(item["id"]),
                    name=str(item.get("name", f"Pole {item['id']}")),
                    lat=float(item["lat"]),
                    lng=float(item["lng"]),
                )
                for item in data.get("nodes") or []
            ]
            edges = [(pair[0], pair[1]) for pair in data.get("edges") or []]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed topology definition: {e!r}") from e
        return cls(nodes, edges, name=str(data.get("name", "custom")))


def load_topology(path: Optional[Union[str, Path]] = None) -> Topology:
    """Load a topology from YAML, defaulting to the bundled Kerala network.

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed.
    """
    path = Path(path) if path is not None else DEFAULT_TOPOLOGY_PATH
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read topology {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Topology {path} must be a mapping")

    topology = Topology.from_dict(data)
    logger.info(f"Loaded topology '{topology.name}': {len(topology.nodes)} nodes, {len(topology.edges)} edges")
    return topology
