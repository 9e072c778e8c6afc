"""Pole/wire topology and status propagation."""

from .graph import DEFAULT_TOPOLOGY_PATH, Edge, Node, Topology, TopologySnapshot, load_topology
from .policy import LocalityPolicy
from .propagator import FaultFlags, TopologyStatusPropagator

__all__ = [
    "DEFAULT_TOPOLOGY_PATH",
    "Edge",
    "FaultFlags",
    "LocalityPolicy",
    "Node",
    "Topology",
    "TopologySnapshot",
    "TopologyStatusPropagator",
    "load_topology",
]
