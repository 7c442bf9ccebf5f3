"""
Fat-tree topology builder.

A k-ary fat-tree has k pods. Each pod holds k/2 aggregation and k/2 edge
switches, fully meshed with each other. (k/2)^2 core switches sit above the
pods, split into k/2 groups of k/2: the aggregation switch at position `a`
of every pod uplinks to each core switch of group `a`.

The switch graph is built once in the constructor and never changes after
that. The only later mutation is the node assignment, which is swapped in
as a whole (see assignment.assign_nodes).
"""

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

import numpy as np

from models import (
    NetworkMetrics,
    NodeHandle,
    StructuralAssumptionViolated,
    Switch,
    Tier,
)
from config import NetworkConfig
from metrics import compute_network_metrics, core_switch_count, validate_k


@dataclass(frozen=True)
class AssignmentSnapshot:
    """
    One published node assignment and the metrics computed for it.

    Readers that need several lookups to agree take the snapshot once and
    query it, instead of going back to the topology between lookups.
    """
    metrics: NetworkMetrics
    node_to_edge: Mapping[NodeHandle, Switch] = field(default_factory=lambda: MappingProxyType({}))
    nodes_by_edge: Mapping[Switch, Tuple[NodeHandle, ...]] = field(default_factory=lambda: MappingProxyType({}))

    def edge_switch_for(self, node: NodeHandle) -> Optional[Switch]:
        return self.node_to_edge.get(node)


class FatTreeTopology:
    def __init__(self, k: int, config: Optional[NetworkConfig] = None):
        validate_k(k)
        self.k = k
        self.half_k = k // 2
        self.num_pods = k
        self.config = config if config is not None else NetworkConfig()

        self.core_switches: List[Switch] = []
        self.aggregation_switches: List[Switch] = []
        self.edge_switches: List[Switch] = []
        self._by_name: Dict[str, Switch] = {}

        self._build()

        self._write_lock = threading.Lock()
        self._snapshot = AssignmentSnapshot(metrics=compute_network_metrics(self, connected_nodes=0))

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------

    def _build(self) -> None:
        k, half_k = self.k, self.half_k

        for i in range(core_switch_count(k)):
            self.core_switches.append(
                Switch(tier=Tier.CORE, index=i, position=i, port_count=k)
            )
        for pod in range(self.num_pods):
            for pos in range(half_k):
                self.aggregation_switches.append(
                    Switch(tier=Tier.AGGREGATION, index=pod * half_k + pos,
                           position=pos, port_count=k, pod=pod)
                )
        for pod in range(self.num_pods):
            for pos in range(half_k):
                self.edge_switches.append(
                    Switch(tier=Tier.EDGE, index=pod * half_k + pos,
                           position=pos, port_count=k, pod=pod)
                )

        uplinks: Dict[Switch, List[Switch]] = defaultdict(list)
        downlinks: Dict[Switch, List[Switch]] = defaultdict(list)

        # aggregation position a -> core group a
        for pod in range(self.num_pods):
            for a in range(half_k):
                agg = self.aggregation_switches[pod * half_k + a]
                for c in range(half_k):
                    core = self.core_switches[a * half_k + c]
                    uplinks[agg].append(core)
                    downlinks[core].append(agg)

        # full mesh inside each pod
        for pod in range(self.num_pods):
            for e in range(half_k):
                edge = self.edge_switches[pod * half_k + e]
                for a in range(half_k):
                    agg = self.aggregation_switches[pod * half_k + a]
                    uplinks[edge].append(agg)
                    downlinks[agg].append(edge)

        for switch in self.all_switches():
            switch.uplinks = tuple(uplinks[switch])
            switch.downlinks = tuple(downlinks[switch])
            switch.seal()
            self._by_name[switch.name] = switch

    def validate_structure(self) -> None:
        """Re-check the fat-tree invariants, raising on the first violation."""
        k, half_k = self.k, self.half_k

        if len(self.core_switches) != core_switch_count(k):
            raise StructuralAssumptionViolated(
                f"expected {core_switch_count(k)} core switches, found {len(self.core_switches)}"
            )
        for tier, switches in ((Tier.AGGREGATION, self.aggregation_switches),
                               (Tier.EDGE, self.edge_switches)):
            if len(switches) != k * half_k:
                raise StructuralAssumptionViolated(
                    f"expected {k * half_k} {tier.value} switches, found {len(switches)}"
                )

        for agg in self.aggregation_switches:
            if len(agg.uplinks) != half_k or len(set(agg.uplinks)) != half_k:
                raise StructuralAssumptionViolated(f"{agg.name} must uplink to {half_k} distinct core switches")
            if any(up.tier is not Tier.CORE for up in agg.uplinks):
                raise StructuralAssumptionViolated(f"{agg.name} has a non-core uplink")
            if len(agg.downlinks) != half_k or any(d.pod != agg.pod for d in agg.downlinks):
                raise StructuralAssumptionViolated(f"{agg.name} must have {half_k} downlinks inside pod {agg.pod}")

        for edge in self.edge_switches:
            if len(edge.uplinks) != half_k or any(up.pod != edge.pod for up in edge.uplinks):
                raise StructuralAssumptionViolated(f"{edge.name} must uplink to all {half_k} aggregation switches of pod {edge.pod}")

        for edge, nodes in self._snapshot.nodes_by_edge.items():
            if len(nodes) > half_k:
                raise StructuralAssumptionViolated(f"{edge.name} holds {len(nodes)} nodes, limit is {half_k}")

    # ------------------------------------------------------------------
    # assignment state
    # ------------------------------------------------------------------

    def publish_assignment(self, placement: List[Tuple[Switch, List[NodeHandle]]]) -> None:
        node_to_edge: Dict[NodeHandle, Switch] = {}
        nodes_by_edge: Dict[Switch, Tuple[NodeHandle, ...]] = {}
        for edge, nodes in placement:
            if edge.tier is not Tier.EDGE:
                raise StructuralAssumptionViolated(f"nodes can only attach to edge switches, not {edge.name}")
            nodes_by_edge[edge] = tuple(nodes)
            for node in nodes:
                node_to_edge[node] = edge

        snapshot = AssignmentSnapshot(
            metrics=compute_network_metrics(self, connected_nodes=len(node_to_edge)),
            node_to_edge=MappingProxyType(node_to_edge),
            nodes_by_edge=MappingProxyType(nodes_by_edge),
        )
        # writers are serialized; readers see the old or the new snapshot whole
        with self._write_lock:
            self._snapshot = snapshot

    @property
    def snapshot(self) -> AssignmentSnapshot:
        return self._snapshot

    @property
    def assignment(self) -> Mapping[NodeHandle, Switch]:
        return self._snapshot.node_to_edge

    @property
    def assigned_count(self) -> int:
        return len(self._snapshot.node_to_edge)

    @property
    def max_compute_nodes(self) -> int:
        return (self.k ** 3) // 4

    def edge_switch_for(self, node: NodeHandle) -> Optional[Switch]:
        return self._snapshot.edge_switch_for(node)

    def nodes_on_switch(self, switch: Union[Switch, str]) -> List[NodeHandle]:
        switch = self._resolve(switch)
        return list(self._snapshot.nodes_by_edge.get(switch, ()))

    # ------------------------------------------------------------------
    # structural queries
    # ------------------------------------------------------------------

    @property
    def metrics(self) -> NetworkMetrics:
        return self._snapshot.metrics

    def all_switches(self) -> List[Switch]:
        return self.core_switches + self.aggregation_switches + self.edge_switches

    def switches_by_tier(self, tier: Union[Tier, str]) -> List[Switch]:
        tier = Tier(tier)
        if tier is Tier.CORE:
            return list(self.core_switches)
        if tier is Tier.AGGREGATION:
            return list(self.aggregation_switches)
        return list(self.edge_switches)

    def switch(self, name: str) -> Switch:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"No switch named {name!r} in k={self.k} fat-tree") from None

    def pod_switches(self, pod: int) -> Tuple[List[Switch], List[Switch]]:
        if not 0 <= pod < self.num_pods:
            raise ValueError(f"pod must be in [0, {self.num_pods}), got {pod}")
        start = pod * self.half_k
        end = start + self.half_k
        return self.aggregation_switches[start:end], self.edge_switches[start:end]

    def pod_of(self, switch: Switch) -> int:
        """Pod of an aggregation or edge switch, derived from its tier-global index."""
        if switch.tier is Tier.CORE:
            raise ValueError(f"{switch.name} is a core switch and belongs to no pod")
        return switch.index // self.half_k

    def links(self) -> Iterator[Tuple[Switch, Switch]]:
        """Yield every switch-to-switch link as (lower tier, upper tier)."""
        for switch in self.aggregation_switches + self.edge_switches:
            for upper in switch.uplinks:
                yield switch, upper

    def adjacency_matrix(self) -> np.ndarray:
        """Symmetric 0/1 matrix over all_switches() order."""
        switches = self.all_switches()
        position = {s: i for i, s in enumerate(switches)}
        matrix = np.zeros((len(switches), len(switches)), dtype=np.uint8)
        for lower, upper in self.links():
            i, j = position[lower], position[upper]
            matrix[i, j] = 1
            matrix[j, i] = 1
        return matrix

    def _resolve(self, switch: Union[Switch, str]) -> Switch:
        if isinstance(switch, str):
            return self.switch(switch)
        if self._by_name.get(switch.name) is not switch:
            raise KeyError(f"{switch.name} does not belong to this topology")
        return switch

    def __repr__(self) -> str:
        return (
            f"FatTreeTopology(k={self.k}, core={len(self.core_switches)}, "
            f"aggregation={len(self.aggregation_switches)}, edge={len(self.edge_switches)}, "
            f"assigned={self.assigned_count})"
        )


def build_topology(k: int, config: Optional[NetworkConfig] = None) -> FatTreeTopology:
    return FatTreeTopology(k, config)


def get_switches_by_tier(topology: FatTreeTopology, tier: Union[Tier, str]) -> List[Switch]:
    return topology.switches_by_tier(tier)


def get_nodes_on_switch(topology: FatTreeTopology, switch: Union[Switch, str]) -> List[NodeHandle]:
    return topology.nodes_on_switch(switch)
