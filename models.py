from dataclasses import dataclass, field, asdict
from typing import Hashable, Iterator, List, Optional, Tuple
from enum import Enum


NodeHandle = Hashable


class Tier(Enum):
    CORE = "core"
    AGGREGATION = "aggregation"
    EDGE = "edge"


class FatTreeSize(Enum):
    SMALL = 4
    MEDIUM = 8
    LARGE = 24
    XLARGE = 48


@dataclass(eq=False)
class Switch:
    """
    A single switch in the fat-tree.

    Switches hash and compare by identity. `index` is the tier-global number
    (pod * k/2 + position for aggregation/edge switches), `position` is the
    index inside the pod. Core switches have no pod. Once the builder has
    wired a switch it is sealed and its attributes can no longer be set.
    """
    tier: Tier
    index: int
    position: int
    port_count: int
    pod: Optional[int] = None
    uplinks: Tuple["Switch", ...] = field(default=(), repr=False)
    downlinks: Tuple["Switch", ...] = field(default=(), repr=False)

    def __setattr__(self, name, value):
        if getattr(self, "_sealed", False):
            raise AttributeError(f"{self.name} is sealed; cannot set {name!r}")
        object.__setattr__(self, name, value)

    def seal(self) -> None:
        object.__setattr__(self, "_sealed", True)

    @property
    def sealed(self) -> bool:
        return getattr(self, "_sealed", False)

    @property
    def name(self) -> str:
        if self.tier is Tier.CORE:
            return f"core_{self.index}"
        if self.tier is Tier.AGGREGATION:
            return f"agg_{self.pod}_{self.position}"
        return f"edge_{self.pod}_{self.position}"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PathResult:
    source: NodeHandle
    destination: NodeHandle
    switches: Tuple[Switch, ...] = ()

    def __len__(self) -> int:
        return len(self.switches)

    def __iter__(self) -> Iterator[Switch]:
        return iter(self.switches)

    def __getitem__(self, item):
        return self.switches[item]

    def __bool__(self) -> bool:
        return bool(self.switches)

    @property
    def is_empty(self) -> bool:
        return not self.switches

    @property
    def hops(self) -> int:
        # switch-to-switch links traversed
        return max(len(self.switches) - 1, 0)

    def names(self) -> List[str]:
        return [s.name for s in self.switches]

    def __str__(self) -> str:
        if not self.switches:
            return f"{self.source} -> {self.destination}: unresolved"
        return f"{self.source} -> {self.destination}: " + " -> ".join(self.names())


@dataclass(frozen=True)
class AssignmentResult:
    requested: int
    assigned: int
    dropped: int
    capacity: int
    warning: Optional[str] = None

    @property
    def utilization_pct(self) -> float:
        return self.assigned * 100.0 / self.capacity if self.capacity > 0 else 0.0


@dataclass(frozen=True, slots=True)
class NetworkMetrics:
    k: int
    link_capacity_gbps: float
    pods: int
    core_switches: int
    aggregation_switches: int
    edge_switches: int
    total_switches: int
    total_links: int
    max_compute_nodes: int
    connected_nodes: int
    utilization_pct: float
    bisection_bandwidth_gbps: float
    intrapod_paths: int
    interpod_paths: int
    max_hops: int
    oversubscription_ratio: float
    estimated_cost: float
    estimated_power_kw: float

    def max_equal_cost_paths(self, cross_pod: bool = True) -> int:
        return self.interpod_paths if cross_pod else self.intrapod_paths

    def __str__(self) -> str:
        return (
            f"Fat-Tree (k={self.k})\n"
            f"  Pods: {self.pods}\n"
            f"  Switches: {self.total_switches:,} "
            f"(Core: {self.core_switches}, Agg: {self.aggregation_switches}, Edge: {self.edge_switches})\n"
            f"  Connected Nodes: {self.connected_nodes:,} / {self.max_compute_nodes:,}\n"
            f"  Utilization: {self.utilization_pct:.1f}%\n"
            f"  Total Links: {self.total_links:,}\n"
            f"  Bisection BW: {self.bisection_bandwidth_gbps:,.1f} Gbps\n"
            f"  Equal-Cost Paths: {self.intrapod_paths} (intra-pod), {self.interpod_paths} (inter-pod)\n"
            f"  Max Hops: {self.max_hops}\n"
            f"  Oversubscription: {self.oversubscription_ratio}:1\n"
            f"  Estimated Cost: ${self.estimated_cost:,.0f}\n"
            f"  Estimated Power: {self.estimated_power_kw:,.1f} kW"
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CostEstimate:
    core_switch_cost: float
    aggregation_switch_cost: float
    edge_switch_cost: float
    total_switch_cost: float
    link_cost: float
    total_cost: float
    cost_per_node: float

    def __str__(self) -> str:
        return (
            f"Cost Estimate:\n"
            f"  Core Switches:        ${self.core_switch_cost:>12,.0f}\n"
            f"  Aggregation Switches: ${self.aggregation_switch_cost:>12,.0f}\n"
            f"  Edge Switches:        ${self.edge_switch_cost:>12,.0f}\n"
            f"  ─────────────────────────────────────\n"
            f"  Total Switch Cost:    ${self.total_switch_cost:>12,.0f}\n"
            f"  Link/Cabling Cost:    ${self.link_cost:>12,.0f}\n"
            f"  ═══════════════════════════════════════\n"
            f"  TOTAL COST:           ${self.total_cost:>12,.0f}\n"
            f"  Cost per Node:        ${self.cost_per_node:>12,.2f}"
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PowerEstimate:
    core_switch_power_kw: float
    aggregation_switch_power_kw: float
    edge_switch_power_kw: float
    total_power_kw: float
    power_per_node_kw: float

    def __str__(self) -> str:
        return (
            f"Power Estimate:\n"
            f"  Core Switches:        {self.core_switch_power_kw:>10,.1f} kW\n"
            f"  Aggregation Switches: {self.aggregation_switch_power_kw:>10,.1f} kW\n"
            f"  Edge Switches:        {self.edge_switch_power_kw:>10,.1f} kW\n"
            f"  ═══════════════════════════════════════\n"
            f"  TOTAL POWER:          {self.total_power_kw:>10,.1f} kW\n"
            f"  Power per Node:       {self.power_per_node_kw:>10,.3f} kW"
        )


class FatTreeValidationError(ValueError):
    pass


class StructuralAssumptionViolated(RuntimeError):
    pass


class ConfigError(ValueError):
    pass
