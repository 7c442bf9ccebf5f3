from typing import TYPE_CHECKING, Optional

from models import NetworkMetrics, FatTreeValidationError
from config import NetworkConfig

if TYPE_CHECKING:
    from topology import FatTreeTopology


def validate_k(k: int) -> None:
    # bool is an int subclass; True would otherwise pass as k=1
    if not isinstance(k, int) or isinstance(k, bool):
        raise FatTreeValidationError(f"k must be an integer, got {type(k).__name__}")
    if k <= 0:
        raise FatTreeValidationError(f"k must be positive, got {k}")
    if k % 2 != 0:
        raise FatTreeValidationError(f"k must be even for valid fat-tree, got {k}")


def core_switch_count(k: int) -> int:
    validate_k(k)
    return (k // 2) ** 2


def aggregation_switch_count(k: int) -> int:
    validate_k(k)
    return k * (k // 2)


def edge_switch_count(k: int) -> int:
    validate_k(k)
    return k * (k // 2)


def max_compute_nodes(k: int) -> int:
    validate_k(k)
    return (k ** 3) // 4


def total_link_count(k: int) -> int:
    """
    Links in a fully populated fat-tree.

    Node-to-edge links (one per node slot) plus edge-to-aggregation and
    aggregation-to-core links, each k * (k/2)^2.
    """
    validate_k(k)
    half_k = k // 2
    return max_compute_nodes(k) + 2 * k * half_k ** 2


def compute_network_metrics(
    topology: "FatTreeTopology",
    config: Optional[NetworkConfig] = None,
    connected_nodes: Optional[int] = None,
) -> NetworkMetrics:
    """
    Derive a NetworkMetrics snapshot from a built topology.

    Only structural counts are used: switch counts are read from the built
    tiers and the connected node count from the current assignment. Passing
    `config` overrides the topology's own configuration and `connected_nodes`
    the node count of its current assignment.
    """
    if config is None:
        config = topology.config

    k = topology.k
    half_k = k // 2

    core = len(topology.core_switches)
    aggregation = len(topology.aggregation_switches)
    edge = len(topology.edge_switches)

    capacity = max_compute_nodes(k)
    connected = topology.assigned_count if connected_nodes is None else connected_nodes
    utilization = connected * 100.0 / capacity if capacity > 0 else 0.0

    return NetworkMetrics(
        k=k,
        link_capacity_gbps=config.link_capacity_gbps,
        pods=k,
        core_switches=core,
        aggregation_switches=aggregation,
        edge_switches=edge,
        total_switches=core + aggregation + edge,
        total_links=total_link_count(k),
        max_compute_nodes=capacity,
        connected_nodes=connected,
        utilization_pct=utilization,
        bisection_bandwidth_gbps=half_k ** 2 * config.link_capacity_gbps,
        intrapod_paths=half_k,
        interpod_paths=half_k ** 2,
        # edge -> agg -> core -> agg -> edge
        max_hops=4,
        # canonical fat-tree is non-blocking
        oversubscription_ratio=1.0,
        estimated_cost=config.pricing.switch_cost(core, aggregation, edge),
        estimated_power_kw=config.power.switch_power(core, aggregation, edge),
    )


def compare_topologies(metrics_a: NetworkMetrics, metrics_b: NetworkMetrics) -> dict:
    return {
        "k_ratio": metrics_b.k / metrics_a.k,
        "capacity_ratio": metrics_b.max_compute_nodes / metrics_a.max_compute_nodes,
        "switch_ratio": metrics_b.total_switches / metrics_a.total_switches,
        "bandwidth_ratio": metrics_b.bisection_bandwidth_gbps / metrics_a.bisection_bandwidth_gbps,
        "cost_ratio": metrics_b.estimated_cost / metrics_a.estimated_cost,
        "capacity_increase": metrics_b.max_compute_nodes - metrics_a.max_compute_nodes,
        "switch_increase": metrics_b.total_switches - metrics_a.total_switches,
    }


def get_metrics(topology: "FatTreeTopology") -> NetworkMetrics:
    """Cached snapshot; refreshed by the topology whenever nodes are assigned."""
    return topology.metrics
