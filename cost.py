from typing import List, Optional, Tuple

from models import CostEstimate, NetworkMetrics, PowerEstimate
from config import NetworkConfig, SwitchPower, SwitchPricing
from topology import build_topology
from assignment import assign_nodes


def estimate_network_cost(
    metrics: NetworkMetrics,
    pricing: Optional[SwitchPricing] = None
) -> CostEstimate:
    if pricing is None:
        pricing = SwitchPricing()

    core_cost = metrics.core_switches * pricing.core_switch_price
    agg_cost = metrics.aggregation_switches * pricing.aggregation_switch_price
    edge_cost = metrics.edge_switches * pricing.edge_switch_price
    total_switch_cost = core_cost + agg_cost + edge_cost

    total_link_bandwidth = metrics.total_links * metrics.link_capacity_gbps
    link_cost = total_link_bandwidth * pricing.link_cost_per_gbps

    total_cost = total_switch_cost + link_cost
    cost_per_node = total_cost / metrics.connected_nodes if metrics.connected_nodes > 0 else 0.0

    return CostEstimate(
        core_switch_cost=core_cost,
        aggregation_switch_cost=agg_cost,
        edge_switch_cost=edge_cost,
        total_switch_cost=total_switch_cost,
        link_cost=link_cost,
        total_cost=total_cost,
        cost_per_node=cost_per_node,
    )


def estimate_power_consumption(
    metrics: NetworkMetrics,
    power: Optional[SwitchPower] = None
) -> PowerEstimate:
    if power is None:
        power = SwitchPower()

    core_kw = metrics.core_switches * power.core_switch_kw
    agg_kw = metrics.aggregation_switches * power.aggregation_switch_kw
    edge_kw = metrics.edge_switches * power.edge_switch_kw
    total_kw = core_kw + agg_kw + edge_kw

    return PowerEstimate(
        core_switch_power_kw=core_kw,
        aggregation_switch_power_kw=agg_kw,
        edge_switch_power_kw=edge_kw,
        total_power_kw=total_kw,
        power_per_node_kw=total_kw / metrics.connected_nodes if metrics.connected_nodes > 0 else 0.0,
    )


def compare_cost_scaling(
    k_values: List[int],
    config: Optional[NetworkConfig] = None
) -> List[Tuple[int, CostEstimate]]:
    if config is None:
        config = NetworkConfig()
    results = []
    for k in k_values:
        topology = build_topology(k, config)
        # fully populated, so the per-node figures compare like for like
        assign_nodes(topology, range(topology.max_compute_nodes))
        metrics = topology.metrics
        cost = estimate_network_cost(metrics, config.pricing)
        results.append((k, cost))
    return results
