"""
Fat-Tree Topology Engine demo

Builds a k=4 fat-tree, assigns compute nodes, resolves paths between them
and prints the structural metrics, cost and power estimates, followed by a
scaling comparison across larger k values.
"""

from pathlib import Path

from models import FatTreeSize
from config import get_default_config
from topology import build_topology
from assignment import assign_nodes
from routing import find_path, find_connected_path, equal_cost_path_count
from cost import estimate_network_cost, estimate_power_consumption
from experiment import ScalingExperiment
from metrics import compare_topologies
from plotting import MATPLOTLIB_AVAILABLE, plot_topology_scaling, plot_cost_breakdown


FAT_TREE_K = 4
NODE_COUNT = 20


def _section(title: str) -> None:
    print("\n" + "─" * 70)
    print(f"  {title}")
    print("─" * 70)


def main() -> None:
    print("=" * 70)
    print("  FAT-TREE TOPOLOGY ENGINE")
    print("=" * 70)

    config = get_default_config()
    print(f"\n{config}")

    # -------------------------------------------------------------------------
    # 1. BUILD
    # -------------------------------------------------------------------------
    _section("SECTION 1: TOPOLOGY")

    topology = build_topology(FAT_TREE_K, config)
    topology.validate_structure()
    print(f"\n{topology!r}")
    for pod in range(topology.num_pods):
        aggs, edges = topology.pod_switches(pod)
        print(f"  Pod {pod}: {', '.join(s.name for s in aggs)} | {', '.join(s.name for s in edges)}")

    # -------------------------------------------------------------------------
    # 2. ASSIGN
    # -------------------------------------------------------------------------
    _section("SECTION 2: NODE ASSIGNMENT")

    nodes = [f"node-{i}" for i in range(NODE_COUNT)]
    result = assign_nodes(topology, nodes)
    print(f"\n  Connected {result.assigned} of {result.requested} nodes (capacity {result.capacity})")
    if result.warning:
        print(f"  ⚠ {result.warning}")
    for edge in topology.edge_switches:
        print(f"  {edge.name}: {', '.join(topology.nodes_on_switch(edge)) or '-'}")

    # -------------------------------------------------------------------------
    # 3. PATHS
    # -------------------------------------------------------------------------
    _section("SECTION 3: PATH RESOLUTION")

    pairs = [
        ("node-0", "node-1"),
        ("node-0", "node-2"),
        ("node-0", "node-15"),
        ("node-0", "node-19"),
    ]
    for src, dst in pairs:
        path = find_path(topology, src, dst)
        print(f"\n  {path}")
        print(f"    hops={path.hops}, equal-cost alternatives={equal_cost_path_count(topology, src, dst)}")
        if len(path) == 5:
            print(f"    verified: {find_connected_path(topology, src, dst)}")

    # -------------------------------------------------------------------------
    # 4. METRICS
    # -------------------------------------------------------------------------
    _section("SECTION 4: METRICS")

    metrics = topology.metrics
    print(f"\n{metrics}")
    print(f"\n{estimate_network_cost(metrics, config.pricing)}")
    print(f"\n{estimate_power_consumption(metrics, config.power)}")

    # -------------------------------------------------------------------------
    # 5. SCALING
    # -------------------------------------------------------------------------
    _section("SECTION 5: SCALING ANALYSIS")

    experiment = ScalingExperiment(k_values=[size.value for size in FatTreeSize], config=config).run()
    print("\n" + experiment.summary_table())

    comparison = compare_topologies(experiment.results[0], experiment.results[-1])
    print(f"\n  Capacity scaling:  {comparison['capacity_ratio']:,.0f}x")
    print(f"  Switch scaling:    {comparison['switch_ratio']:.1f}x")
    print(f"  Bandwidth scaling: {comparison['bandwidth_ratio']:,.0f}x")
    print(f"  Cost scaling:      {comparison['cost_ratio']:.1f}x")

    # -------------------------------------------------------------------------
    # 6. VISUALIZATION
    # -------------------------------------------------------------------------
    _section("SECTION 6: VISUALIZATION")

    if MATPLOTLIB_AVAILABLE:
        scaling_path = Path("fat_tree_scaling.png")
        cost_path = Path("fat_tree_costs.png")
        plot_topology_scaling(config=config, save_path=scaling_path, show_plot=False)
        plot_cost_breakdown(config=config, save_path=cost_path, show_plot=False)
        print(f"\n  Plots saved to: {scaling_path}, {cost_path}")
    else:
        print("\n  matplotlib not installed. Skipping visualization.")
        print("  Install with: pip install matplotlib")

    print("\n" + "=" * 70)
    print("  Analysis complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
