"""
Charts of how a fat-tree scales with k.

matplotlib is optional at import time; calling a plot function without it
installed raises ImportError.
"""

from pathlib import Path
from typing import List, Optional

import numpy as np

from config import NetworkConfig
from cost import estimate_network_cost, estimate_power_consumption
from topology import build_topology

try:
    import matplotlib.pyplot as plt
    import matplotlib.ticker as ticker
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False


def _thousands(ax) -> None:
    ax.yaxis.set_major_formatter(ticker.FuncFormatter(lambda x, p: format(int(x), ',')))


def plot_topology_scaling(
    k_values: Optional[List[int]] = None,
    config: Optional[NetworkConfig] = None,
    save_path: Optional[Path] = None,
    show_plot: bool = True
):
    """
    Plot per-tier switch counts, node capacity and bisection bandwidth against k.

    Args:
        k_values: Even k values to plot (default: 4, 6, ..., 48)
        config: Link capacity source for the bandwidth panel
        save_path: Path to save the figure (optional)
        show_plot: Whether to display the plot interactively

    Returns:
        The matplotlib Figure

    Raises:
        ImportError: If matplotlib is not installed
    """
    if not MATPLOTLIB_AVAILABLE:
        raise ImportError("matplotlib is required for visualization. Install with: pip install matplotlib")

    if k_values is None:
        k_values = list(range(4, 50, 2))
    if config is None:
        config = NetworkConfig()

    metrics_list = [build_topology(k, config).metrics for k in k_values]
    ks = np.array(k_values, dtype=float)

    fig, axes = plt.subplots(1, 3, figsize=(16, 5))
    fig.suptitle('Fat-Tree Topology Scaling', fontsize=16, fontweight='bold')

    ax1 = axes[0]
    ax1.plot(k_values, [m.core_switches for m in metrics_list], 'm-^', linewidth=2, label='Core')
    ax1.plot(k_values, [m.aggregation_switches for m in metrics_list], 'g-s', linewidth=2, label='Aggregation')
    ax1.plot(k_values, [m.edge_switches for m in metrics_list], 'c--o', linewidth=2, label='Edge')
    ax1.plot(k_values, 5 * ks ** 2 / 4, 'r:', alpha=0.7, label='5k²/4 (total)')
    ax1.set_xlabel('k (ports per switch)', fontsize=11)
    ax1.set_ylabel('Switches', fontsize=11)
    ax1.set_title('Switches per Tier - O(k²)', fontsize=12)
    ax1.legend()
    ax1.grid(True, alpha=0.3)
    _thousands(ax1)

    ax2 = axes[1]
    ax2.plot(k_values, [m.max_compute_nodes for m in metrics_list], 'b-o', linewidth=2, label='Capacity')
    ax2.plot(k_values, ks ** 3 / 4, 'r--', alpha=0.7, label='k³/4 (theoretical)')
    ax2.set_xlabel('k (ports per switch)', fontsize=11)
    ax2.set_ylabel('Compute Nodes', fontsize=11)
    ax2.set_title('Node Capacity - O(k³)', fontsize=12)
    ax2.legend()
    ax2.grid(True, alpha=0.3)
    _thousands(ax2)

    ax3 = axes[2]
    bisection_bw = [m.bisection_bandwidth_gbps for m in metrics_list]
    ax3.plot(k_values, bisection_bw, 'c-D', linewidth=2)
    ax3.fill_between(k_values, bisection_bw, alpha=0.3)
    ax3.set_xlabel('k (ports per switch)', fontsize=11)
    ax3.set_ylabel('Bisection Bandwidth (Gbps)', fontsize=11)
    ax3.set_title(f'Bisection Bandwidth @ {config.link_capacity_gbps:g} Gbps links', fontsize=12)
    ax3.grid(True, alpha=0.3)
    _thousands(ax3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    if show_plot:
        plt.show()
    else:
        plt.close(fig)

    return fig


def plot_cost_breakdown(
    k_values: Optional[List[int]] = None,
    config: Optional[NetworkConfig] = None,
    save_path: Optional[Path] = None,
    show_plot: bool = True
):
    """
    Stacked per-tier cost and total power draw for each k.

    Returns:
        The matplotlib Figure
    """
    if not MATPLOTLIB_AVAILABLE:
        raise ImportError("matplotlib required. Install with: pip install matplotlib")

    if k_values is None:
        k_values = [4, 8, 16, 24, 32, 48]
    if config is None:
        config = NetworkConfig()

    metrics_list = [build_topology(k, config).metrics for k in k_values]
    costs = [estimate_network_cost(m, config.pricing) for m in metrics_list]
    power = [estimate_power_consumption(m, config.power) for m in metrics_list]

    fig, axes = plt.subplots(1, 2, figsize=(13, 5))
    fig.suptitle('Fat-Tree Cost and Power', fontsize=14, fontweight='bold')

    x = np.arange(len(k_values))
    core = np.array([c.core_switch_cost for c in costs]) / 1_000_000
    agg = np.array([c.aggregation_switch_cost for c in costs]) / 1_000_000
    edge = np.array([c.edge_switch_cost for c in costs]) / 1_000_000
    links = np.array([c.link_cost for c in costs]) / 1_000_000

    ax1 = axes[0]
    ax1.bar(x, core, label='Core Switches', color='#e74c3c', alpha=0.8)
    ax1.bar(x, agg, bottom=core, label='Aggregation', color='#f39c12', alpha=0.8)
    ax1.bar(x, edge, bottom=core + agg, label='Edge Switches', color='#27ae60', alpha=0.8)
    ax1.bar(x, links, bottom=core + agg + edge, label='Links/Cabling', color='#3498db', alpha=0.8)
    ax1.set_xticks(x)
    ax1.set_xticklabels([f'k={k}' for k in k_values])
    ax1.set_ylabel('Cost ($ Millions)', fontsize=11)
    ax1.set_title('Cost Breakdown by Component', fontsize=12)
    ax1.legend(loc='upper left')
    ax1.grid(True, alpha=0.3, axis='y')

    ax2 = axes[1]
    total_kw = [p.total_power_kw for p in power]
    ax2.plot(k_values, total_kw, 'g-o', linewidth=2, markersize=8)
    ax2.fill_between(k_values, total_kw, alpha=0.3, color='green')
    ax2.set_xlabel('k (ports per switch)', fontsize=11)
    ax2.set_ylabel('Switch Power (kW)', fontsize=11)
    ax2.set_title('Estimated Power Draw', fontsize=12)
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    if show_plot:
        plt.show()
    else:
        plt.close(fig)

    return fig
