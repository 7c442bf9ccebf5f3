import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from models import AssignmentResult, NetworkMetrics
from config import NetworkConfig
from topology import build_topology
from assignment import assign_nodes


@dataclass
class ScalingExperiment:
    """
    Build, populate and measure a fat-tree for each k in `k_values`.

    `node_count` nodes (integer handles 0..n-1) are assigned to every
    topology; when left as None each topology is filled to capacity.
    """
    k_values: List[int]
    node_count: Optional[int] = None
    config: NetworkConfig = field(default_factory=NetworkConfig)
    results: List[NetworkMetrics] = field(default_factory=list)
    assignments: List[AssignmentResult] = field(default_factory=list)

    def run(self) -> "ScalingExperiment":
        self.results = []
        self.assignments = []
        for k in self.k_values:
            topology = build_topology(k, self.config)
            count = topology.max_compute_nodes if self.node_count is None else self.node_count
            self.assignments.append(assign_nodes(topology, range(count)))
            self.results.append(topology.metrics)
        return self

    @property
    def warnings(self) -> List[str]:
        return [a.warning for a in self.assignments if a.warning]

    def to_json(self, filepath: Optional[Path] = None) -> str:
        data = [r.to_dict() for r in self.results]
        json_str = json.dumps(data, indent=2)
        if filepath:
            Path(filepath).write_text(json_str)
        return json_str

    def to_csv(self, filepath: Path) -> None:
        if not self.results:
            raise ValueError("No results to export. Run experiment first.")
        with open(filepath, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self.results[0].to_dict().keys())
            writer.writeheader()
            for result in self.results:
                writer.writerow(result.to_dict())

    def summary_table(self) -> str:
        if not self.results:
            return "No results. Run experiment first."

        header = (
            f"{'k':>4} | {'Nodes':>13} | {'Switches':>10} | {'Bisection BW':>14} | "
            f"{'Paths':>6} | {'Cost':>14} | {'Power':>10}"
        )
        separator = "-" * len(header)

        rows = [header, separator]
        for r in self.results:
            rows.append(
                f"{r.k:>4} | {r.connected_nodes:>6,}/{r.max_compute_nodes:<6,} | {r.total_switches:>10,} | "
                f"{r.bisection_bandwidth_gbps:>9,.0f} Gbps | {r.interpod_paths:>6} | "
                f"${r.estimated_cost:>13,.0f} | {r.estimated_power_kw:>7,.1f} kW"
            )

        return "\n".join(rows)
