"""
Switch-level path resolution between assigned compute nodes.

Three cases, checked in order:

- same edge switch:  [edge]
- same pod:          [src_edge, agg, dst_edge]
- different pods:    [src_edge, src_agg, core, dst_agg, dst_edge]

`find_path` returns one representative path built from the first uplink
at every hop. In the cross-pod case the core switch is taken from the
source side and the destination aggregation switch from the destination
edge switch independently, and the core -> dst_agg leg is not checked.
With the wiring in topology.py both picks land on aggregation position 0,
so the leg exists, but nothing here depends on that. Use
`find_connected_path` when every hop must be verified.
"""

from typing import List, Optional

from models import NodeHandle, PathResult, StructuralAssumptionViolated, Switch
from topology import FatTreeTopology


def _first_uplink(switch: Switch) -> Switch:
    if not switch.uplinks:
        raise StructuralAssumptionViolated(f"{switch.name} has no uplinks")
    return switch.uplinks[0]


def _same_pod(topology: FatTreeTopology, a: Switch, b: Switch) -> bool:
    return topology.pod_of(a) == topology.pod_of(b)


def _edges_for(topology: FatTreeTopology, source: NodeHandle, destination: NodeHandle):
    # both lookups must come from the same published assignment
    snapshot = topology.snapshot
    return snapshot.edge_switch_for(source), snapshot.edge_switch_for(destination)


def find_path(topology: FatTreeTopology, source: NodeHandle, destination: NodeHandle) -> PathResult:
    src_edge, dst_edge = _edges_for(topology, source, destination)

    if src_edge is None or dst_edge is None:
        return PathResult(source, destination)

    if src_edge is dst_edge:
        return PathResult(source, destination, (src_edge,))

    if _same_pod(topology, src_edge, dst_edge):
        agg = _first_uplink(src_edge)
        return PathResult(source, destination, (src_edge, agg, dst_edge))

    src_agg = _first_uplink(src_edge)
    core = _first_uplink(src_agg)
    dst_agg = _first_uplink(dst_edge)
    return PathResult(source, destination, (src_edge, src_agg, core, dst_agg, dst_edge))


def find_connected_path(topology: FatTreeTopology, source: NodeHandle, destination: NodeHandle) -> PathResult:
    """
    Like find_path, but the cross-pod leg is chosen so that every
    consecutive pair of switches is linked.

    The first core switch above the source aggregation switch is kept and
    the destination aggregation switch is the one in the destination pod
    that shares it.
    """
    path = find_path(topology, source, destination)
    if len(path) != 5:
        return path

    src_edge, src_agg, _, _, dst_edge = path.switches
    for core in src_agg.uplinks:
        dst_agg = _shared_aggregation(core, dst_edge)
        if dst_agg is not None:
            return PathResult(source, destination, (src_edge, src_agg, core, dst_agg, dst_edge))

    raise StructuralAssumptionViolated(
        f"no core switch above {src_agg.name} reaches pod {dst_edge.pod}"
    )


def _shared_aggregation(core: Switch, dst_edge: Switch) -> Optional[Switch]:
    candidates = set(dst_edge.uplinks)
    for agg in core.downlinks:
        if agg in candidates:
            return agg
    return None


def is_connected_path(path: PathResult) -> bool:
    switches = path.switches
    for lower, upper in zip(switches, switches[1:]):
        if upper not in lower.uplinks and upper not in lower.downlinks:
            return False
    return True


def equal_cost_path_count(topology: FatTreeTopology, source: NodeHandle, destination: NodeHandle) -> int:
    """Number of shortest switch-level paths between two nodes, 0 if unresolved."""
    src_edge, dst_edge = _edges_for(topology, source, destination)
    if src_edge is None or dst_edge is None:
        return 0
    if src_edge is dst_edge:
        return 1
    if _same_pod(topology, src_edge, dst_edge):
        return topology.half_k
    return topology.half_k ** 2


def all_equal_cost_paths(topology: FatTreeTopology, source: NodeHandle, destination: NodeHandle) -> List[PathResult]:
    """Enumerate every shortest switch-level path between two nodes."""
    src_edge, dst_edge = _edges_for(topology, source, destination)
    if src_edge is None or dst_edge is None:
        return []
    if src_edge is dst_edge:
        return [PathResult(source, destination, (src_edge,))]
    if _same_pod(topology, src_edge, dst_edge):
        return [
            PathResult(source, destination, (src_edge, agg, dst_edge))
            for agg in src_edge.uplinks
        ]

    paths = []
    for src_agg in src_edge.uplinks:
        for core in src_agg.uplinks:
            dst_agg = _shared_aggregation(core, dst_edge)
            if dst_agg is not None:
                paths.append(PathResult(source, destination, (src_edge, src_agg, core, dst_agg, dst_edge)))
    return paths
