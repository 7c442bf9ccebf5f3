from typing import List, Sequence, Tuple

from models import AssignmentResult, NodeHandle, Switch
from topology import FatTreeTopology


def assign_nodes(topology: FatTreeTopology, nodes: Sequence[NodeHandle]) -> AssignmentResult:
    """
    Bind compute nodes to edge switches in tier order.

    Edge switches are filled pod by pod, lowest position first, with up to
    k/2 nodes each. Nodes past the k^3/4 capacity are dropped and reported
    through `dropped` and `warning` rather than raised.

    A non-empty call replaces any previous assignment. An empty node list
    leaves the current assignment in place and returns a warning.

    Raises:
        ValueError: If the same node handle appears more than once
    """
    nodes = list(nodes)
    capacity = topology.max_compute_nodes

    if not nodes:
        return AssignmentResult(
            requested=0,
            assigned=0,
            dropped=0,
            capacity=capacity,
            warning="No nodes provided for network connection",
        )

    seen = set()
    for node in nodes:
        if node in seen:
            raise ValueError(f"Node {node!r} appears more than once in the assignment input")
        seen.add(node)

    actual = min(len(nodes), capacity)
    per_switch = topology.half_k

    placement: List[Tuple[Switch, List[NodeHandle]]] = []
    node_index = 0
    for edge in topology.edge_switches:
        if node_index >= actual:
            break
        batch = nodes[node_index:min(node_index + per_switch, actual)]
        placement.append((edge, batch))
        node_index += len(batch)

    topology.publish_assignment(placement)

    dropped = len(nodes) - actual
    warning = None
    if dropped:
        warning = (
            f"{len(nodes)} nodes requested but k={topology.k} fat-tree holds {capacity}; "
            f"{dropped} dropped"
        )

    return AssignmentResult(
        requested=len(nodes),
        assigned=actual,
        dropped=dropped,
        capacity=capacity,
        warning=warning,
    )
