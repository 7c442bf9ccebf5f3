import unittest

import numpy as np

from models import FatTreeValidationError, StructuralAssumptionViolated, Tier
from topology import FatTreeTopology, build_topology, get_switches_by_tier, get_nodes_on_switch
from assignment import assign_nodes


class TestTierSizes(unittest.TestCase):
    def test_tier_counts_for_even_k(self):
        for k in (2, 4, 6, 8, 12, 24):
            with self.subTest(k=k):
                topology = build_topology(k)
                half_k = k // 2
                self.assertEqual(len(topology.core_switches), half_k ** 2)
                self.assertEqual(len(topology.aggregation_switches), k * half_k)
                self.assertEqual(len(topology.edge_switches), k * half_k)
                self.assertEqual(topology.max_compute_nodes, k ** 3 // 4)

    def test_k4_scenario(self):
        topology = build_topology(4)
        self.assertEqual(topology.max_compute_nodes, 16)
        self.assertEqual(len(topology.core_switches), 4)
        self.assertEqual(len(topology.aggregation_switches), 8)
        self.assertEqual(len(topology.edge_switches), 8)

    def test_invalid_k(self):
        for k in (0, -2, -4, 1, 3, 5, 7):
            with self.subTest(k=k):
                with self.assertRaises(FatTreeValidationError):
                    build_topology(k)

    def test_non_integer_k(self):
        for k in (4.0, "4", None, True):
            with self.subTest(k=k):
                with self.assertRaises(FatTreeValidationError):
                    FatTreeTopology(k)

    def test_validation_error_is_value_error(self):
        with self.assertRaises(ValueError):
            build_topology(3)


class TestWiring(unittest.TestCase):
    def setUp(self):
        self.k = 6
        self.half_k = 3
        self.topology = build_topology(self.k)

    def test_aggregation_cardinalities(self):
        for agg in self.topology.aggregation_switches:
            self.assertEqual(len(agg.uplinks), self.half_k)
            self.assertEqual(len(set(agg.uplinks)), self.half_k)
            self.assertEqual(len(agg.downlinks), self.half_k)
            for edge in agg.downlinks:
                self.assertEqual(edge.pod, agg.pod)

    def test_edge_uplinks_cover_own_pod(self):
        for edge in self.topology.edge_switches:
            aggs, _ = self.topology.pod_switches(edge.pod)
            self.assertEqual(list(edge.uplinks), aggs)
            self.assertEqual(edge.downlinks, ())

    def test_aggregation_uplinks_follow_core_groups(self):
        cores = self.topology.core_switches
        for agg in self.topology.aggregation_switches:
            a = agg.position
            expected = cores[a * self.half_k:(a + 1) * self.half_k]
            self.assertEqual(list(agg.uplinks), expected)

    def test_core_downlinks_one_per_pod(self):
        for core in self.topology.core_switches:
            self.assertEqual(len(core.downlinks), self.k)
            self.assertEqual([agg.pod for agg in core.downlinks], list(range(self.k)))
            group = core.index // self.half_k
            self.assertTrue(all(agg.position == group for agg in core.downlinks))
            self.assertEqual(core.uplinks, ())

    def test_both_ends_recorded(self):
        for lower, upper in self.topology.links():
            self.assertIn(upper, lower.uplinks)
            self.assertIn(lower, upper.downlinks)

    def test_adjacency_is_immutable(self):
        agg = self.topology.aggregation_switches[0]
        self.assertIsInstance(agg.uplinks, tuple)
        self.assertIsInstance(agg.downlinks, tuple)

    def test_numbering(self):
        self.assertEqual([c.index for c in self.topology.core_switches], list(range(self.half_k ** 2)))
        for pod in range(self.k):
            aggs, edges = self.topology.pod_switches(pod)
            self.assertEqual([s.position for s in aggs], list(range(self.half_k)))
            self.assertEqual([s.position for s in edges], list(range(self.half_k)))
            for s in aggs + edges:
                self.assertEqual(s.pod, pod)
                self.assertEqual(self.topology.pod_of(s), pod)
        self.assertTrue(all(c.pod is None for c in self.topology.core_switches))

    def test_port_count(self):
        self.assertTrue(all(s.port_count == self.k for s in self.topology.all_switches()))

    def test_validate_structure_passes(self):
        self.topology.validate_structure()

    def test_validate_structure_detects_missing_uplink(self):
        edge = self.topology.edge_switches[0]
        object.__setattr__(edge, "uplinks", edge.uplinks[1:])
        with self.assertRaises(StructuralAssumptionViolated):
            self.topology.validate_structure()

    def test_validate_structure_detects_wrong_switch_count(self):
        self.topology.edge_switches.pop()
        with self.assertRaises(StructuralAssumptionViolated):
            self.topology.validate_structure()

    def test_switches_sealed_after_build(self):
        edge = self.topology.edge_switches[0]
        self.assertTrue(edge.sealed)
        with self.assertRaises(AttributeError):
            edge.uplinks = ()
        with self.assertRaises(AttributeError):
            edge.pod = 3
        self.assertEqual(len(edge.uplinks), self.half_k)
        self.topology.validate_structure()

    def test_link_count(self):
        links = list(self.topology.links())
        self.assertEqual(len(links), 2 * self.k * self.half_k ** 2)

    def test_adjacency_matrix(self):
        matrix = self.topology.adjacency_matrix()
        n = len(self.topology.all_switches())
        self.assertEqual(matrix.shape, (n, n))
        self.assertTrue(np.array_equal(matrix, matrix.T))
        self.assertEqual(int(matrix.sum()), 2 * len(list(self.topology.links())))
        self.assertEqual(int(np.trace(matrix)), 0)


class TestIdempotence(unittest.TestCase):
    def test_same_k_same_structure(self):
        a = build_topology(8)
        b = build_topology(8)
        self.assertEqual([s.name for s in a.all_switches()], [s.name for s in b.all_switches()])
        for sa, sb in zip(a.all_switches(), b.all_switches()):
            self.assertEqual([u.name for u in sa.uplinks], [u.name for u in sb.uplinks])
            self.assertEqual([d.name for d in sa.downlinks], [d.name for d in sb.downlinks])
        self.assertTrue(np.array_equal(a.adjacency_matrix(), b.adjacency_matrix()))

    def test_instances_do_not_share_switches(self):
        a = build_topology(4)
        b = build_topology(4)
        self.assertIsNot(a.core_switches[0], b.core_switches[0])


class TestAccessors(unittest.TestCase):
    def setUp(self):
        self.topology = build_topology(4)

    def test_switches_by_tier(self):
        self.assertEqual(len(get_switches_by_tier(self.topology, Tier.CORE)), 4)
        self.assertEqual(len(get_switches_by_tier(self.topology, "aggregation")), 8)
        self.assertEqual(len(get_switches_by_tier(self.topology, "edge")), 8)
        with self.assertRaises(ValueError):
            get_switches_by_tier(self.topology, "spine")

    def test_switches_by_tier_returns_copy(self):
        edges = self.topology.switches_by_tier(Tier.EDGE)
        edges.clear()
        self.assertEqual(len(self.topology.edge_switches), 8)

    def test_switch_lookup(self):
        self.assertIs(self.topology.switch("core_3"), self.topology.core_switches[3])
        self.assertIs(self.topology.switch("agg_1_0"), self.topology.aggregation_switches[2])
        self.assertIs(self.topology.switch("edge_3_1"), self.topology.edge_switches[7])
        with self.assertRaises(KeyError):
            self.topology.switch("edge_9_9")

    def test_pod_switches_range(self):
        with self.assertRaises(ValueError):
            self.topology.pod_switches(4)

    def test_pod_of_core_rejected(self):
        with self.assertRaises(ValueError):
            self.topology.pod_of(self.topology.core_switches[0])

    def test_nodes_on_switch(self):
        assign_nodes(self.topology, list(range(5)))
        self.assertEqual(get_nodes_on_switch(self.topology, "edge_0_0"), [0, 1])
        self.assertEqual(get_nodes_on_switch(self.topology, self.topology.edge_switches[1]), [2, 3])
        self.assertEqual(get_nodes_on_switch(self.topology, "edge_1_0"), [4])
        self.assertEqual(get_nodes_on_switch(self.topology, "edge_1_1"), [])
        self.assertEqual(get_nodes_on_switch(self.topology, "core_0"), [])

    def test_nodes_on_foreign_switch(self):
        other = build_topology(4)
        with self.assertRaises(KeyError):
            self.topology.nodes_on_switch(other.edge_switches[0])

    def test_publish_assignment_directly(self):
        topology = build_topology(4)
        edge = topology.switch("edge_1_1")
        topology.publish_assignment([(edge, ["n1", "n2"])])
        self.assertIs(topology.edge_switch_for("n2"), edge)
        self.assertEqual(topology.snapshot.metrics.connected_nodes, 2)
        self.assertEqual(topology.pod_of(edge), 1)
        with self.assertRaises(StructuralAssumptionViolated):
            topology.publish_assignment([(topology.switch("agg_0_0"), ["n3"])])
        self.assertEqual(topology.assigned_count, 2)

    def test_repr(self):
        self.assertIn("k=4", repr(self.topology))


if __name__ == "__main__":
    unittest.main()
