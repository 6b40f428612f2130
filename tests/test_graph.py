import unittest

from crossbreed.core.exceptions import InvalidEdgeReferenceError, NodeNotFoundError
from crossbreed.engine.graph import Graph


SQUARE = [(0, 1), (1, 2), (2, 3), (3, 0)]
PATH = [(0, 1), (1, 2), (2, 3), (3, 4)]


class GraphQueryTests(unittest.TestCase):
    def test_edges_and_degrees(self) -> None:
        graph = Graph.from_edges(SQUARE)
        self.assertEqual(graph.count_nodes(), 4)
        self.assertEqual(graph.count_edges(), 4)
        self.assertEqual(graph.edges(), [(0, 1), (0, 3), (1, 2), (2, 3)])
        self.assertEqual(graph.degree(2), 2)
        self.assertTrue(graph.contains(3))
        self.assertFalse(graph.contains(4))
        with self.assertRaises(NodeNotFoundError):
            graph.degree(9)

    def test_add_node_reports_existing(self) -> None:
        graph = Graph()
        self.assertFalse(graph.add_node(5))
        self.assertTrue(graph.add_node(5))
        self.assertEqual(graph.nodes, [5])

    def test_connectivity(self) -> None:
        self.assertTrue(Graph().is_connected())
        self.assertTrue(Graph.from_edges(PATH).is_connected())

        graph = Graph.from_edges([(0, 1), (2, 3)])
        self.assertFalse(graph.is_connected())
        graph.add_edges([(1, 2)])
        self.assertTrue(graph.is_connected())

        lonely = Graph.from_edges([(0, 1)])
        lonely.add_node(2)
        self.assertFalse(lonely.is_connected())

    def test_count_cycles(self) -> None:
        self.assertEqual(Graph().count_cycles(), 0)
        self.assertEqual(Graph.from_edges(PATH).count_cycles(), 0)

        graph = Graph.from_edges(SQUARE)
        self.assertEqual(graph.count_cycles(), 1)
        graph.add_edges([(2, 0)])
        self.assertEqual(graph.count_cycles(), 2)

    def test_count_cycles_warns_when_disconnected(self) -> None:
        graph = Graph.from_edges([(0, 1), (2, 3)])
        with self.assertLogs("crossbreed.engine.graph", level="WARNING"):
            self.assertEqual(graph.count_cycles(), 0)

    def test_find_leaves(self) -> None:
        graph = Graph.from_edges([(1, 2), (0, 1)])
        graph.add_node(3)
        self.assertEqual(graph.find_leaves(), [0, 2, 3])
        self.assertEqual(Graph.from_edges(SQUARE).find_leaves(), [])


class PartitionTests(unittest.TestCase):
    def test_square_partition(self) -> None:
        graph = Graph.from_edges(SQUARE)
        self.assertEqual(graph.partition_nodes(0, 2), ([0, 1, 3], [2]))

    def test_path_partition_splits_in_the_middle(self) -> None:
        graph = Graph.from_edges(PATH)
        first, second = graph.partition_nodes(0, 4)
        self.assertEqual(first, [0, 1, 2])
        self.assertEqual(second, [3, 4])

    def test_halves_are_connected_and_cover_the_graph(self) -> None:
        graph = Graph.from_edges(SQUARE + [(1, 4), (4, 5), (3, 6)])
        first, second = graph.partition_nodes(5, 6)

        self.assertEqual(sorted(first + second), sorted(graph.nodes))
        self.assertFalse(set(first) & set(second))
        for half in (first, second):
            members = set(half)
            sub_graph = Graph.from_edges(edge for edge in graph.edges() if set(edge) <= members)
            for node_id in half:
                sub_graph.add_node(node_id)
            self.assertTrue(sub_graph.is_connected())

    def test_partition_errors(self) -> None:
        graph = Graph.from_edges(SQUARE)
        with self.assertRaises(NodeNotFoundError):
            graph.partition_nodes(0, 99)
        with self.assertRaises(ValueError):
            graph.partition_nodes(1, 1)

        graph._adjacency[0].add(99)
        with self.assertRaises(InvalidEdgeReferenceError):
            graph.partition_nodes(0, 1)


class ComponentTests(unittest.TestCase):
    def test_cut_vertex_splits_path(self) -> None:
        graph = Graph.from_edges(PATH)
        self.assertEqual(graph.components_after_deleting_node(2), [[0, 1], [3, 4]])

    def test_star_centre(self) -> None:
        graph = Graph.from_edges([(0, 3), (0, 1), (0, 2)])
        self.assertEqual(graph.components_after_deleting_node(0), [[1], [2], [3]])

    def test_cycle_stays_whole(self) -> None:
        graph = Graph.from_edges(SQUARE)
        self.assertEqual(graph.components_after_deleting_node(0), [[1, 2, 3]])
        with self.assertRaises(NodeNotFoundError):
            graph.components_after_deleting_node(7)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
