"""Word intersection graph.

Nodes are placed word ids and every intersection cell contributes an edge between
its across and down word. The graph is a disposable view rebuilt from a grid on
demand; it backs connectivity validation, cycle scoring, leaf pruning and the
partitioning used to produce recombination gametes.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, Iterable, List, Set, Tuple

from ..core.exceptions import InvalidEdgeReferenceError, NodeNotFoundError
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class Graph:
    """Undirected graph keyed by word id."""

    def __init__(self) -> None:
        # Insertion ordered, so traversal start points are deterministic.
        self._adjacency: Dict[int, Set[int]] = {}

    @classmethod
    def from_edges(cls, edges: Iterable[Tuple[int, int]]) -> "Graph":
        graph = cls()
        graph.add_edges(edges)
        return graph

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def add_node(self, node_id: int) -> bool:
        """Register ``node_id``; returns whether it was already present."""

        already_present = node_id in self._adjacency
        if not already_present:
            self._adjacency[node_id] = set()
        return already_present

    def add_edges(self, edges: Iterable[Tuple[int, int]]) -> None:
        for first, second in edges:
            self.add_node(first)
            self.add_node(second)
            self._adjacency[first].add(second)
            self._adjacency[second].add(first)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def nodes(self) -> List[int]:
        return list(self._adjacency)

    def contains(self, node_id: int) -> bool:
        return node_id in self._adjacency

    def count_nodes(self) -> int:
        return len(self._adjacency)

    def count_edges(self) -> int:
        return sum(len(neighbours) for neighbours in self._adjacency.values()) // 2

    def degree(self, node_id: int) -> int:
        return len(self._neighbours(node_id))

    def edges(self) -> List[Tuple[int, int]]:
        return sorted(
            (node_id, neighbour)
            for node_id, neighbours in self._adjacency.items()
            for neighbour in neighbours
            if node_id < neighbour
        )

    def _neighbours(self, node_id: int) -> Set[int]:
        try:
            return self._adjacency[node_id]
        except KeyError:
            raise NodeNotFoundError(f"Node {node_id} not in graph") from None

    def _traverse_count_node_visits(self) -> Dict[int, int]:
        """Walk every edge once from the first node, counting arrivals at each node."""

        if not self._adjacency:
            return {}
        start = next(iter(self._adjacency))
        node_visits: Dict[int, int] = {start: 1}
        used_edges: Set[Tuple[int, int]] = set()
        edge_stack: List[Tuple[int, int]] = [(start, n) for n in sorted(self._adjacency[start])]

        while edge_stack:
            first, second = edge_stack.pop()
            if (first, second) in used_edges:
                continue
            used_edges.add((first, second))
            used_edges.add((second, first))
            if second in node_visits:
                node_visits[second] += 1
            else:
                node_visits[second] = 1
                edge_stack.extend((second, n) for n in sorted(self._adjacency.get(second, ())))
        return node_visits

    def is_connected(self) -> bool:
        """True if every node is reachable from the first one. An empty graph is connected."""

        node_visits = self._traverse_count_node_visits()
        unreached = [node_id for node_id in self._adjacency if node_id not in node_visits]
        if unreached:
            LOGGER.debug("Nodes never reached: %s", unreached)
        return not unreached

    def count_cycles(self) -> int:
        """Independent cycles, ``edges - nodes + 1``.

        Only exact for a connected graph; on a disconnected one the result is an
        undercount (never below zero) and a warning is logged.
        """

        if not self._adjacency:
            return 0
        if not self.is_connected():
            LOGGER.warning("Counting cycles on a disconnected graph; result is an undercount")
        return max(0, self.count_edges() - self.count_nodes() + 1)

    def find_leaves(self) -> List[int]:
        """Nodes of degree at most one, which can be removed without disconnecting the rest."""

        return sorted(node_id for node_id, neighbours in self._adjacency.items() if len(neighbours) <= 1)

    # ------------------------------------------------------------------
    # Partitioning
    # ------------------------------------------------------------------
    def partition_nodes(self, first_node: int, second_node: int) -> Tuple[List[int], List[int]]:
        """Split the graph into two connected halves grown from two seed nodes.

        Both halves grow one breadth-first step at a time in turn, neighbours
        visited in ascending id order; a node joins whichever half reaches it first.
        """

        for node_id in (first_node, second_node):
            if node_id not in self._adjacency:
                raise NodeNotFoundError(f"Node {node_id} not in graph")
        if first_node == second_node:
            raise ValueError(f"Cannot partition around a single node {first_node}")

        owner: Dict[int, int] = {first_node: 0, second_node: 1}
        queues: Tuple[Deque[int], Deque[int]] = (deque([first_node]), deque([second_node]))
        while queues[0] or queues[1]:
            for side, queue in enumerate(queues):
                if not queue:
                    continue
                node_id = queue.popleft()
                for neighbour in sorted(self._adjacency[node_id]):
                    if neighbour not in self._adjacency:
                        raise InvalidEdgeReferenceError(
                            f"Edge ({node_id}, {neighbour}) references a missing node"
                        )
                    if neighbour not in owner:
                        owner[neighbour] = side
                        queue.append(neighbour)

        first_half = sorted(node_id for node_id, side in owner.items() if side == 0)
        second_half = sorted(node_id for node_id, side in owner.items() if side == 1)
        return first_half, second_half

    def components_after_deleting_node(self, node_id: int) -> List[List[int]]:
        """Connected components left once ``node_id`` and its edges are removed.

        Each component is sorted, and components are ordered by their smallest id.
        """

        self._neighbours(node_id)
        remaining = {
            other: {n for n in neighbours if n != node_id}
            for other, neighbours in self._adjacency.items()
            if other != node_id
        }

        components: List[List[int]] = []
        seen: Set[int] = set()
        for start in sorted(remaining):
            if start in seen:
                continue
            component = []
            queue: Deque[int] = deque([start])
            seen.add(start)
            while queue:
                current = queue.popleft()
                component.append(current)
                for neighbour in sorted(remaining[current]):
                    if neighbour not in remaining:
                        raise InvalidEdgeReferenceError(
                            f"Edge ({current}, {neighbour}) references a missing node"
                        )
                    if neighbour not in seen:
                        seen.add(neighbour)
                        queue.append(neighbour)
            components.append(sorted(component))
        return components

    def __repr__(self) -> str:
        return f"Graph(nodes={self.nodes}, edges={self.edges()})"
