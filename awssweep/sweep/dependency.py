"""Dependency graph and ordering.

Builds a dependency graph between nodes and computes a safe processing order
using Kahn's algorithm for topological sorting.
"""

from __future__ import annotations

from collections import deque


class DependencyResolver:
    """Dependency resolver for ordering.

    Graph edges point from child to parent: a child must be processed before
    each of its parents. For sweeps this means a resource kind that other kinds
    depend on is registered as their parent.

    Attributes:
        graph: Adjacency list mapping child node to list of parent nodes
    """

    def __init__(self) -> None:
        """Initialize dependency resolver with empty graph."""
        self.graph: dict[str, list[str]] = {}

    def add_dependency(self, parent: str, child: str) -> None:
        """Add dependency relationship.

        Child must be processed before parent.

        Args:
            parent: Node processed after child
            child: Node processed before parent
        """
        if child not in self.graph:
            self.graph[child] = []

        if parent not in self.graph[child]:
            self.graph[child].append(parent)

        if parent not in self.graph:
            self.graph[parent] = []

    def compute_deletion_order(self, nodes: list[str]) -> list[str]:
        """Compute processing order using Kahn's algorithm.

        Nodes with no ordering constraint between them keep their input order.

        Args:
            nodes: Nodes to order

        Returns:
            Nodes ordered children first, parents last

        Raises:
            ValueError: If a dependency cycle is detected
        """
        if not nodes:
            return []

        node_set = set(nodes)

        # in-degree = number of children that must run before this node
        in_degree = {node: 0 for node in nodes}
        for child in nodes:
            for parent in self.graph.get(child, []):
                if parent in node_set:
                    in_degree[parent] += 1

        queue = deque(node for node in nodes if in_degree[node] == 0)
        order = []

        while queue:
            node = queue.popleft()
            order.append(node)

            for parent in self.graph.get(node, []):
                if parent not in node_set:
                    continue
                in_degree[parent] -= 1
                if in_degree[parent] == 0:
                    queue.append(parent)

        if len(order) != len(nodes):
            remaining = [node for node in nodes if node not in order]
            raise ValueError(f"Circular dependency detected among: {', '.join(remaining)}")

        return order
