"""Graph view over the tables of a query.

Each table in the FROM list is a node.  Each join is an edge running from
the left column's container towards the right column's container.  The view
is read-only and built on demand from the query's join index, which lists
every join under both of its endpoint containers.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence

from querycraft.model.container import Container
from querycraft.model.join import Join


class JoinGraph:
    """Directed graph of containers connected by joins.

    Args:
        nodes: The containers in FROM-list order.
        join_mapping: Container uuid to the joins incident to that container,
            in insertion order.
    """

    def __init__(
        self,
        nodes: Sequence[Container],
        join_mapping: Mapping[str, Sequence[Join]],
    ) -> None:
        self._nodes = list(nodes)
        self._join_mapping = join_mapping

    @property
    def nodes(self) -> list[Container]:
        return list(self._nodes)

    @property
    def edges(self) -> list[Join]:
        """Every join once, in join-index order."""
        seen: set[str] = set()
        edges: list[Join] = []
        for joins in self._join_mapping.values():
            for join in joins:
                if join.uuid not in seen:
                    seen.add(join.uuid)
                    edges.append(join)
        return edges

    def incident_edges(self, node: Container) -> list[Join]:
        return list(self._join_mapping.get(node.uuid, ()))

    def outbound_edges(self, node: Container) -> list[Join]:
        return [j for j in self.incident_edges(node) if j.left_container is node]

    def inbound_edges(self, node: Container) -> list[Join]:
        return [j for j in self.incident_edges(node) if j.right_container is node]

    def adjacent_nodes(self, node: Container) -> list[Container]:
        """Containers reachable from ``node`` over one outbound edge."""
        return [
            j.right_container
            for j in self.outbound_edges(node)
            if j.right_container is not None
        ]
