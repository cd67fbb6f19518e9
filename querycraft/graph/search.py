"""Depth-first search over a :class:`~querycraft.graph.join_graph.JoinGraph`.

The search starts a new tree at every unvisited node, taking nodes in FROM
list order, and follows outbound edges in join-index order.  When a node
finishes it is placed ahead of every node that finished before it, so the
resulting ``finish_order`` lists a table before the tables it joins to.
Rendering the FROM clause in this order means every table after the first
can be joined against a table already written.
"""
from __future__ import annotations

import logging

from querycraft.graph.join_graph import JoinGraph
from querycraft.model.container import Container

logger = logging.getLogger(__name__)


class DepthFirstSearch:
    """Computes the finish order of a join graph.

    Example::

        dfs = DepthFirstSearch().perform_search(graph)
        for table in dfs.finish_order:
            ...
    """

    def __init__(self) -> None:
        self._visited: set[str] = set()
        self._finish_order: list[Container] = []

    def perform_search(self, graph: JoinGraph) -> DepthFirstSearch:
        """Run the search over ``graph``, replacing any previous result."""
        self._visited = set()
        self._finish_order = []
        members = {node.uuid for node in graph.nodes}
        for node in graph.nodes:
            if node.uuid not in self._visited:
                self._visit(graph, node, members)
        logger.debug("Join graph finish order: %s", [n.name for n in self._finish_order])
        return self

    def _visit(self, graph: JoinGraph, root: Container, members: set[str]) -> None:
        # Explicit stack of (node, remaining neighbours); join chains can be
        # longer than the interpreter's recursion limit.
        self._visited.add(root.uuid)
        stack = [(root, iter(graph.adjacent_nodes(root)))]
        while stack:
            node, neighbours = stack[-1]
            for neighbour in neighbours:
                if neighbour.uuid in members and neighbour.uuid not in self._visited:
                    self._visited.add(neighbour.uuid)
                    stack.append((neighbour, iter(graph.adjacent_nodes(neighbour))))
                    break
            else:
                stack.pop()
                self._finish_order.insert(0, node)

    @property
    def finish_order(self) -> list[Container]:
        return list(self._finish_order)

    def is_visited(self, node: Container) -> bool:
        return node.uuid in self._visited
