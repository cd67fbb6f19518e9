"""querycraft join graph: table graph view and FROM-order traversal."""
from querycraft.graph.join_graph import JoinGraph
from querycraft.graph.search import DepthFirstSearch

__all__ = ["DepthFirstSearch", "JoinGraph"]
