"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge
    from graph import GraphSearchError, IllegalStateError, …
"""

from graph.node   import Node
from graph.edge   import Edge
from graph.graph  import Graph, scaled_distance
from graph.errors import (
    GraphSearchError,
    UnknownNodeError,
    SelfLoopError,
    DuplicateEdgeError,
    IllegalStateError,
    InvalidInputError,
)

__all__ = [
    "Node",
    "Edge",
    "Graph",
    "scaled_distance",
    "GraphSearchError",
    "UnknownNodeError",
    "SelfLoopError",
    "DuplicateEdgeError",
    "IllegalStateError",
    "InvalidInputError",
]
