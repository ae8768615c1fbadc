"""
errors.py — Domain Exceptions
==============================
Every error the search lab raises derives from GraphSearchError so the
HTTP layer can translate them in one place.

"No path exists" is NOT an error: it is the FAILED terminal status of a
run and is rendered, never raised.
"""


class GraphSearchError(Exception):
    """Base class for all search-lab errors."""


class UnknownNodeError(GraphSearchError):
    def __init__(self, node_id: str):
        super().__init__(f"Unknown node: {node_id!r}")
        self.node_id = node_id


class SelfLoopError(GraphSearchError):
    def __init__(self, node_id: str):
        super().__init__(f"Self-loop on {node_id!r} is not allowed")
        self.node_id = node_id


class DuplicateEdgeError(GraphSearchError):
    def __init__(self, source: str, target: str):
        super().__init__(f"Edge {source!r} -> {target!r} already exists")
        self.source = source
        self.target = target


class IllegalStateError(GraphSearchError):
    """Operation not allowed in the current run status."""


class InvalidInputError(GraphSearchError):
    """Bad arguments: missing start node, negative weight, NaN heuristic, …"""
