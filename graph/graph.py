"""
graph.py — Graph Container & Generator
=======================================
Single source of truth for the graph.  The search engine reads it, the
visualisation client edits it.

Responsibilities:
  1. CRUD on nodes & edges                  (add / remove / get)
  2. Adjacency queries                      (neighbours, edge_between, …)
  3. Generation                             (random connected, default fixture)
  4. Serialisation round-trip               (to_dict / from_dict)
  5. Run guard                              (freeze / thaw)

Design decisions:
  - Nodes & edges stored in insertion-ordered dicts for O(1) lookup and a
    stable iteration order.
  - The adjacency index `_adj[node_id] → [(neighbour_id, weight)]` is
    derived data and is rebuilt from scratch after every structural
    mutation, in edge insertion order.  Search order depends on it, so it
    must never drift from `edges`.
  - While a run is active the graph is frozen: every mutator raises
    IllegalStateError.  The scheduler freezes on start() and thaws on
    reset().
  - Listeners are called after each successful mutation so the scheduler
    can truncate any history that was computed on the old structure.
"""

import math
import random
from typing import Callable, Dict, List, Optional, Tuple

from graph.edge import Edge
from graph.errors import (
    DuplicateEdgeError,
    IllegalStateError,
    InvalidInputError,
    SelfLoopError,
    UnknownNodeError,
)
from graph.node import Node
from config import Config

NODE_LABELS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Canonical teaching fixture: (id, x, y) and undirected edges.
DEFAULT_NODES: List[Tuple[str, float, float]] = [
    ("A", 300, 80),
    ("B", 150, 180),
    ("C", 450, 180),
    ("D", 80, 300),
    ("E", 220, 300),
    ("F", 380, 300),
    ("G", 520, 300),
    ("H", 150, 420),
    ("I", 450, 420),
]
DEFAULT_EDGES: List[Tuple[str, str]] = [
    ("A", "B"), ("A", "C"),
    ("B", "D"), ("B", "E"),
    ("C", "F"), ("C", "G"),
    ("D", "H"), ("E", "H"),
    ("F", "I"), ("G", "I"),
]

GraphListener = Callable[["Graph"], None]


class Graph:
    """
    Attributes:
        nodes    : {node_id: Node}
        edges    : {(source, target): Edge}
        directed : bool – graph-level directedness (default: undirected)
        _adj     : {node_id: [(neighbour_id, weight), …]}
    """

    def __init__(self, directed: bool = False):
        self.nodes:    Dict[str, Node]              = {}
        self.edges:    Dict[Tuple[str, str], Edge]  = {}
        self.directed: bool                         = directed
        self._adj:     Dict[str, List[Tuple[str, float]]] = {}
        self._frozen:  bool                         = False
        self._listeners: List[GraphListener]        = []

    # ==================================================================
    # RUN GUARD
    # ==================================================================
    def freeze(self) -> None:
        self._frozen = True

    def thaw(self) -> None:
        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def _require_mutable(self) -> None:
        if self._frozen:
            raise IllegalStateError("Graph is read-only while a search run is active; reset() first")

    def subscribe(self, listener: GraphListener) -> Callable[[], None]:
        """Call `listener(graph)` after every structural change.  Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        self._rebuild_adjacency()
        for listener in list(self._listeners):
            listener(self)

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, x: float, y: float, label: Optional[str] = None) -> Node:
        """Create a node with a fresh id (next free letter, then N<k>)."""
        self._require_mutable()
        x, y = _check_coordinate("x", x), _check_coordinate("y", y)
        node_id = self._next_id()
        node = Node(node_id=node_id, x=x, y=y, label=label)
        self.nodes[node_id] = node
        self._changed()
        return node

    def remove_node(self, node_id: str) -> None:
        """Remove a node and every edge touching it."""
        self._require_mutable()
        if node_id not in self.nodes:
            raise UnknownNodeError(node_id)
        for key in [k for k, e in self.edges.items() if e.touches(node_id)]:
            del self.edges[key]
        del self.nodes[node_id]
        self._changed()

    def update_node_position(self, node_id: str, x: float, y: float) -> Node:
        self._require_mutable()
        node = self.require_node(node_id)
        node.x, node.y = _check_coordinate("x", x), _check_coordinate("y", y)
        return node

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def require_node(self, node_id: str) -> Node:
        node = self.nodes.get(node_id)
        if node is None:
            raise UnknownNodeError(node_id)
        return node

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    def _next_id(self) -> str:
        for ch in NODE_LABELS:
            if ch not in self.nodes:
                return ch
        k = len(self.nodes) + 1
        while f"N{k}" in self.nodes:
            k += 1
        return f"N{k}"

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, source: str, target: str, weight: float = 1.0) -> Edge:
        self._require_mutable()
        if source not in self.nodes:
            raise UnknownNodeError(source)
        if target not in self.nodes:
            raise UnknownNodeError(target)
        if source == target:
            raise SelfLoopError(source)
        _check_weight(weight)
        if self.edge_between(source, target) is not None:
            raise DuplicateEdgeError(source, target)

        edge = Edge(source=source, target=target, weight=weight, directed=self.directed)
        self.edges[(source, target)] = edge
        self._changed()
        return edge

    def remove_edge(self, source: str, target: str) -> None:
        self._require_mutable()
        edge = self.edge_between(source, target)
        if edge is None:
            for nid in (source, target):
                if nid not in self.nodes:
                    raise UnknownNodeError(nid)
            raise InvalidInputError(f"No edge between {source!r} and {target!r}")
        del self.edges[(edge.source, edge.target)]
        self._changed()

    def edge_between(self, a: str, b: str) -> Optional[Edge]:
        """The edge a → b (either orientation when undirected), if any."""
        edge = self.edges.get((a, b))
        if edge is None and not self.directed:
            edge = self.edges.get((b, a))
        return edge

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: str) -> List[Tuple[str, float]]:
        """Ordered [(neighbour_id, weight)] reachable from node_id."""
        return list(self._adj.get(node_id, ()))

    def _rebuild_adjacency(self) -> None:
        adj: Dict[str, List[Tuple[str, float]]] = {nid: [] for nid in self.nodes}
        for edge in self.edges.values():
            adj[edge.source].append((edge.target, edge.weight))
            if not self.directed:
                adj[edge.target].append((edge.source, edge.weight))
        self._adj = adj

    # ==================================================================
    # GENERATION
    # ==================================================================
    def clear(self) -> None:
        self._require_mutable()
        self.nodes.clear()
        self.edges.clear()
        self._changed()

    def reset_to_default(self) -> None:
        """Load the canonical 9-node fixture (A … I)."""
        self._require_mutable()
        self.nodes.clear()
        self.edges.clear()
        for nid, x, y in DEFAULT_NODES:
            self.nodes[nid] = Node(node_id=nid, x=x, y=y)
        for a, b in DEFAULT_EDGES:
            w = scaled_distance(self.nodes[a], self.nodes[b])
            self.edges[(a, b)] = Edge(a, b, weight=w, directed=self.directed)
        self._changed()

    def generate_random_graph(self, num_nodes: int, seed: Optional[int] = None) -> None:
        """
        Replace the graph with `num_nodes` randomly placed nodes connected
        by a random spanning tree plus a few extra edges, so every node is
        reachable from every other.  Weights are the scaled straight-line
        distance between the endpoints.
        """
        self._require_mutable()
        if isinstance(num_nodes, bool) or not isinstance(num_nodes, int) or num_nodes < 1:
            raise InvalidInputError(f"num_nodes must be a positive integer, got {num_nodes!r}")

        rng = random.Random(seed)
        pad = Config.canvas_padding
        w, h = Config.canvas_width, Config.canvas_height

        nodes: Dict[str, Node] = {}
        for i in range(num_nodes):
            x = y = 0.0
            for _ in range(Config.placement_attempts):
                x = pad + rng.random() * (w - 2 * pad)
                y = pad + rng.random() * (h - 2 * pad)
                if all(math.hypot(n.x - x, n.y - y) >= Config.min_node_distance for n in nodes.values()):
                    break
            nid = NODE_LABELS[i] if i < len(NODE_LABELS) else f"N{i + 1}"
            nodes[nid] = Node(node_id=nid, x=x, y=y)

        ids = list(nodes)
        edges: Dict[Tuple[str, str], Edge] = {}

        def connect(a: str, b: str) -> None:
            if a == b or (a, b) in edges or (b, a) in edges:
                return
            wgt = scaled_distance(nodes[a], nodes[b])
            edges[(a, b)] = Edge(a, b, weight=wgt, directed=self.directed)
            if self.directed:
                # keep "reachable from every other" true for directed graphs
                edges[(b, a)] = Edge(b, a, weight=wgt, directed=True)

        # spanning tree: attach each new node to a random connected one
        for i in range(1, len(ids)):
            connect(ids[rng.randrange(i)], ids[i])

        # a few extra edges for cycles
        for _ in range(rng.randrange(num_nodes // 2 + 1) + 1):
            connect(rng.choice(ids), rng.choice(ids))

        self.nodes = nodes
        self.edges = edges
        self._changed()

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls(directed=data.get("directed", False))
        for nd in data.get("nodes", []):
            node = Node.from_dict(nd)
            _check_coordinate("x", node.x)
            _check_coordinate("y", node.y)
            g.nodes[node.id] = node
        g._rebuild_adjacency()
        for ed in data.get("edges", []):
            g.add_edge(ed["source"], ed["target"], ed.get("weight", 1.0))
        return g

    @classmethod
    def default(cls) -> "Graph":
        g = cls()
        g.reset_to_default()
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def node_ids(self) -> List[str]:
        return list(self.nodes.keys())

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def scaled_distance(a: Node, b: Node) -> float:
    """Straight-line distance in weight units, rounded UP to one decimal."""
    return math.ceil(a.distance_to(b) / Config.distance_scale * 10) / 10


def _check_weight(weight) -> None:
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise InvalidInputError(f"Edge weight must be a number, got {weight!r}")
    if math.isnan(weight) or math.isinf(weight) or weight < 0:
        raise InvalidInputError(f"Edge weight must be finite and >= 0, got {weight!r}")


def _check_coordinate(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"Node {name} must be a number, got {value!r}")
    if math.isnan(value) or math.isinf(value):
        raise InvalidInputError(f"Node {name} must be finite, got {value!r}")
    return float(value)
