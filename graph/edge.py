"""
edge.py — Graph Edge
====================
Connects two nodes with a non-negative weight.

Design decisions:
  - `source` and `target` are node-id strings, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - Weight defaults to 1.  DFS and BFS never read it; A* does.
  - `directed` is copied from the owning Graph so an edge is
    self-describing when serialised.
  - Edges are immutable: to change a weight, remove and re-add.
"""


class Edge:
    """
    Attributes:
        source   : ID of the tail node.
        target   : ID of the head node.
        weight   : Non-negative, finite traversal cost.
        directed : If False, traversal works in both directions.
    """

    __slots__ = ("source", "target", "weight", "directed")

    def __init__(
        self,
        source: str,
        target: str,
        weight: float = 1.0,
        directed: bool = False,
    ):
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "weight", float(weight))
        object.__setattr__(self, "directed", directed)

    def __setattr__(self, name, value):
        raise AttributeError("Edge is immutable")

    @property
    def id(self) -> str:
        return f"{self.source}-{self.target}"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def touches(self, node_id: str) -> bool:
        return node_id == self.source or node_id == self.target

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":       self.id,
            "source":   self.source,
            "target":   self.target,
            "weight":   self.weight,
            "directed": self.directed,
        }

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        arrow = " → " if self.directed else " ↔ "
        return f"Edge({self.source}{arrow}{self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Edge)
            and self.source == other.source
            and self.target == other.target
            and self.directed == other.directed
        )

    def __hash__(self) -> int:
        return hash((self.source, self.target, self.directed))
