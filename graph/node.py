"""
node.py — Graph Node
====================
A node has an immutable identity (id, label) and a canvas position.

Design decisions:
  - `x` / `y` are presentation-only.  The search engine never reads them;
    only caller-side heuristic factories (euclidean, manhattan) do.
  - No per-node algorithm state lives here.  Everything a run computes is
    kept in the engine's explicit state and in the recorded Steps, so
    the graph stays a pure structure that can be frozen during a run.
"""

from typing import Optional


class Node:
    """
    Attributes:
        id    : Unique identifier, immutable once created.
        label : Human-readable name shown on the canvas (defaults to id).
        x, y  : Canvas coordinates.
    """

    __slots__ = ("_id", "label", "x", "y")

    def __init__(
        self,
        node_id: str,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
    ):
        self._id: str    = node_id
        self.label: str  = label or node_id
        self.x: float    = float(x)
        self.y: float    = float(y)

    @property
    def id(self) -> str:
        return self._id

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def distance_to(self, other: "Node") -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     self.x,
            "y":     self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(
            node_id=data["id"],
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            label=data.get("label"),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
