"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every search the lab can step through.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "dfs": AlgoInfo(key, label, init, advance, pseudocode, …),
        …
    }

The scheduler only ever talks to an algorithm through AlgoInfo.init and
AlgoInfo.advance, so adding a variant is: write the two functions, add
one entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from algorithms import astar as _astar
from algorithms import bfs as _bfs
from algorithms import dfs as _dfs
from algorithms.base import SearchParams, SearchState, Transition
from algorithms.frontier import FrontierEntry, PriorityFrontier
from algorithms.heuristics import HEURISTICS, make_heuristic
from algorithms.step import Snapshot, Step, StepKind


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:               str                    # registry key, e.g. "bfs"
    label:             str                    # human label, e.g. "Breadth-First Search"
    init:              Callable               # (graph, params) → SearchState
    advance:           Callable               # (state, graph) → Transition | None
    pseudocode:        List[str]              # lines for the side-panel
    tags:              List[str] = field(default_factory=list)
    has_heuristic:     bool     = False       # expose heuristic selector?
    requires_goal:     bool     = False       # refuse to start without a distinct goal?
    uses_weights:      bool     = False       # False → every edge costs 1
    complexity_time:   str      = ""
    complexity_space:  str      = ""
    description:       str      = ""

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "pseudocode":       list(self.pseudocode),
            "tags":             list(self.tags),
            "has_heuristic":    self.has_heuristic,
            "requires_goal":    self.requires_goal,
            "uses_weights":     self.uses_weights,
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search",
        init=_dfs.init, advance=_dfs.advance, pseudocode=_dfs.PSEUDOCODE,
        tags=["unweighted", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V + E)",
        description="Dives deep before backtracking. Does NOT guarantee shortest path.",
    ),

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search",
        init=_bfs.init, advance=_bfs.advance, pseudocode=_bfs.PSEUDOCODE,
        tags=["unweighted", "shortest-path", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer-by-layer. Finds shortest path by hop count.",
    ),

    "astar": AlgoInfo(
        key="astar", label="A* Search",
        init=_astar.init, advance=_astar.advance, pseudocode=_astar.PSEUDOCODE,
        tags=["weighted", "shortest-path", "heuristic"],
        has_heuristic=True, requires_goal=True, uses_weights=True,
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Dijkstra + heuristic guidance. Optimal when h is admissible.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "SearchParams",
    "SearchState",
    "Transition",
    "Step",
    "StepKind",
    "Snapshot",
    "FrontierEntry",
    "PriorityFrontier",
    "HEURISTICS",
    "make_heuristic",
]
