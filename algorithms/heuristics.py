"""
heuristics.py — Built-in A* Heuristics
=======================================
A heuristic, as the engine sees it, is any function `node_id → float >= 0`.
The named heuristics here are factories: given the graph and the goal
they return such a function.

  • euclidean – straight-line distance / Config.distance_scale.  Fixture
                and random-graph weights are the same distance rounded UP,
                so this never overestimates on those graphs.
  • manhattan – |Δx| + |Δy| on the same scale.  May overestimate.
  • zero      – h = 0, A* degrades to Dijkstra.  Useful for teaching.

Positions are read once, when the function is built.
"""

from typing import Callable, Dict, List

from config import Config
from graph import Graph, InvalidInputError

HeuristicFactory = Callable[[Graph, str], Callable[[str], float]]


def euclidean(graph: Graph, goal: str) -> Callable[[str], float]:
    g = graph.require_node(goal)
    table = {
        nid: n.distance_to(g) / Config.distance_scale
        for nid, n in graph.nodes.items()
    }
    return table.__getitem__


def manhattan(graph: Graph, goal: str) -> Callable[[str], float]:
    g = graph.require_node(goal)
    table = {
        nid: (abs(n.x - g.x) + abs(n.y - g.y)) / Config.distance_scale
        for nid, n in graph.nodes.items()
    }
    return table.__getitem__


def zero(graph: Graph, goal: str) -> Callable[[str], float]:
    return lambda node_id: 0.0


HEURISTICS: Dict[str, HeuristicFactory] = {
    "euclidean": euclidean,
    "manhattan": manhattan,
    "zero":      zero,
}


def make_heuristic(name: str, graph: Graph, goal: str) -> Callable[[str], float]:
    factory = HEURISTICS.get(name)
    if factory is None:
        raise InvalidInputError(f"Unknown heuristic {name!r}; choose from {', '.join(HEURISTICS)}")
    return factory(graph, goal)


def heuristic_names() -> List[str]:
    return list(HEURISTICS)
