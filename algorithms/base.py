"""
base.py — Shared Engine Types
==============================
The contract every search variant implements:

    state = init(graph, params)              # fresh internal state
    t     = advance(state, graph)            # → Transition | None
    state = t.state                          # the old state is untouched

`advance` is a pure, synchronous transition: it copies the state it is
given, mutates the copy, and returns it with exactly one Step.  It returns
None once the terminal Step (SOLVED / FAILED) has been emitted.  All
pending work lives in explicit containers on the state object, never on
the Python call stack, so a run can stop between any two steps.
"""

from dataclasses import dataclass
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from algorithms.step import Snapshot, Step
from graph import Graph, InvalidInputError

Heuristic = Callable[[str], float]


@dataclass(frozen=True)
class SearchParams:
    start:     str
    goal:      Optional[str]      = None
    heuristic: Optional[Heuristic] = None


class Transition(NamedTuple):
    state: "SearchState"
    step:  Step


class SearchState:
    """Base for per-variant internal state.  Subclasses add their containers."""

    def __init__(self, params: SearchParams):
        self.params = params
        self.steps_emitted = 0
        self.goal_reached = False
        self.done = False

    def copy(self) -> "SearchState":
        raise NotImplementedError

    def snapshot(self, step_index: int) -> Snapshot:
        raise NotImplementedError

    def _copy_common(self, other: "SearchState") -> None:
        other.steps_emitted = self.steps_emitted
        other.goal_reached  = self.goal_reached
        other.done          = self.done

    def next_index(self) -> int:
        idx = self.steps_emitted
        self.steps_emitted += 1
        return idx


def validate_params(graph: Graph, params: SearchParams, requires_goal: bool = False) -> None:
    """Fail fast on endpoints the run could never use."""
    if params.start is None or not graph.has_node(params.start):
        raise InvalidInputError(f"Start node {params.start!r} is not in the graph")
    if params.goal is not None and not graph.has_node(params.goal):
        raise InvalidInputError(f"Goal node {params.goal!r} is not in the graph")
    if requires_goal:
        if params.goal is None:
            raise InvalidInputError("This algorithm needs a goal node")
        if params.goal == params.start:
            raise InvalidInputError("Start and goal must be different nodes")


def reconstruct_path(parent: Dict[str, Optional[str]], target: str) -> Tuple[str, ...]:
    path, cur = [], target
    while cur is not None:
        path.append(cur)
        cur = parent.get(cur)
    path.reverse()
    return tuple(path)


def path_cost(graph: Graph, path) -> float:
    total = 0.0
    for a, b in zip(path, path[1:]):
        edge = graph.edge_between(a, b)
        if edge is not None:
            total += edge.weight
    return total
