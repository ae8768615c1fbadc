"""
astar.py — A* Search
=====================
A* as an explicit frontier machine with a caller-supplied heuristic.

Steps emitted:
  1. EXPAND  – minimum-f node extracted from the frontier and closed
  2. RELAX   – one per neighbour whose cost improved: inserted into the
               frontier, or its key decreased.  Carries the superseded
               entry (None when new) and the new entry.
  3. SOLVED  – goal extracted; path rebuilt from the parent map
  4. FAILED  – frontier empty, goal never extracted

Neighbours that are closed or do not improve are skipped inside the same
advance() call without a Step.  The neighbours of the last expanded node
that are still to be examined live on the state (`pending`).

Frontier order is (f, h, first-insertion seq): on equal f the node with
the smaller heuristic wins, then the one discovered first.

`h` is evaluated once per node when the run is initialised.  A result
that is not a finite number >= 0 raises InvalidInputError right there,
before any step is produced.  Admissibility is NOT checked.
"""

import math
from typing import Dict, List, Optional, Set, Tuple

from algorithms.base import (
    SearchParams,
    SearchState,
    Transition,
    reconstruct_path,
    validate_params,
)
from algorithms.frontier import PriorityFrontier
from algorithms.step import Snapshot, Step, StepKind
from graph import Graph, InvalidInputError


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def AStar(graph, start, goal, h):",           # 0
    "    g[start] ← 0",                            # 1
    "    f[start] ← h(start)",                     # 2
    "    open ← {start: f[start]}",                # 3
    "    while open is not empty:",                # 4
    "        node ← open.extract_min()",           # 5
    "        if node == goal: return path",        # 6
    "        closed.add(node)",                    # 7
    "        for (nbr, w) in adj(node):",          # 8
    "            if nbr in closed: continue",      # 9
    "            tentative_g ← g[node] + w",       # 10
    "            if tentative_g < g[nbr]:",        # 11
    "                parent[nbr] ← node",          # 12
    "                g[nbr] ← tentative_g",        # 13
    "                f[nbr] ← g[nbr] + h(nbr)",    # 14
    "                open.insert_or_decrease(nbr)",# 15
    "    return NOT FOUND",                        # 16
]


class AStarState(SearchState):
    def __init__(self, params: SearchParams, h: Dict[str, float]):
        super().__init__(params)
        start = params.start
        self.h:          Dict[str, float]            = h        # read-only after init
        self.frontier:   PriorityFrontier            = PriorityFrontier()
        self.g:          Dict[str, float]            = {start: 0.0}
        self.f:          Dict[str, float]            = {start: h[start]}
        self.parent:     Dict[str, Optional[str]]    = {start: None}
        self.closed:     List[str]                   = []
        self.closed_set: Set[str]                    = set()
        self.current:    Optional[str]               = None
        self.pending:    List[Tuple[str, float]]     = []
        self.frontier.insert(start, h[start], h[start])

    def copy(self) -> "AStarState":
        other = AStarState.__new__(AStarState)
        other.params     = self.params
        self._copy_common(other)
        other.h          = self.h
        other.frontier   = self.frontier.copy()
        other.g          = dict(self.g)
        other.f          = dict(self.f)
        other.parent     = dict(self.parent)
        other.closed     = list(self.closed)
        other.closed_set = set(self.closed_set)
        other.current    = self.current
        other.pending    = list(self.pending)
        return other

    def snapshot(self, step_index: int) -> Snapshot:
        return Snapshot.build(
            step_index=step_index,
            frontier=[e.node for e in self.frontier.snapshot()],
            visited=self.closed,
            order=self.closed,
            parent_map=self.parent,
            g_score=self.g,
            f_score=self.f,
        )


def init(graph: Graph, params: SearchParams) -> AStarState:
    validate_params(graph, params, requires_goal=True)
    if params.heuristic is None:
        raise InvalidInputError("A* needs a heuristic function")
    for edge in graph.edges.values():
        if not (edge.weight >= 0 and math.isfinite(edge.weight)):
            raise InvalidInputError(f"Edge {edge.id} has invalid weight {edge.weight!r}")
    return AStarState(params, evaluate_heuristic(graph, params.heuristic))


def evaluate_heuristic(graph: Graph, heuristic) -> Dict[str, float]:
    table: Dict[str, float] = {}
    for nid in graph.nodes:
        value = heuristic(nid)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"Heuristic returned non-numeric {value!r} for {nid!r}")
        if not math.isfinite(value) or value < 0:
            raise InvalidInputError(f"Heuristic returned {value!r} for {nid!r}; expected a finite number >= 0")
        table[nid] = float(value)
    return table


def advance(state: AStarState, graph: Graph) -> Optional[Transition]:
    if state.done:
        return None

    s = state.copy()
    goal = s.params.goal

    # -- relax remaining neighbours of the last expanded node --
    while s.pending:
        nbr, weight = s.pending.pop(0)
        if nbr in s.closed_set:
            continue
        node = s.current
        tentative = s.g[node] + weight
        if nbr in s.g and tentative >= s.g[nbr]:
            continue

        s.parent[nbr] = node
        s.g[nbr] = tentative
        s.f[nbr] = tentative + s.h[nbr]

        if s.frontier.contains(nbr):
            superseded = s.frontier.entry(nbr)
            s.frontier.decrease_key(nbr, s.f[nbr])
            action = f"decrease its key from {superseded.key:.2f}"
        else:
            superseded = None
            s.frontier.insert(nbr, s.f[nbr], s.h[nbr])
            action = "insert it into the open set"
        entry = s.frontier.entry(nbr)

        return Transition(s, Step(
            kind=StepKind.RELAX,
            node=nbr,
            snapshot=s.snapshot(s.next_index()),
            superseded=superseded,
            entry=entry,
            pseudocode_line=15,
            explanation=(
                f"Relax {node}→{nbr}: g={tentative:.2f}, h={s.h[nbr]:.2f}, "
                f"f={s.f[nbr]:.2f}; {action}."
            ),
        ))

    # -- nothing left to expand --
    if not s.frontier:
        s.done = True
        s.current = None
        return Transition(s, Step(
            kind=StepKind.FAILED,
            node=None,
            snapshot=s.snapshot(s.next_index()),
            pseudocode_line=16,
            explanation=f"Open set empty. '{goal}' is not reachable from '{s.params.start}'.",
        ))

    node = s.frontier.extract_min()
    s.current = node

    if node == goal:
        s.done = True
        path = reconstruct_path(s.parent, goal)
        return Transition(s, Step(
            kind=StepKind.SOLVED,
            node=node,
            snapshot=s.snapshot(s.next_index()),
            path=path,
            pseudocode_line=6,
            explanation=(
                f"Goal '{goal}' reached! Optimal cost g = {s.g[goal]:.2f}. "
                f"Path: {' → '.join(path)}"
            ),
        ))

    s.closed.append(node)
    s.closed_set.add(node)
    s.pending = graph.neighbours(node)
    return Transition(s, Step(
        kind=StepKind.EXPAND,
        node=node,
        snapshot=s.snapshot(s.next_index()),
        pseudocode_line=7,
        explanation=(
            f"Expand '{node}': g={s.g[node]:.2f} + h={s.h[node]:.2f} = "
            f"f={s.f[node]:.2f}, the lowest in the open set. Close it."
        ),
    ))
