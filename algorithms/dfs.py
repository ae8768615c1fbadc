"""
dfs.py — Depth-First Search
=============================
DFS as an explicit stack machine: each advance() pops until it finds an
unvisited node, visits it and pushes its neighbours.

Steps emitted:
  1. VISIT   – node popped and marked visited (one per reachable node)
  2. SOLVED  – goal was visited (path), or stack empty with no goal (path=None)
  3. FAILED  – stack empty and the requested goal was never visited

Stack discipline ("push first, filter on pop"):
  Neighbours are pushed without a membership check and in REVERSE
  adjacency order, so the first neighbour ends on top and is explored
  first.  Entries for already-visited nodes are discarded silently when
  popped; discarding emits no Step.  This reproduces recursive DFS
  visitation order exactly.

Each stack entry carries the node that pushed it, so the parent map is
the true DFS tree (the parent is fixed when the node is VISITED, not when
it was first pushed).
"""

from typing import Dict, List, Optional, Set, Tuple

from algorithms.base import (
    SearchParams,
    SearchState,
    Transition,
    reconstruct_path,
    validate_params,
)
from algorithms.step import Snapshot, Step, StepKind
from graph import Graph


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DFS(graph, start, goal):",               # 0
    "    stack ← [start]",                        # 1
    "    visited ← {}",                           # 2
    "    while stack is not empty:",              # 3
    "        node ← stack.pop()",                 # 4
    "        if node in visited: continue",       # 5
    "        visited.add(node)",                  # 6
    "        if node == goal: return path",       # 7
    "        for nbr in reversed(adj(node)):",    # 8
    "            stack.push(nbr)",                # 9
    "    return DONE if no goal else NOT FOUND",  # 10
]


class DfsState(SearchState):
    def __init__(self, params: SearchParams):
        super().__init__(params)
        self.stack:   List[Tuple[str, Optional[str]]] = [(params.start, None)]
        self.visited: List[str]                       = []
        self.seen:    Set[str]                        = set()
        self.parent:  Dict[str, Optional[str]]        = {}

    def copy(self) -> "DfsState":
        other = DfsState.__new__(DfsState)
        other.params  = self.params
        self._copy_common(other)
        other.stack   = list(self.stack)
        other.visited = list(self.visited)
        other.seen    = set(self.seen)
        other.parent  = dict(self.parent)
        return other

    def snapshot(self, step_index: int) -> Snapshot:
        return Snapshot.build(
            step_index=step_index,
            frontier=[n for n, _ in self.stack],
            visited=self.visited,
            order=self.visited,
            parent_map=self.parent,
        )


def init(graph: Graph, params: SearchParams) -> DfsState:
    validate_params(graph, params)
    return DfsState(params)


def advance(state: DfsState, graph: Graph) -> Optional[Transition]:
    if state.done:
        return None

    s = state.copy()
    goal = s.params.goal

    if s.goal_reached:
        s.done = True
        path = reconstruct_path(s.parent, goal)
        return Transition(s, Step(
            kind=StepKind.SOLVED,
            node=goal,
            snapshot=s.snapshot(s.next_index()),
            path=path,
            pseudocode_line=7,
            explanation=f"Goal '{goal}' found! Path: {' → '.join(path)} ({len(path) - 1} edge(s)).",
        ))

    while s.stack:
        node, parent = s.stack.pop()
        if node in s.seen:
            continue

        s.seen.add(node)
        s.visited.append(node)
        s.parent[node] = parent

        if node == goal:
            s.goal_reached = True
            explanation = f"Pop '{node}' and mark it VISITED. It is the goal."
        else:
            nbrs = graph.neighbours(node)
            for nbr, _ in reversed(nbrs):
                s.stack.append((nbr, node))
            pushed = ", ".join(n for n, _ in nbrs) or "nothing"
            explanation = (
                f"Pop '{node}' and mark it VISITED. "
                f"Push neighbours ({pushed}) so the first one is explored next."
            )

        return Transition(s, Step(
            kind=StepKind.VISIT,
            node=node,
            snapshot=s.snapshot(s.next_index()),
            pseudocode_line=6,
            explanation=explanation,
        ))

    # --- stack exhausted ---
    s.done = True
    if goal is None:
        return Transition(s, Step(
            kind=StepKind.SOLVED,
            node=None,
            snapshot=s.snapshot(s.next_index()),
            pseudocode_line=10,
            explanation=f"Stack empty. All {len(s.visited)} reachable node(s) visited.",
        ))
    return Transition(s, Step(
        kind=StepKind.FAILED,
        node=None,
        snapshot=s.snapshot(s.next_index()),
        pseudocode_line=10,
        explanation=f"Stack empty. '{goal}' is not reachable from '{s.params.start}'.",
    ))
