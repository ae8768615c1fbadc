"""
bfs.py — Breadth-First Search
==============================
BFS as an explicit queue machine.  Expanding a node is split across
several advance() calls so each discovery is its own frame:

  1. DEQUEUE  – take the head of the queue; this is the node's visit
  2. ENQUEUE  – one per unvisited neighbour of the dequeued node
  3. SOLVED   – goal dequeued (path), or queue empty with no goal (path=None)
  4. FAILED   – queue empty and the requested goal was never dequeued

Nodes are marked visited when ENQUEUED, not when dequeued, so a node
reachable through several parents is queued once.  The neighbours still
to be enqueued for the current node are kept on the state (`pending`),
which is what lets a run stop between two ENQUEUE steps.

level(start) = 0 and level(nbr) = level(node) + 1, so dequeue order is
non-decreasing in level.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Set

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
# Pseudocode: each string is one displayed line; index = pseudocode_line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BFS(graph, start, goal):",               # 0
    "    queue ← [start]",                        # 1
    "    visited ← {start}",                      # 2
    "    level[start] ← 0",                       # 3
    "    while queue is not empty:",              # 4
    "        node ← queue.dequeue()",             # 5
    "        if node == goal: return path",       # 6
    "        for nbr in adj(node):",              # 7
    "            if nbr not visited:",            # 8
    "                visited.add(nbr)",           # 9
    "                level[nbr] ← level[node]+1", # 10
    "                queue.enqueue(nbr)",         # 11
    "    return DONE if no goal else NOT FOUND",  # 12
]


class BfsState(SearchState):
    def __init__(self, params: SearchParams):
        super().__init__(params)
        start = params.start
        self.queue:      Deque[str]               = deque([start])
        self.discovered: List[str]                = [start]
        self.seen:       Set[str]                 = {start}
        self.order:      List[str]                = []
        self.parent:     Dict[str, Optional[str]] = {start: None}
        self.levels:     Dict[str, int]           = {start: 0}
        self.current:    Optional[str]            = None
        self.pending:    List[str]                = []

    def copy(self) -> "BfsState":
        other = BfsState.__new__(BfsState)
        other.params     = self.params
        self._copy_common(other)
        other.queue      = deque(self.queue)
        other.discovered = list(self.discovered)
        other.seen       = set(self.seen)
        other.order      = list(self.order)
        other.parent     = dict(self.parent)
        other.levels     = dict(self.levels)
        other.current    = self.current
        other.pending    = list(self.pending)
        return other

    def snapshot(self, step_index: int) -> Snapshot:
        return Snapshot.build(
            step_index=step_index,
            frontier=self.queue,
            visited=self.discovered,
            order=self.order,
            parent_map=self.parent,
            levels=self.levels,
        )


def init(graph: Graph, params: SearchParams) -> BfsState:
    validate_params(graph, params)
    return BfsState(params)


def advance(state: BfsState, graph: Graph) -> Optional[Transition]:
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
            pseudocode_line=6,
            explanation=(
                f"Goal '{goal}' reached! The shortest path by hop count has "
                f"{len(path) - 1} edge(s): {' → '.join(path)}"
            ),
        ))

    # -- finish expanding the current node, one neighbour per step --
    while s.pending:
        nbr = s.pending.pop(0)
        if nbr in s.seen:
            continue
        node = s.current
        s.seen.add(nbr)
        s.discovered.append(nbr)
        s.parent[nbr] = node
        s.levels[nbr] = s.levels[node] + 1
        s.queue.append(nbr)
        return Transition(s, Step(
            kind=StepKind.ENQUEUE,
            node=nbr,
            snapshot=s.snapshot(s.next_index()),
            pseudocode_line=11,
            explanation=(
                f"Enqueue '{nbr}' (parent = '{node}', level {s.levels[nbr]}). "
                f"It will be expanded after every node at level {s.levels[node]}."
            ),
        ))

    # -- dequeue the next node --
    if s.queue:
        node = s.queue.popleft()
        s.order.append(node)
        s.current = node
        if node == goal:
            s.goal_reached = True
            s.pending = []
        else:
            s.pending = [n for n, _ in graph.neighbours(node) if n not in s.seen]
        return Transition(s, Step(
            kind=StepKind.DEQUEUE,
            node=node,
            snapshot=s.snapshot(s.next_index()),
            pseudocode_line=5,
            explanation=(
                f"Dequeue '{node}' (level {s.levels[node]}). BFS always expands "
                f"the node that was discovered earliest (FIFO)."
            ),
        ))

    # --- exhausted ---
    s.done = True
    s.current = None
    if goal is None:
        return Transition(s, Step(
            kind=StepKind.SOLVED,
            node=None,
            snapshot=s.snapshot(s.next_index()),
            pseudocode_line=12,
            explanation=f"Queue empty. All {len(s.order)} reachable node(s) visited.",
        ))
    return Transition(s, Step(
        kind=StepKind.FAILED,
        node=None,
        snapshot=s.snapshot(s.next_index()),
        pseudocode_line=12,
        explanation=f"Queue empty. '{goal}' is not reachable from '{s.params.start}'.",
    ))
