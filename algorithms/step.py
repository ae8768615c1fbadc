"""
step.py — Algorithm Step Record
================================
Every call to an algorithm's `advance()` yields exactly one Step.
A Step is a frozen-in-time picture of everything a visualiser needs to
render one frame:

    • What happened       (kind + node: visit, enqueue, relax, …)
    • The full search state after it happened (Snapshot)
    • For RELAX: the frontier entry it replaced and the new one
    • For SOLVED: the reconstructed path
    • Which pseudocode line is executing and a plain-English explanation

Design decisions:
  - Step and Snapshot are frozen dataclasses whose containers are tuples
    and read-only mappings.  Once recorded, nothing can change them, so
    moving a history cursor back and forth re-exposes byte-identical state.
  - A Snapshot is complete, not a diff: the state at step i is exactly
    steps[i].snapshot, no replay arithmetic required.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from algorithms.frontier import FrontierEntry


class StepKind(Enum):
    VISIT   = "visit"      # DFS: node popped and marked visited
    ENQUEUE = "enqueue"    # BFS: neighbour discovered and queued
    DEQUEUE = "dequeue"    # BFS: node taken from the queue (its visit)
    EXPAND  = "expand"     # A*: node extracted from the frontier and closed
    RELAX   = "relax"      # A*: neighbour inserted or its key decreased
    SOLVED  = "solved"     # terminal: goal reached, or traversal finished
    FAILED  = "failed"     # terminal: goal unreachable

    @property
    def is_terminal(self) -> bool:
        return self in (StepKind.SOLVED, StepKind.FAILED)


def frozen_map(data: Optional[Mapping]) -> Optional[Mapping]:
    if data is None:
        return None
    return MappingProxyType(dict(data))


@dataclass(frozen=True)
class Snapshot:
    """
    Attributes:
        step_index : Index of the Step this snapshot belongs to (-1 = initial).
        frontier   : Node ids waiting to be processed — stack bottom→top for
                     DFS, queue head→tail for BFS, extraction order for A*.
        visited    : Visited / discovered / closed node ids, in the order
                     they were marked.
        order      : Traversal order (DFS visits, BFS dequeues, A* expansions).
        parent_map : {node_id: parent_id or None} search tree so far.
        g_score    : A* cost-from-start per discovered node.
        f_score    : A* g + h per discovered node.
        levels     : BFS distance in edges from the start node.
    """

    step_index: int
    frontier:   Tuple[str, ...]
    visited:    Tuple[str, ...]
    order:      Tuple[str, ...]
    parent_map: Mapping[str, Optional[str]]
    g_score:    Optional[Mapping[str, float]] = None
    f_score:    Optional[Mapping[str, float]] = None
    levels:     Optional[Mapping[str, int]]   = None

    @classmethod
    def build(
        cls,
        step_index: int,
        frontier: Iterable[str],
        visited: Iterable[str],
        order: Iterable[str],
        parent_map: Mapping[str, Optional[str]],
        g_score: Optional[Mapping[str, float]] = None,
        f_score: Optional[Mapping[str, float]] = None,
        levels: Optional[Mapping[str, int]] = None,
    ) -> "Snapshot":
        """Copy live engine containers into immutable ones."""
        return cls(
            step_index=step_index,
            frontier=tuple(frontier),
            visited=tuple(visited),
            order=tuple(order),
            parent_map=frozen_map(parent_map),
            g_score=frozen_map(g_score),
            f_score=frozen_map(f_score),
            levels=frozen_map(levels),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_index": self.step_index,
            "frontier":   list(self.frontier),
            "visited":    list(self.visited),
            "order":      list(self.order),
            "parent_map": dict(self.parent_map),
            "g_score":    dict(self.g_score) if self.g_score is not None else None,
            "f_score":    dict(self.f_score) if self.f_score is not None else None,
            "levels":     dict(self.levels) if self.levels is not None else None,
        }


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        kind            : What happened.
        node            : The node it happened to (None for FAILED / bare SOLVED).
        snapshot        : Full search state after this step.
        path            : SOLVED only — start→goal node ids, None for a
                          traversal that finished without a goal.
        superseded      : RELAX only — the entry that was replaced, None when
                          the neighbour is new to the frontier.
        entry           : RELAX only — the new frontier entry.
        pseudocode_line : 0-based line of the algorithm's PSEUDOCODE.
        explanation     : Human-readable "why" text.
    """

    kind:            StepKind
    node:            Optional[str]
    snapshot:        Snapshot
    path:            Optional[Tuple[str, ...]]  = None
    superseded:      Optional[FrontierEntry]    = None
    entry:           Optional[FrontierEntry]    = None
    pseudocode_line: int                        = 0
    explanation:     str                        = ""

    @property
    def step_index(self) -> int:
        return self.snapshot.step_index

    @property
    def is_terminal(self) -> bool:
        return self.kind.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind":            self.kind.value,
            "node":            self.node,
            "step_index":      self.step_index,
            "snapshot":        self.snapshot.to_dict(),
            "path":            list(self.path) if self.path is not None else None,
            "superseded":      self.superseded.to_dict() if self.superseded else None,
            "entry":           self.entry.to_dict() if self.entry else None,
            "pseudocode_line": self.pseudocode_line,
            "explanation":     self.explanation,
        }
