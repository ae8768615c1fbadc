"""
run.py — One Search Run
========================
Binds an algorithm to a graph and the engine state at the tail of the
run.  History is the only caller of advance().
"""

import logging
from typing import Optional

from algorithms import AlgoInfo, SearchParams, Snapshot, Step
from graph import Graph

logger = logging.getLogger(__name__)


class SearchRun:
    """
    Attributes:
        info             : Registry entry of the algorithm being run.
        params           : start / goal / heuristic.
        initial_snapshot : State before the first step (history cursor -1).
        exhausted        : True once advance() has returned None.
    """

    def __init__(self, info: AlgoInfo, graph: Graph, params: SearchParams):
        self.info = info
        self.graph = graph
        self.params = params
        self._state = info.init(graph, params)
        self.initial_snapshot: Snapshot = self._state.snapshot(-1)
        self.exhausted = False

    def advance(self) -> Optional[Step]:
        """One engine transition.  None once the terminal step has been produced."""
        if self.exhausted:
            return None
        transition = self.info.advance(self._state, self.graph)
        if transition is None:
            self.exhausted = True
            return None
        self._state = transition.state
        step = transition.step
        logger.debug("%s step %d: %s %s", self.info.key, step.step_index, step.kind.value, step.node)
        if step.is_terminal:
            self.exhausted = True
        return step

    @property
    def heuristic_table(self) -> Optional[dict]:
        h = getattr(self._state, "h", None)
        return dict(h) if h is not None else None
