"""
metrics.py — Run Analytics
===========================
Computes the analytics card for a run from its recorded History.

    metrics = compute_metrics(history, graph, heuristic="euclidean")
    metrics.to_dict()

Only the steps recorded so far are looked at, so metrics of a paused run
describe the run up to its last recorded step.
"""

from dataclasses import asdict, dataclass
from typing import Optional

from algorithms.base import path_cost
from algorithms.step import StepKind
from engine.history import History
from graph import Graph


@dataclass
class RunMetrics:
    algo_key:       str   = ""
    algo_label:     str   = ""
    start:          str   = ""
    goal:           Optional[str] = None
    nodes_visited:  int   = 0          # length of the traversal order
    peak_frontier:  int   = 0          # largest frontier seen, initial state included
    path_length:    int   = 0          # number of edges on the final path
    path_cost:      float = 0.0        # total weight of the final path
    total_steps:    int   = 0          # number of Steps recorded
    path_found:     bool  = False
    finished:       bool  = False      # log ends with SOLVED / FAILED
    heuristic:      str   = ""         # A* only

    def to_dict(self) -> dict:
        return asdict(self)


def compute_metrics(history: History, graph: Graph, heuristic: str = "") -> RunMetrics:
    run = history.run
    if run is None:
        return RunMetrics()

    steps = history.steps
    last = steps[-1] if steps else None

    peak = len(run.initial_snapshot.frontier)
    for step in steps:
        peak = max(peak, len(step.snapshot.frontier))

    path = last.path if last is not None and last.kind is StepKind.SOLVED else None

    return RunMetrics(
        algo_key=run.info.key,
        algo_label=run.info.label,
        start=run.params.start,
        goal=run.params.goal,
        nodes_visited=len(last.snapshot.order) if last is not None else 0,
        peak_frontier=peak,
        path_length=len(path) - 1 if path else 0,
        path_cost=path_cost(graph, path) if path else 0.0,
        total_steps=len(steps),
        path_found=bool(path),
        finished=history.is_complete,
        heuristic=heuristic,
    )
