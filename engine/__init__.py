"""
engine/
-------
Recording & playback layer.

    from engine import AnimationScheduler, History, compute_metrics
"""

from engine.run       import SearchRun
from engine.history   import History
from engine.timers    import AsyncioTimer, PollingTimer, TimerHandle
from engine.metrics   import RunMetrics, compute_metrics
from engine.scheduler import AlgorithmState, AnimationScheduler, RunStatus

__all__ = [
    "SearchRun",
    "History",
    "AsyncioTimer",
    "PollingTimer",
    "TimerHandle",
    "RunMetrics",
    "compute_metrics",
    "AlgorithmState",
    "AnimationScheduler",
    "RunStatus",
]
