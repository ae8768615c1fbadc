"""
scheduler.py — Animation Scheduler
===================================
The ONLY object a front end talks to during a run.  It owns the History,
the run lifecycle and the playback clock.

State machine:
    IDLE      →  start()              →  RUNNING (or PAUSED, autoplay=False)
    RUNNING   →  pause()              →  PAUSED
    PAUSED    →  resume() / play()    →  RUNNING
    RUNNING   →  terminal step        →  COMPLETED | FAILED
    COMPLETED / FAILED  →  play()     →  RUNNING  (replay, cursor behind tail)
    any       →  reset()              →  IDLE

Ticks:
  Every scheduled tick carries the run_id that was current when it was
  scheduled and the sequence number of the tick chain it belongs to.
  Scheduling a tick starts a new chain, so after pause(), reset(), a new
  start() or a pause/resume pair an older tick finds a different run_id,
  an outdated sequence number or a non-RUNNING status and does nothing.
  A timer that fails to cancel can never touch the wrong run or double
  the playback rate.

One tick = one History.step_forward().  Manual stepping goes through the
same History calls, so timed and manual playback expose identical steps.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from algorithms import AlgoInfo, SearchParams, Step, StepKind, get_algorithm, make_heuristic
from config import Config
from engine.history import History
from engine.metrics import RunMetrics, compute_metrics
from engine.run import SearchRun
from engine.timers import PollingTimer
from graph import Graph, IllegalStateError, InvalidInputError

logger = logging.getLogger(__name__)

Observer = Callable[[Dict[str, Any]], None]


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class RunStatus(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    COMPLETED = "completed"
    FAILED    = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.FAILED)


@dataclass(frozen=True)
class AlgorithmState:
    status:       RunStatus
    run_id:       int
    cursor_index: int
    steps_total:  int

    def to_dict(self) -> dict:
        return {
            "status":       self.status.value,
            "run_id":       self.run_id,
            "cursor_index": self.cursor_index,
            "steps_total":  self.steps_total,
        }


# ---------------------------------------------------------------------------
# AnimationScheduler
# ---------------------------------------------------------------------------
class AnimationScheduler:
    """
    Attributes:
        graph         : The GraphModel runs are started on.
        history       : Step log + cursor of the current run.
        timer         : Anything with call_later(delay, callback) → handle.
        base_interval : Seconds between ticks at speed 1.0.
        speed         : Current multiplier; interval = base_interval / speed.
        status        : Current RunStatus.
        run_id        : Incremented by every start() and reset().
    """

    def __init__(
        self,
        graph: Graph,
        timer=None,
        base_interval: Optional[float] = None,
        speed: Optional[float] = None,
    ):
        self.graph = graph
        self.history = History()
        self.timer = timer if timer is not None else PollingTimer()
        self.base_interval = Config.base_interval if base_interval is None else base_interval
        self.speed = self._clamp_speed(Config.default_speed if speed is None else speed)
        self.status = RunStatus.IDLE
        self.run_id = 0

        self._info: Optional[AlgoInfo] = None
        self._params: Optional[SearchParams] = None
        self._heuristic_name: str = ""
        self._handle = None
        self._tick_seq = 0
        self._observers: List[Observer] = []

        graph.subscribe(self._on_graph_changed)

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------
    def start(
        self,
        algorithm: str,
        start: str,
        goal: Optional[str] = None,
        heuristic: Union[str, Callable[[str], float], None] = None,
        speed: Optional[float] = None,
        autoplay: bool = True,
    ) -> int:
        """
        Begin a new run and return its run_id.

        `heuristic` is a callable node_id → float, or the name of a built-in
        heuristic.  It is ignored by algorithms that do not use one.
        Raises IllegalStateError unless idle, InvalidInputError on bad input.
        """
        if self.status is not RunStatus.IDLE:
            raise IllegalStateError(f"Cannot start a run while {self.status.value}; reset first")

        info = get_algorithm(algorithm)
        if info is None:
            raise InvalidInputError(f"Unknown algorithm: {algorithm!r}")

        h, h_name = None, ""
        if info.has_heuristic:
            h, h_name = self._resolve_heuristic(heuristic, goal)
        params = SearchParams(start=start, goal=goal, heuristic=h)

        # validates endpoints, weights and heuristic values
        run = SearchRun(info, self.graph, params)

        if speed is not None:
            self.set_speed(speed)

        self.run_id += 1
        self._info = info
        self._params = params
        self._heuristic_name = h_name
        self.graph.freeze()
        self.history.attach(run)

        logger.info(
            "Run %d started: %s from %s to %s (autoplay=%s)",
            self.run_id, info.key, start, goal, autoplay,
        )
        if autoplay:
            self.status = RunStatus.RUNNING
            self._schedule_tick()
        else:
            self.status = RunStatus.PAUSED
        self._notify()
        return self.run_id

    def play(self) -> None:
        """Start or continue timed playback."""
        if self.status is RunStatus.RUNNING:
            return
        if self.status is RunStatus.IDLE:
            raise IllegalStateError("No run to play; call start() first")
        if self.status.is_terminal and self.history.at_tail:
            raise IllegalStateError(f"Run {self.run_id} has already {self.status.value}")
        logger.info("Run %d playing from step %d", self.run_id, self.history.cursor)
        self.status = RunStatus.RUNNING
        self._schedule_tick()
        self._notify()

    def resume(self) -> None:
        if self.status is not RunStatus.PAUSED:
            raise IllegalStateError(f"Cannot resume while {self.status.value}")
        self.play()

    def pause(self) -> None:
        if self.status is not RunStatus.RUNNING:
            raise IllegalStateError(f"Cannot pause while {self.status.value}")
        self._cancel_tick()
        self.status = RunStatus.PAUSED
        logger.info("Run %d paused at step %d", self.run_id, self.history.cursor)
        self._notify()

    def reset(self) -> None:
        """Abandon the current run (if any) and return to idle."""
        self._cancel_tick()
        self.run_id += 1
        self.history.detach()
        self.graph.thaw()
        self.status = RunStatus.IDLE
        self._info = None
        self._params = None
        self._heuristic_name = ""
        logger.info("Scheduler reset (run_id now %d)", self.run_id)
        self._notify()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, multiplier: float) -> float:
        """
        Clamp `multiplier` to [Config.min_speed, Config.max_speed] and use it
        for every tick scheduled from now on.  Returns the applied value.
        """
        self.speed = self._clamp_speed(multiplier)
        logger.debug("Speed set to %.2fx", self.speed)
        return self.speed

    @staticmethod
    def _clamp_speed(multiplier) -> float:
        if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float)):
            raise InvalidInputError(f"Speed must be a number, got {multiplier!r}")
        if math.isnan(multiplier) or multiplier <= 0:
            raise InvalidInputError(f"Speed must be positive, got {multiplier!r}")
        return float(min(max(multiplier, Config.min_speed), Config.max_speed))

    @property
    def interval(self) -> float:
        return self.base_interval / self.speed

    # ------------------------------------------------------------------
    # Manual stepping
    # ------------------------------------------------------------------
    def step_forward_once(self) -> Optional[Step]:
        self._require_manual("step forward")
        step = self.history.step_forward()
        if step is not None:
            self._settle(step)
        self._notify()
        return step

    def step_backward_once(self) -> bool:
        self._require_manual("step backward")
        moved = self.history.step_backward()
        self._notify()
        return moved

    def jump_to(self, index: int) -> Optional[Step]:
        """
        Move the cursor to `index` (-1 = before the first step), producing
        steps as needed.  Same states as manual stepping.
        """
        self._require_manual("jump")
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInputError(f"Step index must be an integer, got {index!r}")
        if not self.history.goto(index):
            raise InvalidInputError(
                f"Step {index} is out of range; the run has {len(self.history)} step(s)"
            )
        step = self.history.current_step
        if step is not None:
            self._settle(step)
        self._notify()
        return step

    def rewind(self) -> None:
        """Move the cursor back before the first step."""
        self._require_manual("rewind")
        self.history.rewind()
        self._notify()

    def jump_to_end(self) -> Optional[Step]:
        """Produce every remaining step and expose the terminal one."""
        self._require_manual("jump to the end")
        step = self.history.run_to_completion()
        if step is not None:
            self._settle(step)
        self._notify()
        return step

    def _require_manual(self, action: str) -> None:
        if self.status is RunStatus.RUNNING:
            raise IllegalStateError(f"Cannot {action} while running; pause first")
        if self.status is RunStatus.IDLE:
            raise IllegalStateError(f"Cannot {action} without a run; call start() first")

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------
    def _schedule_tick(self) -> None:
        self._tick_seq += 1
        run_id, seq = self.run_id, self._tick_seq
        self._handle = self.timer.call_later(self.interval, lambda: self._on_tick(run_id, seq))

    def _cancel_tick(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_tick(self, run_id: int, seq: int) -> None:
        if run_id != self.run_id or seq != self._tick_seq or self.status is not RunStatus.RUNNING:
            logger.debug("Ignoring stale tick %d for run %d (current run %d, tick %d, %s)",
                         seq, run_id, self.run_id, self._tick_seq, self.status.value)
            return
        self._handle = None

        step = self.history.step_forward()
        if step is None:
            # run exhausted without a terminal step on the log
            self.status = RunStatus.COMPLETED
        else:
            self._settle(step)

        if self.status is RunStatus.RUNNING:
            self._schedule_tick()
        self._notify()

    def _settle(self, step: Step) -> None:
        """Enter the terminal status once the cursor sits on the terminal step."""
        if not step.is_terminal or not self.history.at_tail:
            return
        status = RunStatus.FAILED if step.kind is StepKind.FAILED else RunStatus.COMPLETED
        if status is not self.status:
            self.status = status
            logger.info("Run %d %s after %d step(s)", self.run_id, status.value, len(self.history))

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Call `callback(view)` after every state change.  Returns an unsubscribe function."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        if not self._observers:
            return
        view = self.view()
        for callback in list(self._observers):
            callback(view)

    @property
    def state(self) -> AlgorithmState:
        return AlgorithmState(
            status=self.status,
            run_id=self.run_id,
            cursor_index=self.history.cursor,
            steps_total=len(self.history),
        )

    @property
    def algorithm(self) -> Optional[AlgoInfo]:
        return self._info

    def view(self) -> Dict[str, Any]:
        """Everything a renderer needs for the frame at the cursor."""
        snap = self.history.current_snapshot
        step = self.history.current_step
        path = None
        if step is not None and step.kind is StepKind.SOLVED:
            path = list(step.path) if step.path is not None else None
        run = self.history.run
        return {
            "run_id":          self.run_id,
            "status":          self.status.value,
            "algorithm":       self._info.key if self._info else None,
            "start":           self._params.start if self._params else None,
            "goal":            self._params.goal if self._params else None,
            "heuristic":       self._heuristic_name or None,
            "cursor_index":    self.history.cursor,
            "steps_total":     len(self.history),
            "frontier":        list(snap.frontier) if snap else [],
            "visited":         list(snap.visited) if snap else [],
            "order":           list(snap.order) if snap else [],
            "parent_map":      dict(snap.parent_map) if snap else {},
            "g_score":         dict(snap.g_score) if snap and snap.g_score is not None else None,
            "f_score":         dict(snap.f_score) if snap and snap.f_score is not None else None,
            "levels":          dict(snap.levels) if snap and snap.levels is not None else None,
            "current_step":    step.to_dict() if step else None,
            "path":            path,
            "speed":           self.speed,
            "heuristic_table": run.heuristic_table if run is not None else None,
        }

    def metrics(self) -> Optional[RunMetrics]:
        if self._info is None:
            return None
        return compute_metrics(self.history, self.graph, self._heuristic_name)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _resolve_heuristic(self, heuristic, goal: Optional[str]):
        if heuristic is None:
            heuristic = "euclidean"
        if callable(heuristic):
            return heuristic, getattr(heuristic, "__name__", "custom")
        if not isinstance(heuristic, str):
            raise InvalidInputError(f"Heuristic must be a name or a callable, got {heuristic!r}")
        if goal is None or not self.graph.has_node(goal):
            # let the algorithm report the bad goal
            return None, heuristic
        return make_heuristic(heuristic, self.graph, goal), heuristic

    def _on_graph_changed(self, graph: Graph) -> None:
        # only reachable while idle: a frozen graph refuses edits
        self.history.clear()
