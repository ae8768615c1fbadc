"""
history.py — Step Recorder & Cursor
====================================
Append-only log of Steps plus the cursor that decides what observers see.

    cursor == -1            → the run's initial snapshot (pre-start)
    cursor == i (0 … n-1)   → steps[i].snapshot

Moving the cursor never recomputes anything:

  • step_backward() only decrements the cursor; the step stays in the log
  • step_forward() re-exposes an already-recorded step when the cursor is
    behind the tail, and only at the tail asks the engine for a new one

Because Steps are immutable, backward-then-forward over k steps exposes
exactly the state it started from.
"""

import logging
from typing import List, Optional, Sequence

from algorithms import Snapshot, Step
from engine.run import SearchRun

logger = logging.getLogger(__name__)


class History:
    """
    Attributes:
        run    : The SearchRun feeding new steps, or None when empty.
        cursor : Index of the exposed step; -1 = before the first step.
    """

    def __init__(self, run: Optional[SearchRun] = None):
        self.run: Optional[SearchRun] = run
        self._steps: List[Step] = []
        self.cursor: int = -1

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def attach(self, run: SearchRun) -> None:
        """Start a new per-run log."""
        self.clear()
        self.run = run

    def clear(self) -> None:
        if self._steps:
            logger.debug("Truncating history (%d step(s))", len(self._steps))
        self._steps = []
        self.cursor = -1

    def detach(self) -> None:
        self.clear()
        self.run = None

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record(self, step: Step) -> None:
        """Append `step` and move the cursor to it."""
        if step.step_index != len(self._steps):
            raise ValueError(
                f"Step index {step.step_index} does not extend a log of {len(self._steps)} step(s)"
            )
        self._steps.append(step)
        self.cursor = len(self._steps) - 1

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> Optional[Step]:
        """
        Expose the next step.  Returns it, or None when the cursor is at the
        tail and the run has nothing more to produce.
        """
        if self.cursor < self.last_index:
            self.cursor += 1
            return self._steps[self.cursor]
        return self._produce()

    def step_backward(self) -> bool:
        """Move the cursor back one step.  False if already pre-start."""
        if self.cursor <= -1:
            return False
        self.cursor -= 1
        return True

    def goto(self, index: int) -> bool:
        """Jump to `index`, producing steps as needed.  False if out of range."""
        if index < -1:
            return False
        while index > self.last_index:
            if self._produce() is None:
                return False
        self.cursor = index
        return True

    def rewind(self) -> None:
        self.cursor = -1

    def run_to_completion(self) -> Optional[Step]:
        """Produce every remaining step and park the cursor on the last one."""
        while self._produce() is not None:
            pass
        self.cursor = self.last_index
        return self.current_step

    def _produce(self) -> Optional[Step]:
        """Ask the engine for one new step and record it."""
        if self.run is None:
            return None
        step = self.run.advance()
        if step is not None:
            self.record(step)
        return step

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def steps(self) -> Sequence[Step]:
        return tuple(self._steps)

    @property
    def last_index(self) -> int:
        return len(self._steps) - 1

    @property
    def at_tail(self) -> bool:
        return self.cursor == self.last_index

    @property
    def is_complete(self) -> bool:
        """The log ends with a terminal step."""
        return bool(self._steps) and self._steps[-1].is_terminal

    @property
    def current_step(self) -> Optional[Step]:
        if 0 <= self.cursor < len(self._steps):
            return self._steps[self.cursor]
        return None

    @property
    def current_snapshot(self) -> Optional[Snapshot]:
        step = self.current_step
        if step is not None:
            return step.snapshot
        return self.run.initial_snapshot if self.run is not None else None

    def __len__(self) -> int:
        return len(self._steps)

    def __getitem__(self, index: int) -> Step:
        return self._steps[index]
