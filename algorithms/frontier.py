"""
frontier.py — Priority Frontier for A*
=======================================
A min-priority queue over node ids with decrease-key.

Ordering is the tuple (key, tie, seq):
  • key  – the priority (A* passes f = g + h)
  • tie  – secondary key on equal priority (A* passes h, so the node that
           looks closer to the goal wins)
  • seq  – the node's FIRST insertion number; it is kept across
           decrease_key, so extraction order is fully determined by the
           inputs and never by heap internals.

Implementation: heapq with invalidated entries.  decrease_key marks the
old heap entry dead and pushes a replacement; extract_min discards dead
entries as it meets them.  There is never more than one LIVE entry per
node, so callers see true decrease-key semantics.
"""

import heapq
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class FrontierEntry:
    node: str
    key:  float
    tie:  float
    seq:  int

    def to_dict(self) -> dict:
        return {"node": self.node, "key": self.key, "tie": self.tie, "seq": self.seq}


class PriorityFrontier:

    _REMOVED = "<removed>"

    def __init__(self):
        self._heap: List[list] = []                 # [key, tie, seq, node]
        self._live: Dict[str, list] = {}            # node → its live heap entry
        self._seq = 0

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, node: str, key: float, tie: float = 0.0) -> FrontierEntry:
        if node in self._live:
            raise KeyError(f"{node!r} is already in the frontier; use decrease_key()")
        entry = [key, tie, self._seq, node]
        self._seq += 1
        self._live[node] = entry
        heapq.heappush(self._heap, entry)
        return _as_entry(entry)

    def decrease_key(self, node: str, new_key: float) -> Optional[FrontierEntry]:
        """
        Lower `node`'s key.  Returns the superseded entry, or None when
        `new_key` is not strictly lower (no-op).
        """
        old = self._live.get(node)
        if old is None:
            raise KeyError(f"{node!r} is not in the frontier")
        if new_key >= old[0]:
            return None
        superseded = _as_entry(old)
        old[-1] = self._REMOVED
        entry = [new_key, old[1], old[2], node]
        self._live[node] = entry
        heapq.heappush(self._heap, entry)
        return superseded

    def extract_min(self) -> str:
        while self._heap:
            entry = heapq.heappop(self._heap)
            node = entry[-1]
            if node is not self._REMOVED:
                del self._live[node]
                return node
        raise IndexError("extract_min from an empty frontier")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def contains(self, node: str) -> bool:
        return node in self._live

    def entry(self, node: str) -> Optional[FrontierEntry]:
        live = self._live.get(node)
        return _as_entry(live) if live is not None else None

    def snapshot(self) -> Tuple[FrontierEntry, ...]:
        """Live entries in extraction order."""
        return tuple(_as_entry(e) for e in sorted(self._live.values(), key=lambda e: e[:3]))

    def copy(self) -> "PriorityFrontier":
        """Independent frontier with the same live entries and counter position."""
        clone = PriorityFrontier()
        clone._live = {node: list(e) for node, e in self._live.items()}
        clone._heap = list(clone._live.values())
        heapq.heapify(clone._heap)
        clone._seq = self._seq
        return clone

    def __contains__(self, node: str) -> bool:
        return self.contains(node)

    def __len__(self) -> int:
        return len(self._live)

    def __bool__(self) -> bool:
        return bool(self._live)

    def __iter__(self) -> Iterator[str]:
        return (e.node for e in self.snapshot())

    def __repr__(self) -> str:
        return f"PriorityFrontier({[(e.node, e.key) for e in self.snapshot()]})"


def _as_entry(e: list) -> FrontierEntry:
    return FrontierEntry(node=e[3], key=e[0], tie=e[1], seq=e[2])
