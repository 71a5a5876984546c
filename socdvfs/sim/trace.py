from __future__ import annotations

from typing import Iterable

from socdvfs.sim.interfaces import Sample


class SampleTrace:
    """
    Time-ordered sample trace with a bounded recent window.

    Retention policy (trim-on-append): once an appended batch leaves the
    window holding more than `capacity` samples, it is cut down to its newest
    `keep` samples, so the window never exceeds `capacity` between calls
    however large a batch is. Trimming only drops whole samples from the
    front; remaining entries are never reordered or modified.

    When retain_history is set, every sample is also kept in an unbounded
    history list for offline analysis (artifact writing, plots).
    """

    def __init__(
        self,
        capacity: int = 3000,
        keep: int = 1500,
        retain_history: bool = False,
    ):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        if not 0 < keep <= capacity:
            raise ValueError("keep must be in (0, capacity]")
        self.capacity = capacity
        self.keep = keep
        self.retain_history = retain_history
        self._window: list[Sample] = []
        self._history: list[Sample] = []

    def extend(self, samples: Iterable[Sample]) -> None:
        batch = list(samples)
        if not batch:
            return
        self._window.extend(batch)
        if len(self._window) > self.capacity:
            self._window = self._window[-self.keep:]
        if self.retain_history:
            self._history.extend(batch)

    def clear(self) -> None:
        self._window = []
        self._history = []

    def recent(self) -> list[Sample]:
        """Copy of the bounded recent window."""
        return list(self._window)

    def history(self) -> list[Sample]:
        """Copy of every sample since the last clear()."""
        if not self.retain_history:
            raise RuntimeError("trace was created without retain_history")
        return list(self._history)

    def last(self) -> Sample | None:
        return self._window[-1] if self._window else None

    def __len__(self) -> int:
        return len(self._window)
