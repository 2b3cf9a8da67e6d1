"""Time-debounced, bounded undo history for text buffers."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

UNDO_GROUP_INTERVAL = 0.5  # seconds
MAX_UNDO_HISTORY = 100


@dataclass(frozen=True)
class UndoSnapshot:
    """Immutable ``(text, cursor)`` pair recorded by :class:`UndoManager`."""

    text: str = ""
    cursor: int = 0


class UndoManager:
    """Ordered snapshot history with a current position.

    Rapid edits are grouped: :meth:`save` only records a snapshot when forced
    or when more than ``group_interval`` seconds passed since the last
    recorded save. Snapshots are immutable, so they are stored without
    copying.
    """

    def __init__(
        self,
        *,
        capacity: int = MAX_UNDO_HISTORY,
        group_interval: float = UNDO_GROUP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._group_interval = group_interval
        self._clock = clock
        self._history: list[UndoSnapshot] = [UndoSnapshot()]
        self._position = 0
        self._last_save = clock()

    @property
    def position(self) -> int:
        return self._position

    @property
    def length(self) -> int:
        return len(self._history)

    @property
    def capacity(self) -> int:
        return self._capacity

    def snapshots(self) -> list[UndoSnapshot]:
        return list(self._history)

    def save(self, snapshot: UndoSnapshot, force: bool = False) -> bool:
        """Record *snapshot* if forced or the grouping interval elapsed.

        Returns ``True`` when a save was performed (even if the snapshot was
        a duplicate of the newest entry and therefore not pushed).
        """
        now = self._clock()
        if not force and now - self._last_save <= self._group_interval:
            return False

        # Abandon the redo tail
        del self._history[self._position + 1 :]

        if self._history[-1] != snapshot:
            self._history.append(snapshot)
            self._position = len(self._history) - 1

            if len(self._history) > self._capacity:
                del self._history[0]
                self._position = max(0, self._position - 1)

        self._last_save = now
        return True

    def undo(self) -> UndoSnapshot | None:
        """Step back one position, or return ``None`` at the earliest entry."""
        if self._position == 0:
            return None
        self._position -= 1
        return self._history[self._position]

    def clear(self) -> None:
        self._history = [UndoSnapshot()]
        self._position = 0
        self._last_save = self._clock()
