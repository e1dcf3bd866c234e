"""Idle-priority callbacks for work that must run after the current UI event."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Protocol


class IdleScheduler(Protocol):
    def call_when_idle(self, callback: Callable[[], None]) -> None:
        ...


class IdleQueue:
    """Scheduler for headless sessions and tests; callbacks run on :meth:`run_pending`."""

    def __init__(self) -> None:
        self._callbacks: deque[Callable[[], None]] = deque()

    def __len__(self) -> int:
        return len(self._callbacks)

    def call_when_idle(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def run_pending(self) -> int:
        """Run the callbacks queued so far; ones they enqueue wait for the next call."""

        count = len(self._callbacks)
        for _ in range(count):
            self._callbacks.popleft()()
        return count


class TkIdleScheduler:
    """Defers callbacks until the Tk event loop has drained pending events."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def call_when_idle(self, callback: Callable[[], None]) -> None:
        self._widget.after_idle(callback)
