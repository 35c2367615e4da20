"""Periodic tick sources that drive time mode.

A clock runs at most one periodic callback at a time, and ``start`` and
``stop`` are idempotent.  ``ThreadClock.stop`` does not wait for a callback
that is already executing; callers that need a hard cut-off check their own
state inside the callback, as ``GamePlay`` does.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class Clock(Protocol):
    @property
    def running(self) -> bool: ...

    def start(self, callback: TickCallback, interval: float) -> None: ...

    def stop(self) -> None: ...


class ThreadClock:
    """Calls *callback* every *interval* seconds on a daemon thread."""

    def __init__(self) -> None:
        self._thread: threading.Thread | None = None
        self._last_thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def start(self, callback: TickCallback, interval: float) -> None:
        with self._lock:
            if self.running:
                return
            # Each run gets its own event so a stopped thread never sees a
            # later start clearing it.
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(
                target=self._run,
                args=(callback, interval, stop_event),
                name="sum-stack-clock",
                daemon=True,
            )
            self._thread.start()
            self._last_thread = self._thread

    def stop(self) -> None:
        with self._lock:
            self._stop_event.set()
            self._thread = None

    def join(self, timeout: float | None = None) -> None:
        """Wait for the last started thread to exit (after ``stop``)."""
        thread = self._last_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    @staticmethod
    def _run(callback: TickCallback, interval: float, stop_event: threading.Event) -> None:
        while not stop_event.wait(interval):
            try:
                callback()
            except Exception:
                logger.exception("Clock callback failed; stopping clock.")
                stop_event.set()


class ManualClock:
    """A clock advanced by hand, e.g. once per rendered frame or in tests."""

    def __init__(self) -> None:
        self._callback: TickCallback | None = None
        self._interval = 0.0
        self._pending = 0.0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback, interval: float) -> None:
        if self._callback is not None:
            return
        self._callback = callback
        self._interval = interval
        self._pending = 0.0

    def stop(self) -> None:
        self._callback = None
        self._pending = 0.0

    def advance(self, seconds: float) -> int:
        """Let *seconds* pass; return how many ticks fired."""
        fired = 0
        self._pending += seconds
        # A tick may stop the clock, so re-check the callback every time.
        while self._callback is not None and self._pending + 1e-9 >= self._interval:
            self._pending -= self._interval
            self._callback()
            fired += 1
        return fired
