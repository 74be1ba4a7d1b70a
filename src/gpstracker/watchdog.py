"""Dedicated watchdog thread that periodically triggers a staleness check."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable


class Watchdog:
    """Threaded ticker that hands ``on_tick`` to an asyncio loop.

    The thread only sleeps and schedules; the tick itself runs on the
    event loop so all subscription changes happen on one thread.
    """

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        on_tick: Callable[[], None],
        interval: float,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._on_tick = on_tick
        self._interval = interval
        self._logger = logger or logging.getLogger(__name__)
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        """Whether the watchdog thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name="gpstracker-watchdog",
            daemon=True,
        )
        self._thread = thread
        thread.start()
        self._logger.debug("Watchdog started interval=%.1fs", self._interval)

    def stop(self) -> None:
        thread = self._thread
        self._thread = None
        self._stop_event.set()
        if thread is None:
            return
        thread.join(timeout=5.0)
        self._logger.debug("Watchdog stopped")

    def _tick(self) -> None:
        try:
            self._on_tick()
        except Exception:
            self._logger.exception("Watchdog tick failed")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            try:
                self._loop.call_soon_threadsafe(self._tick)
            except RuntimeError:
                # Loop closed underneath us.
                self._logger.debug("Watchdog loop closed, exiting")
                return
