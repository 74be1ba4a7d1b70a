"""Location provider backed by a local gpsd daemon."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import gpsd

from gpstracker._constants import GPSD_DEFAULT_HOST, GPSD_DEFAULT_PORT
from gpstracker.exceptions import TrackerProviderError
from gpstracker.models.fix import LocationFix
from gpstracker.models.request import LocationRequest
from gpstracker.providers.base import FixCallback

# gpsd TPV modes: 0 unknown, 1 no fix, 2 2D, 3 3D.
_MIN_FIX_MODE = 2


def _utcnow() -> datetime:
    return datetime.now(UTC)


def fix_from_packet(packet: Any, *, now: datetime | None = None) -> LocationFix | None:
    """Convert a gpsd-py3 ``GpsResponse`` into a fix, or ``None`` without a position."""
    if getattr(packet, "mode", 0) < _MIN_FIX_MODE:
        return None
    raw_time = getattr(packet, "time", "") or ""
    try:
        timestamp = datetime.fromisoformat(raw_time) if raw_time else (now or _utcnow())
    except ValueError:
        timestamp = now or _utcnow()
    return LocationFix(timestamp=timestamp, latitude=packet.lat, longitude=packet.lon)


class GpsdLocationProvider:
    """Threaded gpsd reader that delivers fixes to a callback.

    The reader thread polls gpsd every ``request.interval`` seconds and
    calls the subscriber's callback from that thread.
    """

    def __init__(
        self,
        host: str = GPSD_DEFAULT_HOST,
        port: int = GPSD_DEFAULT_PORT,
        *,
        clock: Callable[[], datetime] = _utcnow,
        join_timeout: float = 1.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._clock = clock
        self._join_timeout = join_timeout
        self._logger = logger or logging.getLogger(__name__)
        self._thread: threading.Thread | None = None
        self._stop_event: threading.Event | None = None
        # Reader that did not exit within join_timeout (stuck in a gpsd read).
        self._lingering: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Whether the reader thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def is_enabled(self) -> bool:
        """Whether gpsd accepts a connection."""
        if self._reader_lingering():
            return False
        try:
            gpsd.connect(host=self._host, port=self._port)
        except (OSError, ValueError):
            self._logger.debug("gpsd not reachable at %s:%s", self._host, self._port, exc_info=True)
            return False
        return True

    def subscribe(self, request: LocationRequest, callback: FixCallback) -> None:
        """Start the reader thread, replacing any previous subscription.

        Raises
        ------
        TrackerProviderError
            If a previous reader is still blocked inside gpsd; gpsd-py3 keeps
            one module-level socket, so a second reader cannot be started.
        """
        self.unsubscribe()
        if self._reader_lingering():
            raise TrackerProviderError("Previous gpsd reader is still blocked; not starting another")
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(request, callback, stop_event),
            name="gpstracker-gpsd",
            daemon=True,
        )
        self._stop_event = stop_event
        self._thread = thread
        thread.start()
        self._logger.debug(
            "gpsd reader started host=%s port=%s interval=%.1fs",
            self._host,
            self._port,
            request.interval,
        )

    def unsubscribe(self) -> None:
        """Stop the reader thread if running."""
        thread = self._thread
        stop_event = self._stop_event
        self._thread = None
        self._stop_event = None
        if thread is None or stop_event is None:
            return
        stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout=self._join_timeout)
        if thread.is_alive():
            self._logger.warning(
                "gpsd reader did not stop within %.1fs; it will exit after its current read",
                self._join_timeout,
            )
            self._lingering = thread
            return
        self._logger.debug("gpsd reader stopped")

    def _reader_lingering(self) -> bool:
        if self._lingering is not None and not self._lingering.is_alive():
            self._lingering = None
        return self._lingering is not None

    def _accept(self, fix: LocationFix, last: LocationFix | None, request: LocationRequest) -> bool:
        if request.max_update_age > 0:
            age = (self._clock() - fix.timestamp).total_seconds()
            if age > request.max_update_age:
                self._logger.debug("Dropping stale gpsd fix age=%.1fs", age)
                return False
        if last is not None:
            gap = (fix.timestamp - last.timestamp).total_seconds()
            if gap < request.min_update_interval:
                return False
        return True

    def _run(self, request: LocationRequest, callback: FixCallback, stop_event: threading.Event) -> None:
        connected = False
        last_emitted: LocationFix | None = None
        while not stop_event.is_set():
            try:
                if not connected:
                    gpsd.connect(host=self._host, port=self._port)
                    connected = True
                packet = gpsd.get_current()
                fix = fix_from_packet(packet, now=self._clock())
            except Exception:
                self._logger.debug("gpsd read failed", exc_info=True)
                connected = False
            else:
                if stop_event.is_set():
                    break
                if fix is not None and self._accept(fix, last_emitted, request):
                    last_emitted = fix
                    try:
                        callback(fix)
                    except Exception:
                        self._logger.exception("Fix callback raised")
            stop_event.wait(request.interval)
