"""Poller state shared between the fix callback and the watchdog.

The fix callback may run on the provider's thread while the watchdog
runs on the event loop, so every access goes through a lock.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from datetime import datetime


class PollerStatus(enum.Enum):
    STOPPED = "stopped"
    SUBSCRIBED = "subscribed"


@dataclass(frozen=True)
class PollerSnapshot:
    """Point-in-time copy of :class:`PollerState`."""

    status: PollerStatus
    last_fix_timestamp: datetime | None
    subscribed_at: datetime | None
    restart_count: int


@dataclass(frozen=True)
class SubmissionStats:
    dispatched: int = 0
    sent: int = 0
    failed: int = 0


class PollerState:
    """Lock-protected poller state."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._status = PollerStatus.STOPPED
        self._tracking = False
        self._last_fix_timestamp: datetime | None = None
        self._subscribed_at: datetime | None = None
        self._restart_count = 0
        self._dispatched = 0
        self._sent = 0
        self._failed = 0

    @property
    def status(self) -> PollerStatus:
        with self._lock:
            return self._status

    @property
    def is_subscribed(self) -> bool:
        return self.status is PollerStatus.SUBSCRIBED

    @property
    def is_tracking(self) -> bool:
        """Whether updates are wanted, subscribed or not (set by start, cleared by stop)."""
        with self._lock:
            return self._tracking

    def set_tracking(self, tracking: bool) -> None:
        with self._lock:
            self._tracking = tracking

    @property
    def last_fix_timestamp(self) -> datetime | None:
        with self._lock:
            return self._last_fix_timestamp

    def record_fix(self, timestamp: datetime) -> None:
        with self._lock:
            self._last_fix_timestamp = timestamp

    def mark_subscribed(self, now: datetime) -> None:
        with self._lock:
            self._status = PollerStatus.SUBSCRIBED
            self._subscribed_at = now

    def mark_stopped(self) -> None:
        with self._lock:
            self._status = PollerStatus.STOPPED

    def record_restart(self) -> int:
        with self._lock:
            self._restart_count += 1
            return self._restart_count

    def staleness(self, now: datetime) -> float | None:
        """Seconds since the later of the last fix and the last (re)subscribe.

        Returns ``None`` when nothing has ever been subscribed.
        """
        with self._lock:
            marks = [ts for ts in (self._last_fix_timestamp, self._subscribed_at) if ts is not None]
        if not marks:
            return None
        return (now - max(marks)).total_seconds()

    def record_dispatch(self) -> None:
        with self._lock:
            self._dispatched += 1

    def record_sent(self) -> None:
        with self._lock:
            self._sent += 1

    def record_failure(self) -> None:
        with self._lock:
            self._failed += 1

    def stats(self) -> SubmissionStats:
        with self._lock:
            return SubmissionStats(dispatched=self._dispatched, sent=self._sent, failed=self._failed)

    def snapshot(self) -> PollerSnapshot:
        with self._lock:
            return PollerSnapshot(
                status=self._status,
                last_fix_timestamp=self._last_fix_timestamp,
                subscribed_at=self._subscribed_at,
                restart_count=self._restart_count,
            )
