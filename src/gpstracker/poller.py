"""Location poller with a self-healing watchdog."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import aiohttp

from gpstracker._transport import HttpSubmissionTransport, SubmissionTransport
from gpstracker.config import TrackerConfig
from gpstracker.exceptions import TrackerSubmissionError
from gpstracker.models.fix import LocationFix
from gpstracker.models.payload import SubmissionPayload
from gpstracker.providers.base import LocationProvider, PermissionChecker, StaticPermissions, has_location_permission
from gpstracker.state import PollerSnapshot, PollerState, PollerStatus, SubmissionStats
from gpstracker.watchdog import Watchdog

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LocationPoller:
    """Subscribes to a location provider and forwards every fix to the endpoint.

    Usage::

        async with LocationPoller(config, GpsdLocationProvider()) as poller:
            poller.start()
            ...

    Each fix becomes one fire-and-forget submission task. A watchdog
    thread restarts the subscription when no fix has arrived for
    ``config.watchdog_timeout`` seconds.
    """

    def __init__(
        self,
        config: TrackerConfig,
        provider: LocationProvider,
        *,
        permissions: PermissionChecker | None = None,
        transport: SubmissionTransport | None = None,
        http_session: aiohttp.ClientSession | None = None,
        clock: Callable[[], datetime] = _utcnow,
        state: PollerState | None = None,
    ) -> None:
        config.validate()
        self._config = config
        self._request = config.location_request()
        self._provider = provider
        self._permissions = permissions or StaticPermissions()
        self._transport = transport
        self._external_session = http_session is not None
        self._http_session = http_session
        self._clock = clock
        self._state = state or PollerState()
        self._subscription_lock = threading.RLock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._watchdog: Watchdog | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LocationPoller:
        self._loop = asyncio.get_running_loop()
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpSubmissionTransport(self._config, self._http_session)
        self._watchdog = Watchdog(
            loop=self._loop,
            on_tick=self.watchdog_tick,
            interval=self._config.watchdog_interval,
        )
        self._watchdog.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.stop()
        if self._watchdog is not None:
            self._watchdog.stop()
            self._watchdog = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None
        self._loop = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def status(self) -> PollerStatus:
        return self._state.status

    @property
    def is_subscribed(self) -> bool:
        return self._state.is_subscribed

    @property
    def last_fix_timestamp(self) -> datetime | None:
        return self._state.last_fix_timestamp

    @property
    def pending_submissions(self) -> int:
        """Submission tasks that have not finished yet."""
        return len(self._tasks)

    def snapshot(self) -> PollerSnapshot:
        return self._state.snapshot()

    def stats(self) -> SubmissionStats:
        return self._state.stats()

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Request location updates from the provider.

        Logs and returns without subscribing when location permission is
        missing; the watchdog retries on its next tick. Calling it while
        already subscribed is a no-op.
        """
        with self._subscription_lock:
            self._state.set_tracking(True)
            if self._state.is_subscribed:
                _logger.debug("Already subscribed; ignoring start()")
                return
            self._subscribe()

    def stop(self) -> None:
        """Cancel the subscription and abandon outstanding submissions."""
        with self._subscription_lock:
            self._state.set_tracking(False)
            if self._state.is_subscribed:
                self._provider.unsubscribe()
                self._state.mark_stopped()
                _logger.debug("Location updates stopped")
        for task in list(self._tasks):
            task.cancel()

    def _subscribe(self) -> None:
        if not has_location_permission(self._permissions):
            _logger.warning("Location permission not granted; not requesting location updates")
            self._state.mark_stopped()
            return
        try:
            if not self._provider.is_enabled():
                _logger.warning("Location provider is disabled; subscribing anyway and relying on the watchdog")
            self._provider.subscribe(self._request, self.on_fix_received)
        except Exception:
            _logger.warning("Requesting location updates failed; retrying on next watchdog tick", exc_info=True)
            self._state.mark_stopped()
            return
        self._state.mark_subscribed(self._clock())
        _logger.debug(
            "Requested location updates interval=%.1fs min=%.1fs max_delay=%.1fs accuracy=%s",
            self._request.interval,
            self._request.min_update_interval,
            self._request.max_update_delay,
            self._request.accuracy,
        )

    def watchdog_tick(self, now: datetime | None = None) -> None:
        """Restart the subscription if fixes have gone stale.

        While tracking but unsubscribed (a previous attempt failed), every
        tick tries to subscribe again.
        """
        now = now or self._clock()
        with self._subscription_lock:
            if not self._state.is_tracking:
                return
            if not self._state.is_subscribed:
                _logger.debug("Not subscribed; retrying location updates")
                self._subscribe()
                return
            elapsed = self._state.staleness(now)
            if elapsed is None:
                return
            _logger.debug("Time since last fix: %.0fs", elapsed)
            if elapsed < self._config.watchdog_timeout:
                return
            restarts = self._state.record_restart()
            _logger.warning(
                "No fix received in %.0fs; restarting location updates (restart #%d)",
                elapsed,
                restarts,
            )
            try:
                self._provider.unsubscribe()
            except Exception:
                _logger.warning("Tearing down location updates failed", exc_info=True)
            self._state.mark_stopped()
            self._subscribe()

    # ------------------------------------------------------------------
    # Fix handling
    # ------------------------------------------------------------------

    def on_fix_received(self, fix: LocationFix) -> None:
        """Record *fix* and dispatch its submission without blocking.

        Safe to call from the provider's own thread. Fixes arriving while
        the poller is not subscribed are dropped.
        """
        if not self._state.is_subscribed:
            _logger.debug("Not subscribed; dropping fix %s", fix.timestamp)
            return
        self._state.record_fix(fix.timestamp)
        payload = SubmissionPayload.from_fix(fix)
        _logger.debug("Fix received time=%s position=%s", payload.time, payload.gpsposition)

        loop = self._loop
        if loop is None:
            _logger.debug("Poller not running; dropping submission")
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._dispatch(payload)
        else:
            try:
                loop.call_soon_threadsafe(self._dispatch, payload)
            except RuntimeError:
                _logger.debug("Event loop closed; dropping submission")

    def _dispatch(self, payload: SubmissionPayload) -> None:
        loop = self._loop
        if loop is None or not self._state.is_subscribed:
            return
        task = loop.create_task(self._submit(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._state.record_dispatch()

    async def _submit(self, payload: SubmissionPayload) -> None:
        transport = self._transport
        if transport is None:
            return
        try:
            await transport.submit(payload)
        except TrackerSubmissionError as exc:
            self._state.record_failure()
            _logger.warning("Dropping fix %s: %s", payload.time, exc)
        except Exception:
            self._state.record_failure()
            _logger.warning("Dropping fix %s after unexpected error", payload.time, exc_info=True)
        else:
            self._state.record_sent()
