"""Shared constants for gpstracker."""

from __future__ import annotations

#: Requested update interval in seconds.
LOCATION_UPDATES_INTERVAL_S: float = 5.0

#: Fastest allowed interval between location updates in seconds.
LOCATION_MIN_UPDATE_DELAY_S: float = 1.0

#: Longest a location update may be delayed in seconds.
LOCATION_MAX_UPDATE_DELAY_S: float = 6.0

#: Oldest fix a provider may hand out, in seconds.
LOCATION_MAX_UPDATE_AGE_S: float = 5.0

#: How often the watchdog checks for stale fixes.
WATCHDOG_INTERVAL_S: float = 30.0

#: Staleness after which the watchdog restarts the subscription.
WATCHDOG_TIMEOUT_S: float = 60.0

#: Total timeout for a single submission POST.
HTTP_TIMEOUT_S: float = 30.0

#: Query parameter carrying the static token.
AUTH_QUERY_PARAM = "auth"

GPSD_DEFAULT_HOST = "127.0.0.1"
GPSD_DEFAULT_PORT = 2947

USER_AGENT = "gpstracker/1.0"
