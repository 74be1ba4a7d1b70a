"""Custom exception hierarchy for gpstracker."""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for all gpstracker errors."""


class TrackerConfigError(TrackerError):
    """Invalid or missing configuration."""


class TrackerPermissionError(TrackerError):
    """Location permission has not been granted.

    ``LocationPoller.start()`` never raises this; it is used to describe
    the denial in logs and by callers that want to surface it.
    """


class TrackerProviderError(TrackerError):
    """The location provider cannot produce fixes."""


class TrackerSubmissionError(TrackerError):
    """HTTP-level failure while submitting a fix (network, non-2xx)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
