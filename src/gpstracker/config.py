"""Tracker configuration for gpstracker."""

from __future__ import annotations

import dataclasses
import os
from typing import Any
from urllib.parse import urlsplit

from pydantic import ValidationError

from gpstracker._constants import (
    GPSD_DEFAULT_HOST,
    GPSD_DEFAULT_PORT,
    HTTP_TIMEOUT_S,
    LOCATION_MAX_UPDATE_AGE_S,
    LOCATION_MAX_UPDATE_DELAY_S,
    LOCATION_MIN_UPDATE_DELAY_S,
    LOCATION_UPDATES_INTERVAL_S,
    WATCHDOG_INTERVAL_S,
    WATCHDOG_TIMEOUT_S,
)
from gpstracker.exceptions import TrackerConfigError
from gpstracker.models.request import Accuracy, LocationRequest


@dataclasses.dataclass(frozen=True)
class TrackerConfig:
    """Tracker configuration.

    Parameters
    ----------
    endpoint_url : str
        Topic URL fixes are POSTed to (e.g. an ntfy topic, including port).
    token : str
        Static token sent as the ``auth`` query parameter.
    interval : float
        Requested seconds between location updates.
    min_update_interval : float
        Fastest the provider may deliver updates, in seconds.
    max_update_delay : float
        Longest an update may be held back by the provider, in seconds.
    max_update_age : float
        Oldest cached fix the provider may deliver, in seconds.
    accuracy : Accuracy
        Requested accuracy class.
    watchdog_interval : float
        Seconds between watchdog checks.
    watchdog_timeout : float
        Seconds without a fix before the subscription is restarted.
    http_timeout : float
        Total timeout for one submission POST. ``0`` leaves aiohttp's
        default in place.
    gpsd_host : str
        Host of the gpsd daemon used by the bundled provider.
    gpsd_port : int
        Port of the gpsd daemon.
    """

    endpoint_url: str
    token: str
    interval: float = LOCATION_UPDATES_INTERVAL_S
    min_update_interval: float = LOCATION_MIN_UPDATE_DELAY_S
    max_update_delay: float = LOCATION_MAX_UPDATE_DELAY_S
    max_update_age: float = LOCATION_MAX_UPDATE_AGE_S
    accuracy: Accuracy = Accuracy.HIGH
    watchdog_interval: float = WATCHDOG_INTERVAL_S
    watchdog_timeout: float = WATCHDOG_TIMEOUT_S
    http_timeout: float = HTTP_TIMEOUT_S
    gpsd_host: str = GPSD_DEFAULT_HOST
    gpsd_port: int = GPSD_DEFAULT_PORT

    def location_request(self) -> LocationRequest:
        """Build the request handed to the location provider."""
        try:
            return LocationRequest(
                interval=self.interval,
                min_update_interval=self.min_update_interval,
                max_update_delay=self.max_update_delay,
                max_update_age=self.max_update_age,
                accuracy=self.accuracy,
            )
        except ValidationError as exc:
            raise TrackerConfigError(f"Invalid location request settings: {exc}") from exc

    def validate(self) -> None:
        """Check the configuration, raising :class:`TrackerConfigError` on problems."""
        parts = urlsplit(self.endpoint_url.strip())
        if parts.scheme not in {"http", "https"} or not parts.netloc:
            raise TrackerConfigError(f"endpoint_url must be an http(s) URL, got {self.endpoint_url!r}")
        if not self.token.strip():
            raise TrackerConfigError("token must be non-empty")
        if self.watchdog_interval <= 0:
            raise TrackerConfigError("watchdog_interval must be positive")
        if self.watchdog_timeout <= 0:
            raise TrackerConfigError("watchdog_timeout must be positive")
        if self.http_timeout < 0:
            raise TrackerConfigError("http_timeout must not be negative")
        if not 0 < self.gpsd_port < 65536:
            raise TrackerConfigError(f"gpsd_port out of range: {self.gpsd_port}")
        self.location_request()

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackerConfig:
        """Create configuration from environment variables.

        Reads ``GPSTRACKER_ENDPOINT_URL``, ``GPSTRACKER_TOKEN`` and the
        optional ``GPSTRACKER_*`` tuning variables. Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "GPSTRACKER_ENDPOINT_URL": "endpoint_url",
            "GPSTRACKER_TOKEN": "token",
            "GPSTRACKER_GPSD_HOST": "gpsd_host",
        }
        _ENV_FLOAT_MAP = {
            "GPSTRACKER_INTERVAL": "interval",
            "GPSTRACKER_MIN_UPDATE_INTERVAL": "min_update_interval",
            "GPSTRACKER_MAX_UPDATE_DELAY": "max_update_delay",
            "GPSTRACKER_MAX_UPDATE_AGE": "max_update_age",
            "GPSTRACKER_WATCHDOG_INTERVAL": "watchdog_interval",
            "GPSTRACKER_WATCHDOG_TIMEOUT": "watchdog_timeout",
            "GPSTRACKER_HTTP_TIMEOUT": "http_timeout",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(val)
            except ValueError as exc:
                raise TrackerConfigError(f"{env_key} is not a number: {val!r}") from exc

        port_env = env.get("GPSTRACKER_GPSD_PORT")
        if port_env is not None and "gpsd_port" not in overrides:
            try:
                config_kwargs["gpsd_port"] = int(port_env)
            except ValueError as exc:
                raise TrackerConfigError(f"GPSTRACKER_GPSD_PORT is not an integer: {port_env!r}") from exc

        accuracy_env = env.get("GPSTRACKER_ACCURACY")
        if accuracy_env is not None and "accuracy" not in overrides:
            try:
                config_kwargs["accuracy"] = Accuracy(accuracy_env.strip().lower())
            except ValueError as exc:
                raise TrackerConfigError(f"Unknown accuracy class: {accuracy_env!r}") from exc

        config_kwargs.update(overrides)

        missing = [name for name in ("endpoint_url", "token") if name not in config_kwargs]
        if missing:
            raise TrackerConfigError(f"Missing required configuration: {', '.join(missing)}")

        return cls(**config_kwargs)
