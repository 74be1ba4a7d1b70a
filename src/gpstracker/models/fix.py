"""Location fix model."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator

from gpstracker.models._base import TrackerBaseModel, UtcTimestamp


class LocationFix(TrackerBaseModel):
    """A single GPS sample produced by a location provider.

    Parameters
    ----------
    timestamp : datetime
        When the fix was taken (UTC).
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    """

    timestamp: UtcTimestamp = Field(validation_alias=AliasChoices("timestamp", "time"))
    latitude: float = Field(ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(ge=-180.0, le=180.0, validation_alias=AliasChoices("longitude", "lon", "lng"))

    @field_validator("latitude", "longitude", mode="after")
    @classmethod
    def _reject_nan(cls, value: float) -> float:
        if value != value:
            raise ValueError("coordinate must not be NaN")
        return value
