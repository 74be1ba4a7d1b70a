"""Location request handed to providers on subscribe."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field, model_validator

from gpstracker.models._base import TrackerBaseModel


class Accuracy(StrEnum):
    """Requested accuracy class."""

    HIGH = "high"
    BALANCED = "balanced"
    LOW = "low"
    PASSIVE = "passive"


class Granularity(StrEnum):
    """Requested location granularity."""

    FINE = "fine"
    COARSE = "coarse"


class LocationRequest(TrackerBaseModel):
    """Cadence and quality of the requested fix stream.

    All durations are in seconds.
    """

    interval: float = Field(gt=0)
    min_update_interval: float = Field(gt=0)
    max_update_delay: float = Field(gt=0)
    max_update_age: float = Field(ge=0)
    accuracy: Accuracy = Accuracy.HIGH
    granularity: Granularity = Granularity.FINE

    @model_validator(mode="after")
    def _check_ordering(self) -> LocationRequest:
        if self.min_update_interval > self.interval:
            raise ValueError("min_update_interval must not exceed interval")
        if self.max_update_delay < self.interval:
            raise ValueError("max_update_delay must not be shorter than interval")
        return self
