"""Base model and timestamp helpers shared by gpstracker models.

Every model inherits from :class:`TrackerBaseModel`, which is frozen
and ignores unknown keys so provider payloads with extra fields still
validate.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> Any:
    """Coerce epoch numbers (seconds **or** milliseconds) and naive datetimes to UTC.

    Anything else is passed through for pydantic to validate.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    return value


UtcTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that yields tz-aware UTC datetimes."""


class TrackerBaseModel(BaseModel):
    """Base for gpstracker models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
