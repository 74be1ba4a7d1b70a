"""Submission payload sent to the notification endpoint."""

from __future__ import annotations

from gpstracker.models._base import TrackerBaseModel
from gpstracker.models.fix import LocationFix


def format_position(latitude: float, longitude: float) -> str:
    """Render ``"<lat>, <lon>"`` using the shortest round-trip float form."""
    return f"{latitude!r}, {longitude!r}"


class SubmissionPayload(TrackerBaseModel):
    """JSON body of a single submission.

    ``time`` is the fix timestamp in ISO-8601, ``gpsposition`` is
    ``"<lat>, <lon>"``.
    """

    time: str
    gpsposition: str

    @classmethod
    def from_fix(cls, fix: LocationFix) -> SubmissionPayload:
        return cls(
            time=fix.timestamp.isoformat(),
            gpsposition=format_position(fix.latitude, fix.longitude),
        )
