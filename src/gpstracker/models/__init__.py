"""gpstracker data models."""

from gpstracker.models.fix import LocationFix
from gpstracker.models.payload import SubmissionPayload, format_position
from gpstracker.models.request import Accuracy, Granularity, LocationRequest

__all__ = [
    "Accuracy",
    "Granularity",
    "LocationFix",
    "LocationRequest",
    "SubmissionPayload",
    "format_position",
]
