"""gpstracker - Periodic GPS location forwarder with a self-healing watchdog."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gpstracker")
except PackageNotFoundError:
    __version__ = "0+local"
from gpstracker.config import TrackerConfig
from gpstracker.exceptions import (
    TrackerConfigError,
    TrackerError,
    TrackerPermissionError,
    TrackerProviderError,
    TrackerSubmissionError,
)
from gpstracker.models import (
    Accuracy,
    Granularity,
    LocationFix,
    LocationRequest,
    SubmissionPayload,
)
from gpstracker.poller import LocationPoller
from gpstracker.providers import (
    GpsdLocationProvider,
    LocationProvider,
    Permission,
    PermissionChecker,
    StaticPermissions,
)
from gpstracker.state import PollerSnapshot, PollerState, PollerStatus, SubmissionStats

__all__ = [
    "__version__",
    "Accuracy",
    "GpsdLocationProvider",
    "Granularity",
    "LocationFix",
    "LocationPoller",
    "LocationProvider",
    "LocationRequest",
    "Permission",
    "PermissionChecker",
    "PollerSnapshot",
    "PollerState",
    "PollerStatus",
    "StaticPermissions",
    "SubmissionPayload",
    "SubmissionStats",
    "TrackerConfig",
    "TrackerConfigError",
    "TrackerError",
    "TrackerPermissionError",
    "TrackerProviderError",
    "TrackerSubmissionError",
]
