"""Location providers and the permission subsystem."""

from gpstracker.providers.base import (
    LOCATION_PERMISSIONS,
    FixCallback,
    LocationProvider,
    Permission,
    PermissionChecker,
    StaticPermissions,
    has_location_permission,
)
from gpstracker.providers.gpsd import GpsdLocationProvider

__all__ = [
    "LOCATION_PERMISSIONS",
    "FixCallback",
    "GpsdLocationProvider",
    "LocationProvider",
    "Permission",
    "PermissionChecker",
    "StaticPermissions",
    "has_location_permission",
]
