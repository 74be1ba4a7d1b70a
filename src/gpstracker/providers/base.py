"""Collaborator interfaces consumed by the poller."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Protocol

from gpstracker.models.fix import LocationFix
from gpstracker.models.request import LocationRequest

FixCallback = Callable[[LocationFix], None]


class Permission(StrEnum):
    ACCESS_FINE_LOCATION = "android.permission.ACCESS_FINE_LOCATION"
    ACCESS_COARSE_LOCATION = "android.permission.ACCESS_COARSE_LOCATION"
    FOREGROUND_SERVICE_LOCATION = "android.permission.FOREGROUND_SERVICE_LOCATION"


#: Either of these is enough to request location updates.
LOCATION_PERMISSIONS: tuple[Permission, ...] = (
    Permission.ACCESS_FINE_LOCATION,
    Permission.ACCESS_COARSE_LOCATION,
)


class LocationProvider(Protocol):
    """Source of location fixes.

    ``subscribe`` starts delivering fixes to *callback*, possibly from
    the provider's own thread. ``unsubscribe`` stops delivery and is a
    no-op when nothing is subscribed.
    """

    def is_enabled(self) -> bool:
        ...

    def subscribe(self, request: LocationRequest, callback: FixCallback) -> None:
        ...

    def unsubscribe(self) -> None:
        ...


class PermissionChecker(Protocol):
    def is_granted(self, permission: Permission) -> bool:
        ...


class StaticPermissions:
    """Permission checker backed by a fixed set of granted permissions."""

    def __init__(self, granted: Iterable[Permission] = tuple(Permission)) -> None:
        self._granted = frozenset(granted)

    def is_granted(self, permission: Permission) -> bool:
        return permission in self._granted


def has_location_permission(checker: PermissionChecker) -> bool:
    """Return ``True`` when fine or coarse location access is granted."""
    return any(checker.is_granted(permission) for permission in LOCATION_PERMISSIONS)
