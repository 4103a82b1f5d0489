from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GeofenceRegion, GeoPoint


class GeofenceDirectory(Protocol):
    """Source of the configured geofence regions.

    The engine treats what ``list_all`` returns as a read-only snapshot.
    """

    def list_all(self) -> Sequence[GeofenceRegion]:
        raise NotImplementedError


class LocationProvider(Protocol):
    def get_current_location(self) -> Optional[GeoPoint]:
        """Return the device position, or ``None`` when it is unavailable."""

        raise NotImplementedError
