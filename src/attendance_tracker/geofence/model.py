from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    """A WGS-84 position in degrees.

    Ranges are not validated here; callers that accept user input go through
    ``common.validators`` first.
    """

    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeofenceRegion:
    """Named circular site an ONSITE employee must stand in to punch in."""

    region_id: str
    name: str
    center: GeoPoint
    radius_meters: float


@dataclass(frozen=True)
class RegionDistance:
    region: GeofenceRegion
    distance_meters: float


@dataclass(frozen=True)
class LocationStatus:
    """Read-model for the location verification card."""

    within: bool
    nearest: RegionDistance | None = None
