"""Geofence membership on a spherical Earth.

All functions are pure and total: non-finite coordinates give a NaN distance,
which never counts as inside a region.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..core.constants import EARTH_RADIUS_METERS
from .model import GeofenceRegion, GeoPoint, RegionDistance


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points, in meters.

    a = sin²(Δφ/2) + cos φ1 · cos φ2 · sin²(Δλ/2)
    c = 2 · atan2(√a, √(1 − a))
    d = R · c
    """
    coords = (a.latitude, a.longitude, b.latitude, b.longitude)
    if not all(math.isfinite(v) for v in coords):
        return math.nan

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) * math.sin(d_phi / 2) + math.cos(phi1) * math.cos(phi2) * math.sin(
        d_lambda / 2
    ) * math.sin(d_lambda / 2)
    # rounding can push h a hair above 1 near antipodes
    h = min(h, 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def _sort_key(distance: float) -> float:
    return math.inf if math.isnan(distance) else distance


class GeofenceEngine:
    """Decides whether a point lies inside one or more geofence regions."""

    def distance(self, a: GeoPoint, b: GeoPoint) -> float:
        return haversine_distance(a, b)

    def is_within(self, point: GeoPoint, region: GeofenceRegion) -> bool:
        radius = region.radius_meters
        if not radius > 0:
            return False
        return haversine_distance(point, region.center) <= radius

    def any_within(self, point: GeoPoint, regions: Sequence[GeofenceRegion]) -> bool:
        return any(self.is_within(point, region) for region in regions)

    def regions_containing(self, point: GeoPoint, regions: Sequence[GeofenceRegion]) -> list[GeofenceRegion]:
        return [region for region in regions if self.is_within(point, region)]

    def nearest_region(self, point: GeoPoint, regions: Sequence[GeofenceRegion]) -> Optional[RegionDistance]:
        """Closest region by center distance; the first one wins on ties."""
        best: Optional[RegionDistance] = None
        for region in regions:
            d = haversine_distance(point, region.center)
            if best is None or _sort_key(d) < _sort_key(best.distance_meters):
                best = RegionDistance(region=region, distance_meters=d)
        return best
