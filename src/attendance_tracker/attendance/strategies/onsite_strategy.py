from __future__ import annotations

from typing import Optional, Sequence

from ...core.enums import AdmissionReason
from ...geofence.engine import GeofenceEngine
from ...geofence.model import GeofenceRegion, GeoPoint
from ..model import AdmissionResult
from .base import AdmissionStrategy


class OnsiteAdmissionStrategy(AdmissionStrategy):
    """Onsite workers must stand inside at least one configured geofence."""

    def __init__(self, engine: GeofenceEngine):
        self._engine = engine

    def decide(self, *, point: Optional[GeoPoint], regions: Sequence[GeofenceRegion]) -> AdmissionResult:
        if point is None:
            return AdmissionResult.reject(AdmissionReason.LOCATION_UNAVAILABLE)
        if not self._engine.any_within(point, regions):
            return AdmissionResult.reject(AdmissionReason.OUTSIDE_GEOFENCE)
        return AdmissionResult.allow()
