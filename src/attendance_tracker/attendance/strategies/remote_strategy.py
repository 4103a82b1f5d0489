from __future__ import annotations

from typing import Optional, Sequence

from ...geofence.model import GeofenceRegion, GeoPoint
from ..model import AdmissionResult
from .base import AdmissionStrategy


class RemoteAdmissionStrategy(AdmissionStrategy):
    """Remote workers are admitted wherever they are."""

    def decide(self, *, point: Optional[GeoPoint], regions: Sequence[GeofenceRegion]) -> AdmissionResult:
        return AdmissionResult.allow()
