from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...geofence.model import GeofenceRegion, GeoPoint
from ..model import AdmissionResult


class AdmissionStrategy(ABC):
    """Strategy Pattern: encapsulate how a work mode decides punch-in admission."""

    @abstractmethod
    def decide(self, *, point: Optional[GeoPoint], regions: Sequence[GeofenceRegion]) -> AdmissionResult:
        raise NotImplementedError
