from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import WorkMode
from ..geofence.engine import GeofenceEngine
from .strategies.base import AdmissionStrategy
from .strategies.onsite_strategy import OnsiteAdmissionStrategy
from .strategies.remote_strategy import RemoteAdmissionStrategy


@dataclass
class AdmissionStrategyFactory:
    """Factory Pattern: choose the admission strategy for a work mode."""

    engine: GeofenceEngine = field(default_factory=GeofenceEngine)

    def for_work_mode(self, work_mode: WorkMode) -> AdmissionStrategy:
        if WorkMode(work_mode) == WorkMode.REMOTE:
            return RemoteAdmissionStrategy()
        return OnsiteAdmissionStrategy(self.engine)
