from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .attendance.factory import AdmissionStrategyFactory
from .attendance.service import AttendanceService
from .attendance.tracker import AttendanceSessionTracker
from .client.api_client import RemoteAttendanceApi
from .core.constants import DEFAULT_API_TIMEOUT_SECONDS
from .geofence.engine import GeofenceEngine

ApiFactory = Callable[[Optional[str]], RemoteAttendanceApi]


@dataclass(frozen=True)
class Container:
    engine: GeofenceEngine
    tracker: AttendanceSessionTracker
    api_factory: ApiFactory

    def api_for(self, token: Optional[str]) -> RemoteAttendanceApi:
        """Client acting with the caller's credentials."""
        return self.api_factory(token)

    def attendance_service_for(self, api: RemoteAttendanceApi) -> AttendanceService:
        return AttendanceService(api, api, tracker=self.tracker, engine=self.engine)


def build_container(*, api_config: dict) -> Container:
    base_url = str(api_config["base_url"])
    timeout = int(api_config.get("timeout", DEFAULT_API_TIMEOUT_SECONDS))

    engine = GeofenceEngine()
    tracker = AttendanceSessionTracker(strategy_factory=AdmissionStrategyFactory(engine=engine))

    def api_factory(token: Optional[str]) -> RemoteAttendanceApi:
        return RemoteAttendanceApi(base_url, token=token, timeout=timeout)

    return Container(engine=engine, tracker=tracker, api_factory=api_factory)
