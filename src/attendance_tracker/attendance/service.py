from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import AdmissionReason, PunchType
from ..geofence.engine import GeofenceEngine
from ..geofence.model import LocationStatus
from ..geofence.repository import GeofenceDirectory, LocationProvider
from ..users.model import Employee
from .model import AdmissionResult, DurationSummary, PunchOutcome, Session
from .repository import AttendanceHistoryStore
from .tracker import AttendanceSessionTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionView:
    """Current session plus how long it has been running."""

    session: Optional[Session]
    elapsed: Optional[DurationSummary] = None

    @property
    def active(self) -> bool:
        return self.session is not None


class AttendanceService:
    """Runs the local punch checks against fresh snapshots from the collaborators.

    Typed rejections come back as ``PunchOutcome``; failures of the remote store
    propagate as ``ApiError``.
    """

    def __init__(
        self,
        history: AttendanceHistoryStore,
        geofences: GeofenceDirectory,
        *,
        tracker: AttendanceSessionTracker | None = None,
        engine: GeofenceEngine | None = None,
    ):
        self._history = history
        self._geofences = geofences
        self._engine = engine or GeofenceEngine()
        self._tracker = tracker or AttendanceSessionTracker()

    def current_session(self, user_id: str, *, now: datetime | None = None) -> SessionView:
        now = now or now_local()
        session = self._tracker.derive_current_session(self._history.get_history(user_id))
        if session is None:
            return SessionView(session=None)
        return SessionView(session=session, elapsed=self._tracker.elapsed(session, now))

    def today_hours(self, user_id: str, today: date | None = None) -> DurationSummary:
        today = today or now_local().date()
        return self._tracker.day_summary(self._history.get_history(user_id), today)

    def project_hours(self, user_id: str, project_id: str) -> DurationSummary:
        return self._tracker.project_summary(self._history.get_history(user_id), project_id)

    def hours_by_project(self, user_id: str) -> dict[str, DurationSummary]:
        return self._tracker.summaries_by_project(self._history.get_history(user_id))

    def location_status(self, location: LocationProvider) -> LocationStatus:
        point = location.get_current_location()
        if point is None:
            return LocationStatus(within=False)
        regions = self._geofences.list_all()
        return LocationStatus(
            within=self._engine.any_within(point, regions),
            nearest=self._engine.nearest_region(point, regions),
        )

    def check_admission(self, employee: Employee, location: LocationProvider) -> AdmissionResult:
        return self._tracker.evaluate_admission(
            employee.work_mode, location.get_current_location(), self._geofences.list_all()
        )

    def punch_in(
        self,
        employee: Employee,
        location: LocationProvider,
        project_id: Optional[str],
        task_id: Optional[str] = None,
    ) -> PunchOutcome:
        point = location.get_current_location()
        history = self._history.get_history(employee.user_id)

        result = self._tracker.check_punch_in(
            history,
            work_mode=employee.work_mode,
            point=point,
            regions=self._geofences.list_all(),
            project_id=project_id,
            # every punch carries coordinates, remote ones included
            location_required=True,
        )
        if not result.allowed:
            logger.info("punch-in rejected for user %s: %s", employee.user_id, result.reason.value)
            return PunchOutcome(result=result)

        record = self._history.record_punch(
            employee.user_id, PunchType.IN, point, project_id=project_id, task_id=task_id or None
        )
        logger.info("user %s punched in (project=%s, task=%s)", employee.user_id, project_id, task_id)
        return PunchOutcome(result=result, record=record)

    def punch_out(self, employee: Employee, location: LocationProvider) -> PunchOutcome:
        history = self._history.get_history(employee.user_id)
        result = self._tracker.check_punch_out(history)
        point = location.get_current_location()
        if result.allowed and point is None:
            result = AdmissionResult.reject(AdmissionReason.LOCATION_UNAVAILABLE)
        if not result.allowed:
            logger.info("punch-out rejected for user %s: %s", employee.user_id, result.reason.value)
            return PunchOutcome(result=result)

        record = self._history.record_punch(employee.user_id, PunchType.OUT, point)
        logger.info("user %s punched out", employee.user_id)
        return PunchOutcome(result=result, record=record)
