"""Punch-in/punch-out session state, derived from punch history.

Nothing here is stored: every answer is recomputed from the history snapshot the
caller passes in, so repeated calls with the same input give the same output.

Policy for dangling IN punches: when two INs occur with no OUT between them, the
later IN anchors the open session and the earlier one is orphaned (it never
pairs with an OUT and contributes no worked time).

Timezone-aware timestamps are compared as naive local time, so a history may
mix both without faulting.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import to_local_naive
from ..core.constants import MINUTES_PER_HOUR
from ..core.enums import AdmissionReason, PunchType, SessionState, WorkMode
from ..geofence.model import GeofenceRegion, GeoPoint
from .factory import AdmissionStrategyFactory
from .model import AdmissionResult, DurationSummary, PunchRecord, Session

PunchPair = tuple[PunchRecord, PunchRecord]


def format_minutes(total_minutes: int) -> str:
    return f"{total_minutes // MINUTES_PER_HOUR}h{total_minutes % MINUTES_PER_HOUR}m"


def _summary(total_minutes: int) -> DurationSummary:
    total = max(int(total_minutes), 0)
    return DurationSummary(total_minutes=total, formatted=format_minutes(total))


def _chronological(records: Iterable[PunchRecord]) -> list[PunchRecord]:
    # sorted() is stable, so equal timestamps keep their input order
    return sorted(records, key=lambda r: to_local_naive(r.timestamp))


def _minutes_between(start: datetime, end: datetime) -> int:
    minutes = int((to_local_naive(end) - to_local_naive(start)).total_seconds() // 60)
    return max(minutes, 0)


def on_day(day: date) -> Callable[[PunchRecord], bool]:
    return lambda record: to_local_naive(record.timestamp).date() == day


def for_project(project_id: str) -> Callable[[PunchRecord], bool]:
    return lambda record: record.project_id is not None and str(record.project_id) == str(project_id)


class AttendanceSessionTracker:
    def __init__(self, *, strategy_factory: AdmissionStrategyFactory | None = None):
        self._factory = strategy_factory or AdmissionStrategyFactory()

    # Admission

    def evaluate_admission(
        self,
        work_mode: WorkMode,
        point: Optional[GeoPoint],
        regions: Sequence[GeofenceRegion],
    ) -> AdmissionResult:
        strategy = self._factory.for_work_mode(work_mode)
        return strategy.decide(point=point, regions=regions)

    def check_punch_in(
        self,
        history: Sequence[PunchRecord],
        *,
        work_mode: WorkMode,
        point: Optional[GeoPoint],
        regions: Sequence[GeofenceRegion],
        project_id: Optional[str],
        location_required: bool = False,
    ) -> AdmissionResult:
        """Session state first, then location and geofence, then the project choice.

        ``location_required`` rejects a missing reading for every work mode, for
        callers that must record coordinates with the punch.
        """
        if self.derive_current_session(history) is not None:
            return AdmissionResult.reject(AdmissionReason.ALREADY_PUNCHED_IN)
        if location_required and point is None:
            return AdmissionResult.reject(AdmissionReason.LOCATION_UNAVAILABLE)
        admission = self.evaluate_admission(work_mode, point, regions)
        if not admission.allowed:
            return admission
        if not project_id:
            return AdmissionResult.reject(AdmissionReason.PROJECT_REQUIRED)
        return admission

    def check_punch_out(self, history: Sequence[PunchRecord]) -> AdmissionResult:
        if self.derive_current_session(history) is None:
            return AdmissionResult.reject(AdmissionReason.NO_ACTIVE_SESSION)
        return AdmissionResult.allow()

    # Session state

    def derive_current_session(self, history: Sequence[PunchRecord]) -> Optional[Session]:
        open_in: Optional[PunchRecord] = None
        for record in _chronological(history):
            if record.punch_type == PunchType.IN:
                open_in = record
            elif record.punch_type == PunchType.OUT:
                open_in = None
        return Session.from_punch_in(open_in) if open_in else None

    def session_state(self, history: Sequence[PunchRecord]) -> SessionState:
        if self.derive_current_session(history) is None:
            return SessionState.IDLE
        return SessionState.ACTIVE

    def elapsed(self, session: Session, now: datetime) -> DurationSummary:
        return _summary(_minutes_between(session.started_at, now))

    # Durations

    def closed_pairs(self, records: Sequence[PunchRecord]) -> list[PunchPair]:
        """Match every OUT with the latest open IN of the same user."""
        pending: dict[str, PunchRecord] = {}
        pairs: list[PunchPair] = []
        for record in _chronological(records):
            if record.punch_type == PunchType.IN:
                pending[record.user_id] = record
            elif record.punch_type == PunchType.OUT:
                punch_in = pending.pop(record.user_id, None)
                if punch_in is not None:
                    pairs.append((punch_in, record))
        return pairs

    def compute_duration(
        self,
        records: Sequence[PunchRecord],
        predicate: Callable[[PunchRecord], bool],
    ) -> DurationSummary:
        """Worked time over closed pairs whose IN punch matches ``predicate``.

        Open INs count as zero; they are not worked time yet.
        """
        total = 0
        for punch_in, punch_out in self.closed_pairs(records):
            if predicate(punch_in):
                total += _minutes_between(punch_in.timestamp, punch_out.timestamp)
        return _summary(total)

    def day_summary(self, records: Sequence[PunchRecord], day: date) -> DurationSummary:
        return self.compute_duration(records, on_day(day))

    def project_summary(self, records: Sequence[PunchRecord], project_id: str) -> DurationSummary:
        return self.compute_duration(records, for_project(project_id))

    def summaries_by_project(self, records: Sequence[PunchRecord]) -> dict[str, DurationSummary]:
        minutes: dict[str, int] = {}
        for punch_in, punch_out in self.closed_pairs(records):
            if punch_in.project_id is None:
                continue
            key = str(punch_in.project_id)
            minutes[key] = minutes.get(key, 0) + _minutes_between(punch_in.timestamp, punch_out.timestamp)
        return {project_id: _summary(total) for project_id, total in minutes.items()}

    @staticmethod
    def total_of(summaries: Mapping[str, DurationSummary] | Iterable[DurationSummary]) -> DurationSummary:
        values = summaries.values() if isinstance(summaries, Mapping) else summaries
        return _summary(sum(s.total_minutes for s in values))
