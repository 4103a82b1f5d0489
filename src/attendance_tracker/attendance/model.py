from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AdmissionReason, PunchType
from ..geofence.model import GeoPoint


@dataclass(frozen=True)
class PunchRecord:
    """Domain entity: one IN or OUT punch, as stored by the attendance service."""

    record_id: str
    user_id: str
    punch_type: PunchType
    timestamp: datetime
    location: GeoPoint
    project_id: Optional[str] = None
    task_id: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """An open work session, derived from punch history (never stored)."""

    punch_in_record: PunchRecord
    project_id: Optional[str]
    task_id: Optional[str]
    started_at: datetime

    @classmethod
    def from_punch_in(cls, record: PunchRecord) -> "Session":
        return cls(
            punch_in_record=record,
            project_id=record.project_id,
            task_id=record.task_id,
            started_at=record.timestamp,
        )


@dataclass(frozen=True)
class DurationSummary:
    total_minutes: int
    formatted: str


@dataclass(frozen=True)
class AdmissionResult:
    allowed: bool
    reason: Optional[AdmissionReason] = None

    @classmethod
    def allow(cls) -> "AdmissionResult":
        return cls(allowed=True)

    @classmethod
    def reject(cls, reason: AdmissionReason) -> "AdmissionResult":
        return cls(allowed=False, reason=reason)

    @property
    def message(self) -> Optional[str]:
        return self.reason.message if self.reason else None


@dataclass(frozen=True)
class PunchOutcome:
    """What a punch request produced: the local decision and, if sent, the stored record."""

    result: AdmissionResult
    record: Optional[PunchRecord] = None
