from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PunchType
from ..geofence.model import GeoPoint
from .model import PunchRecord


class AttendanceHistoryStore(Protocol):
    """Append-only punch log owned by the attendance service.

    The service layer depends on this interface, not on a concrete backend.
    """

    def get_history(self, user_id: str) -> Sequence[PunchRecord]:
        raise NotImplementedError

    def record_punch(
        self,
        user_id: str,
        punch_type: PunchType,
        point: GeoPoint,
        project_id: Optional[str] = None,
        task_id: Optional[str] = None,
    ) -> PunchRecord:
        """Persist a punch and return the stored record; raises ``ApiError`` on failure."""

        raise NotImplementedError
