from __future__ import annotations

from datetime import datetime
from itertools import count
from typing import Optional

import pytest

from attendance_tracker.attendance.model import PunchRecord
from attendance_tracker.core.enums import PunchType
from attendance_tracker.geofence.model import GeofenceRegion, GeoPoint

DELHI = GeoPoint(latitude=28.7041, longitude=77.1025)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 1, 6, 9, 0, 0)


@pytest.fixture
def office() -> GeofenceRegion:
    return GeofenceRegion(region_id="g1", name="Delhi Office", center=DELHI, radius_meters=200)


@pytest.fixture
def punch():
    """Factory for punch records with sequential ids."""
    ids = count(1)

    def make(
        punch_type: str,
        at: datetime,
        *,
        project_id: Optional[str] = None,
        task_id: Optional[str] = None,
        user_id: str = "u1",
        location: GeoPoint = DELHI,
    ) -> PunchRecord:
        return PunchRecord(
            record_id=str(next(ids)),
            user_id=user_id,
            punch_type=PunchType(punch_type),
            timestamp=at,
            location=location,
            project_id=project_id,
            task_id=task_id,
        )

    return make
