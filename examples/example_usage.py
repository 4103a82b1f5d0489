"""Example: use the decision core directly (no Flask, no network).

Goal: show that admission and session/hours derivation are plain functions over
snapshots the caller already holds.
"""

from datetime import date, datetime

from attendance_tracker.attendance.model import PunchRecord
from attendance_tracker.attendance.tracker import AttendanceSessionTracker
from attendance_tracker.core.enums import PunchType, WorkMode
from attendance_tracker.geofence.engine import GeofenceEngine
from attendance_tracker.geofence.model import GeofenceRegion, GeoPoint


def main():
    office = GeofenceRegion(region_id="1", name="Delhi Office", center=GeoPoint(28.7041, 77.1025), radius_meters=200)
    here = GeoPoint(28.7051, 77.1025)

    engine = GeofenceEngine()
    print("distance to office:", round(engine.distance(here, office.center), 1), "m")

    tracker = AttendanceSessionTracker()
    print("admission:", tracker.evaluate_admission(WorkMode.ONSITE, here, [office]))

    history = [
        PunchRecord("1", "u1", PunchType.IN, datetime(2025, 1, 6, 9, 0), here, project_id="A"),
        PunchRecord("2", "u1", PunchType.OUT, datetime(2025, 1, 6, 12, 0), here),
        PunchRecord("3", "u1", PunchType.IN, datetime(2025, 1, 6, 13, 0), here, project_id="B"),
    ]
    print("current session:", tracker.derive_current_session(history))
    print("today:", tracker.day_summary(history, date(2025, 1, 6)).formatted)


if __name__ == "__main__":
    main()
