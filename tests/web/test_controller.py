from __future__ import annotations

from datetime import datetime

import pytest

from attendance_tracker.attendance.model import PunchRecord
from attendance_tracker.attendance.tracker import AttendanceSessionTracker
from attendance_tracker.client.api_client import parse_geofence
from attendance_tracker.container import Container
from attendance_tracker.core.enums import PunchType, WorkMode
from attendance_tracker.core.exceptions import ApiError
from attendance_tracker.geofence.engine import GeofenceEngine
from attendance_tracker.geofence.model import GeofenceRegion, GeoPoint
from attendance_tracker.main import create_app
from attendance_tracker.users.model import Employee

OFFICE = GeofenceRegion(region_id="g1", name="Delhi Office", center=GeoPoint(28.7041, 77.1025), radius_meters=200)
INSIDE = {"latitude": 28.7045, "longitude": 77.1025}
OUTSIDE = {"latitude": 19.0760, "longitude": 72.8777}
AUTH = {"Authorization": "Bearer tok"}


class FakeApi:
    def __init__(self, work_mode: WorkMode = WorkMode.ONSITE):
        self.employee = Employee(user_id="u1", name="Asha", work_mode=work_mode)
        self.records: list[PunchRecord] = []
        self.regions = [OFFICE]
        self.now = datetime(2025, 1, 6, 9, 0)
        self.error: ApiError | None = None
        self.tokens: list[str] = []
        self.raw_regions: list[dict] | None = None

    def get_current_user(self):
        if self.error:
            raise self.error
        return self.employee

    def get_history(self, user_id):
        return list(self.records)

    def record_punch(self, user_id, punch_type, point, project_id=None, task_id=None):
        rec = PunchRecord(
            record_id=str(len(self.records) + 1),
            user_id=user_id,
            punch_type=PunchType(punch_type),
            timestamp=self.now,
            location=point,
            project_id=project_id,
            task_id=task_id,
        )
        self.records.append(rec)
        return rec

    def list_all(self):
        if self.raw_regions is not None:
            return [parse_geofence(row) for row in self.raw_regions]
        return list(self.regions)

    def create_geofence(self, name, latitude, longitude, radius_meters=200):
        region = GeofenceRegion(
            region_id="g2", name=name, center=GeoPoint(float(latitude), float(longitude)), radius_meters=float(radius_meters)
        )
        self.regions.append(region)
        return region


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def client(monkeypatch, fake_api):
    monkeypatch.setenv("APP_ENV", "testing")

    def factory(token):
        fake_api.tokens.append(token)
        return fake_api

    container = Container(engine=GeofenceEngine(), tracker=AttendanceSessionTracker(), api_factory=factory)
    app = create_app(container)
    return app.test_client()


def test_requires_bearer_token(client):
    resp = client.get("/api/attendance/session")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_token_is_forwarded(client, fake_api):
    client.get("/api/attendance/session", headers=AUTH)

    assert fake_api.tokens == ["tok"]


def test_punch_in_then_session_restored(client, fake_api):
    resp = client.post("/api/attendance/punch-in", json={**INSIDE, "projectId": "p1", "taskId": "t1"}, headers=AUTH)

    assert resp.status_code == 201
    assert resp.get_json()["data"]["punchType"] == "IN"

    body = client.get("/api/attendance/session", headers=AUTH).get_json()
    assert body["data"]["active"] is True
    assert body["data"]["session"]["projectId"] == "p1"
    assert body["data"]["session"]["taskId"] == "t1"


def test_punch_in_outside_geofence_is_forbidden(client, fake_api):
    resp = client.post("/api/attendance/punch-in", json={**OUTSIDE, "projectId": "p1"}, headers=AUTH)

    body = resp.get_json()
    assert resp.status_code == 403
    assert body["message"] == "You are not within the designated work location."
    assert body["data"]["reason"] == "OUTSIDE_GEOFENCE"
    assert fake_api.records == []


def test_punch_in_without_project(client):
    resp = client.post("/api/attendance/punch-in", json=INSIDE, headers=AUTH)

    assert resp.status_code == 400
    assert resp.get_json()["data"]["reason"] == "PROJECT_REQUIRED"


def test_punch_out_while_idle_conflicts(client):
    resp = client.post("/api/attendance/punch-out", json=INSIDE, headers=AUTH)

    assert resp.status_code == 409
    assert resp.get_json()["data"]["reason"] == "NO_ACTIVE_SESSION"


def test_hours_for_day_and_project(client, fake_api):
    client.post("/api/attendance/punch-in", json={**INSIDE, "projectId": "p1"}, headers=AUTH)
    fake_api.now = datetime(2025, 1, 6, 17, 0)
    client.post("/api/attendance/punch-out", json=INSIDE, headers=AUTH)

    day = client.get("/api/attendance/hours/day?date=2025-01-06", headers=AUTH).get_json()
    project = client.get("/api/attendance/hours/project/p1", headers=AUTH).get_json()
    projects = client.get("/api/attendance/hours/projects", headers=AUTH).get_json()

    assert day["data"] == {"totalMinutes": 480, "formattedTime": "8h0m"}
    assert project["data"]["totalMinutes"] == 480
    assert projects["data"]["total"]["formattedTime"] == "8h0m"


def test_bad_date_is_bad_request(client):
    resp = client.get("/api/attendance/hours/day?date=06-01-2025", headers=AUTH)

    assert resp.status_code == 400


def test_admission_reports_location(client):
    body = client.post("/api/attendance/admission", json=INSIDE, headers=AUTH).get_json()

    assert body["data"]["allowed"] is True
    assert body["data"]["workMode"] == "ONSITE"
    assert body["data"]["location"]["within"] is True
    assert body["data"]["location"]["nearestGeofence"]["locationName"] == "Delhi Office"


def test_admission_without_location(client):
    body = client.post("/api/attendance/admission", json={}, headers=AUTH).get_json()

    assert body["data"]["allowed"] is False
    assert body["data"]["reason"] == "LOCATION_UNAVAILABLE"
    assert body["data"]["location"]["nearestGeofence"] is None


def test_history_grouped_and_filtered(client, fake_api):
    client.post("/api/attendance/punch-in", json={**INSIDE, "projectId": "p1"}, headers=AUTH)
    fake_api.now = datetime(2025, 1, 6, 12, 0)
    client.post("/api/attendance/punch-out", json=INSIDE, headers=AUTH)

    everything = client.get("/api/attendance/history", headers=AUTH).get_json()["data"]
    outs = client.get("/api/attendance/history?type=OUT", headers=AUTH).get_json()["data"]
    bad = client.get("/api/attendance/history?type=LUNCH", headers=AUTH)

    assert everything[0]["date"] == "2025-01-06"
    assert [r["punchType"] for r in everything[0]["records"]] == ["IN", "OUT"]
    assert [r["punchType"] for r in outs[0]["records"]] == ["OUT"]
    assert bad.status_code == 400


def test_create_geofence_uses_default_radius(client, fake_api):
    resp = client.post("/api/geofences", json={"locationName": "Branch", "latitude": 12.9, "longitude": 77.6}, headers=AUTH)

    assert resp.status_code == 201
    assert resp.get_json()["data"]["radiusMeters"] == 200
    assert len(client.get("/api/geofences", headers=AUTH).get_json()["data"]) == 2


def test_remote_failure_is_bad_gateway(client, fake_api):
    fake_api.error = ApiError("upstream down")

    resp = client.get("/api/attendance/session", headers=AUTH)

    assert resp.status_code == 502
    assert resp.get_json()["message"] == "upstream down"


def test_malformed_geofence_row_is_bad_request(client, fake_api):
    fake_api.raw_regions = [{"geofenceId": 7, "locationName": "Annex", "longitude": "77.1025"}]

    resp = client.get("/api/geofences", headers=AUTH)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert "latitude" in resp.get_json()["message"]
