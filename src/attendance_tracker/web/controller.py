from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, current_app, g, jsonify, request

from ..attendance.history import filter_history, group_by_day
from ..attendance.model import AdmissionResult, DurationSummary, PunchRecord, Session
from ..attendance.service import SessionView
from ..common.datetime_utils import parse_iso_date
from ..core.enums import AdmissionReason, PunchType
from ..core.exceptions import ApiError, ValidationError
from ..container import Container
from ..geofence.location import PayloadLocationProvider
from ..geofence.model import GeofenceRegion, LocationStatus

logger = logging.getLogger(__name__)

_REJECTION_STATUS = {
    AdmissionReason.ALREADY_PUNCHED_IN: 409,
    AdmissionReason.NO_ACTIVE_SESSION: 409,
    AdmissionReason.LOCATION_UNAVAILABLE: 403,
    AdmissionReason.OUTSIDE_GEOFENCE: 403,
    AdmissionReason.PROJECT_REQUIRED: 400,
}


def _ok(data: Any, message: str = "", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def _fail(message: str, status: int, data: Any = None):
    return jsonify({"success": False, "message": message, "data": data}), status


def record_to_dict(r: PunchRecord) -> dict:
    return {
        "attendanceId": r.record_id,
        "userId": r.user_id,
        "punchType": r.punch_type.value,
        "punchTime": r.timestamp.isoformat(),
        "latitude": r.location.latitude,
        "longitude": r.location.longitude,
        "projectId": r.project_id,
        "taskId": r.task_id,
    }


def summary_to_dict(s: DurationSummary) -> dict:
    return {"totalMinutes": s.total_minutes, "formattedTime": s.formatted}


def session_to_dict(s: Session) -> dict:
    return {
        "startedAt": s.started_at.isoformat(),
        "projectId": s.project_id,
        "taskId": s.task_id,
        "punchIn": record_to_dict(s.punch_in_record),
    }


def geofence_to_dict(region: GeofenceRegion) -> dict:
    return {
        "geofenceId": region.region_id,
        "locationName": region.name,
        "latitude": region.center.latitude,
        "longitude": region.center.longitude,
        "radiusMeters": region.radius_meters,
    }


def admission_to_dict(result: AdmissionResult) -> dict:
    return {
        "allowed": result.allowed,
        "reason": result.reason.value if result.reason else None,
        "message": result.message,
    }


def location_to_dict(status: LocationStatus) -> dict:
    nearest = status.nearest
    return {
        "within": status.within,
        "nearestGeofence": geofence_to_dict(nearest.region) if nearest else None,
        "distanceMeters": round(nearest.distance_meters, 1) if nearest else None,
    }


def register(app: Flask, container: Container) -> None:
    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            scheme, _, token = header.partition(" ")
            if scheme.lower() != "bearer" or not token.strip():
                return _fail("Authentication required", 401)
            g.api = container.api_for(token.strip())
            g.attendance = container.attendance_service_for(g.api)
            return view(*args, **kwargs)

        return wrapper

    def handle_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return _fail(str(e), 400)
            except ApiError as e:
                if e.status_code in (401, 403):
                    return _fail(str(e), e.status_code)
                logger.error("attendance service error on %s: %s", request.path, e)
                return _fail(str(e) or "Attendance service unavailable", 502)

        return wrapper

    def _rejected(result: AdmissionResult, extra: Optional[dict] = None):
        return _fail(result.message, _REJECTION_STATUS.get(result.reason, 400), data=extra)

    def _optional_date(param: str):
        value = request.args.get(param)
        return parse_iso_date(value) if value else None

    @app.route("/api/attendance/session", methods=["GET"], endpoint="attendance_session")
    @handle_errors
    @token_required
    def attendance_session():
        """Restore the in-progress session (if any) after a reload."""
        employee = g.api.get_current_user()
        view: SessionView = g.attendance.current_session(employee.user_id)
        return _ok(
            {
                "active": view.active,
                "session": session_to_dict(view.session) if view.session else None,
                "elapsed": summary_to_dict(view.elapsed) if view.elapsed else None,
            }
        )

    @app.route("/api/attendance/admission", methods=["POST"], endpoint="attendance_admission")
    @handle_errors
    @token_required
    def attendance_admission():
        employee = g.api.get_current_user()
        location = PayloadLocationProvider(request.get_json(silent=True))
        result = g.attendance.check_admission(employee, location)
        data = admission_to_dict(result)
        data["workMode"] = employee.work_mode.value
        data["location"] = location_to_dict(g.attendance.location_status(location))
        return _ok(data)

    @app.route("/api/attendance/punch-in", methods=["POST"], endpoint="attendance_punch_in")
    @handle_errors
    @token_required
    def attendance_punch_in():
        payload = request.get_json(silent=True) or {}
        employee = g.api.get_current_user()
        outcome = g.attendance.punch_in(
            employee,
            PayloadLocationProvider(payload),
            project_id=payload.get("projectId") or None,
            task_id=payload.get("taskId") or None,
        )
        if not outcome.result.allowed:
            return _rejected(outcome.result, admission_to_dict(outcome.result))
        return _ok(record_to_dict(outcome.record), "Punched in successfully!", 201)

    @app.route("/api/attendance/punch-out", methods=["POST"], endpoint="attendance_punch_out")
    @handle_errors
    @token_required
    def attendance_punch_out():
        payload = request.get_json(silent=True) or {}
        employee = g.api.get_current_user()
        outcome = g.attendance.punch_out(employee, PayloadLocationProvider(payload))
        if not outcome.result.allowed:
            return _rejected(outcome.result, admission_to_dict(outcome.result))
        return _ok(record_to_dict(outcome.record), "Punched out successfully!", 201)

    @app.route("/api/attendance/hours/day", methods=["GET"], endpoint="attendance_hours_day")
    @handle_errors
    @token_required
    def attendance_hours_day():
        employee = g.api.get_current_user()
        summary = g.attendance.today_hours(employee.user_id, _optional_date("date"))
        return _ok(summary_to_dict(summary))

    @app.route("/api/attendance/hours/project/<project_id>", methods=["GET"], endpoint="attendance_hours_project")
    @handle_errors
    @token_required
    def attendance_hours_project(project_id: str):
        employee = g.api.get_current_user()
        return _ok(summary_to_dict(g.attendance.project_hours(employee.user_id, project_id)))

    @app.route("/api/attendance/hours/projects", methods=["GET"], endpoint="attendance_hours_projects")
    @handle_errors
    @token_required
    def attendance_hours_projects():
        employee = g.api.get_current_user()
        by_project = g.attendance.hours_by_project(employee.user_id)
        return _ok(
            {
                "projects": {pid: summary_to_dict(s) for pid, s in by_project.items()},
                "total": summary_to_dict(container.tracker.total_of(by_project)),
            }
        )

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @handle_errors
    @token_required
    def attendance_history():
        employee = g.api.get_current_user()
        day = _optional_date("date")
        type_param = (request.args.get("type") or "all").upper()
        if type_param == "ALL":
            punch_type = None
        else:
            try:
                punch_type = PunchType(type_param)
            except ValueError:
                raise ValidationError(f"Unknown punch type: {type_param}")

        records = filter_history(g.api.get_history(employee.user_id), day=day, punch_type=punch_type)
        grouped = group_by_day(records)
        return _ok([{"date": d.isoformat(), "records": [record_to_dict(r) for r in rs]} for d, rs in grouped.items()])

    @app.route("/api/geofences", methods=["GET"], endpoint="geofence_list")
    @handle_errors
    @token_required
    def geofence_list():
        return _ok([geofence_to_dict(r) for r in g.api.list_all()])

    @app.route("/api/geofences", methods=["POST"], endpoint="geofence_create")
    @handle_errors
    @token_required
    def geofence_create():
        payload = request.get_json(silent=True) or {}
        radius = payload.get("radiusMeters")
        if radius in (None, ""):
            radius = current_app.config["DEFAULT_GEOFENCE_RADIUS_METERS"]
        region = g.api.create_geofence(
            payload.get("locationName", ""),
            payload.get("latitude"),
            payload.get("longitude"),
            radius,
        )
        return _ok(geofence_to_dict(region), "Geofence location created successfully!", 201)
