"""HTTP client for the remote attendance service."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import urljoin

import requests

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import require_float, require_in_range, require_non_empty, require_positive
from ..core.constants import DEFAULT_API_TIMEOUT_SECONDS, DEFAULT_GEOFENCE_RADIUS_METERS
from ..core.enums import PunchType, WorkMode
from ..core.exceptions import ApiError, ValidationError
from ..geofence.model import GeofenceRegion, GeoPoint
from ..attendance.model import PunchRecord
from ..users.model import Employee

logger = logging.getLogger(__name__)


def _optional_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def parse_punch_record(item: Mapping[str, Any], *, user_id: Optional[str] = None) -> PunchRecord:
    """Build a ``PunchRecord`` from the service's JSON representation."""
    try:
        punch_type = PunchType(str(item.get("punchType", "")).upper())
    except ValueError:
        raise ValidationError(f"Unknown punch type: {item.get('punchType')!r}")

    timestamp = parse_iso_datetime(item.get("punchTime"))
    if timestamp is None:
        raise ValidationError("Punch record without punchTime")

    lat = item.get("latitude")
    lon = item.get("longitude")
    location = GeoPoint(
        latitude=require_float(lat, "latitude") if lat is not None else float("nan"),
        longitude=require_float(lon, "longitude") if lon is not None else float("nan"),
    )

    return PunchRecord(
        record_id=str(item.get("attendanceId", item.get("id", ""))),
        user_id=_optional_id(item.get("userId")) or str(user_id or ""),
        punch_type=punch_type,
        timestamp=timestamp,
        location=location,
        project_id=_optional_id(item.get("projectId")),
        task_id=_optional_id(item.get("taskId")),
    )


def parse_geofence(item: Mapping[str, Any]) -> GeofenceRegion:
    """Build a ``GeofenceRegion``; a row without usable coordinates is a ``ValidationError``."""
    region_id = str(item.get("geofenceId", item.get("id", "")))
    # coordinates come back as decimal strings
    latitude = require_float(item.get("latitude"), f"Geofence {region_id} latitude")
    longitude = require_float(item.get("longitude"), f"Geofence {region_id} longitude")
    radius = require_float(item.get("radiusMeters", DEFAULT_GEOFENCE_RADIUS_METERS), f"Geofence {region_id} radius")
    return GeofenceRegion(
        region_id=region_id,
        name=str(item.get("locationName", "")),
        center=GeoPoint(latitude=latitude, longitude=longitude),
        radius_meters=radius,
    )


def parse_employee(item: Mapping[str, Any]) -> Employee:
    try:
        work_mode = WorkMode(str(item.get("workMode", WorkMode.ONSITE.value)).upper())
    except ValueError:
        raise ValidationError(f"Unknown work mode: {item.get('workMode')!r}")
    return Employee(
        user_id=str(item.get("userId", item.get("id", ""))),
        name=str(item.get("name", "")),
        work_mode=work_mode,
        employee_id=_optional_id(item.get("employeeId")),
        email=item.get("email"),
    )


class RemoteAttendanceApi:
    """Wraps the HTTP calls of the attendance REST API.

    Serves as both the ``AttendanceHistoryStore`` and the ``GeofenceDirectory``
    of an ``AttendanceService``.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: int = DEFAULT_API_TIMEOUT_SECONDS) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.token = token
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = urljoin(self.base_url, path.lstrip("/"))
        kwargs.setdefault("timeout", self.timeout)
        headers = kwargs.setdefault("headers", {})
        headers.update(self._headers())
        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning("%s %s -> %s", method, url, response.status_code)
            raise ApiError(message or f"API error {response.status_code}: {response.text}", response=response)

        if not isinstance(body, dict):
            raise ApiError(f"Unexpected response from {path}", response=response)
        if not body.get("success", False):
            raise ApiError(body.get("message") or f"Request to {path} was not successful", response=response)
        return body.get("data")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_current_user(self) -> Employee:
        return parse_employee(self._request("GET", "/users/me") or {})

    # ------------------------------------------------------------------
    # Attendance
    # ------------------------------------------------------------------
    def get_history(self, user_id: str) -> list[PunchRecord]:
        # the endpoint is scoped to the token's user
        data = self._request("GET", "/attendance/history") or []
        return [parse_punch_record(item, user_id=user_id) for item in data]

    def record_punch(
        self,
        user_id: str,
        punch_type: PunchType,
        point: GeoPoint,
        project_id: Optional[str] = None,
        task_id: Optional[str] = None,
    ) -> PunchRecord:
        punch_type = PunchType(punch_type)
        payload: dict[str, Any] = {
            "punchType": punch_type.value,
            "latitude": point.latitude,
            "longitude": point.longitude,
        }
        if punch_type == PunchType.IN:
            payload["projectId"] = project_id
            payload["taskId"] = task_id or None
            path = "/attendance/punch-in"
        else:
            path = "/attendance/punch-out"
        data = self._request("POST", path, json=payload) or {}
        return parse_punch_record(data, user_id=user_id)

    # ------------------------------------------------------------------
    # Geofences
    # ------------------------------------------------------------------
    def list_all(self) -> list[GeofenceRegion]:
        data = self._request("GET", "/geofence") or []
        return [parse_geofence(item) for item in data]

    def create_geofence(
        self,
        name: str,
        latitude: Any,
        longitude: Any,
        radius_meters: Any = DEFAULT_GEOFENCE_RADIUS_METERS,
    ) -> GeofenceRegion:
        payload = {
            "locationName": require_non_empty(name, "Location name"),
            "latitude": require_in_range(require_float(latitude, "Latitude"), "Latitude", -90.0, 90.0),
            "longitude": require_in_range(require_float(longitude, "Longitude"), "Longitude", -180.0, 180.0),
            "radiusMeters": require_positive(require_float(radius_meters, "Radius"), "Radius"),
        }
        data = self._request("POST", "/geofence", json=payload) or {}
        return parse_geofence({**payload, **data})
