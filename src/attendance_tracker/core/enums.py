from __future__ import annotations

from enum import Enum


class WorkMode(str, Enum):
    """Per-user attribute deciding whether punch-in is geofence-gated."""

    ONSITE = "ONSITE"
    REMOTE = "REMOTE"


class PunchType(str, Enum):
    IN = "IN"
    OUT = "OUT"


class SessionState(str, Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"


class AdmissionReason(str, Enum):
    """Why a punch request was rejected by the local checks."""

    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"
    OUTSIDE_GEOFENCE = "OUTSIDE_GEOFENCE"
    ALREADY_PUNCHED_IN = "ALREADY_PUNCHED_IN"
    NO_ACTIVE_SESSION = "NO_ACTIVE_SESSION"
    PROJECT_REQUIRED = "PROJECT_REQUIRED"

    @property
    def message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES = {
    AdmissionReason.LOCATION_UNAVAILABLE: "Please enable location services.",
    AdmissionReason.OUTSIDE_GEOFENCE: "You are not within the designated work location.",
    AdmissionReason.ALREADY_PUNCHED_IN: "You are already punched in.",
    AdmissionReason.NO_ACTIVE_SESSION: "You are not punched in.",
    AdmissionReason.PROJECT_REQUIRED: "Please select a project.",
}
