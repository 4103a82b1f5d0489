from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import require_float, require_in_range
from ..core.exceptions import ValidationError
from .model import GeoPoint


@dataclass(frozen=True)
class FixedLocationProvider:
    """Location reading that was already resolved by the caller."""

    point: Optional[GeoPoint] = None

    def get_current_location(self) -> Optional[GeoPoint]:
        return self.point


class PayloadLocationProvider:
    """Reads ``latitude``/``longitude`` out of a request body.

    Missing, non-numeric or out-of-range coordinates mean the location is
    unavailable rather than an error.
    """

    def __init__(self, payload: Optional[Mapping[str, Any]]):
        self._payload = payload or {}

    def get_current_location(self) -> Optional[GeoPoint]:
        lat = self._payload.get("latitude")
        lon = self._payload.get("longitude")
        if lat is None or lon is None:
            return None
        try:
            latitude = require_in_range(require_float(lat, "latitude"), "latitude", -90.0, 90.0)
            longitude = require_in_range(require_float(lon, "longitude"), "longitude", -180.0, 180.0)
        except ValidationError:
            return None
        return GeoPoint(latitude=latitude, longitude=longitude)
