"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Mean Earth radius used by the haversine distance, in meters.
EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_GEOFENCE_RADIUS_METERS = 200
DEFAULT_API_TIMEOUT_SECONDS = 15
MINUTES_PER_HOUR = 60
