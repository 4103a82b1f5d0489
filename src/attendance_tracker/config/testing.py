import os

SECRET_KEY = "test-secret"

API_BASE_URL = os.getenv("API_BASE_URL", "http://attendance.test/api")
API_TIMEOUT = 5

DEFAULT_GEOFENCE_RADIUS_METERS = 200

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
