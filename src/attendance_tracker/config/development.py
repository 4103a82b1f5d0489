import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_BASE_URL = os.getenv("API_BASE_URL", "https://attendance-server-fvvv.onrender.com/api")
API_TIMEOUT = int(os.getenv("API_TIMEOUT", "15"))

# Radius pre-filled when an admin creates a new geofence
DEFAULT_GEOFENCE_RADIUS_METERS = int(os.getenv("DEFAULT_GEOFENCE_RADIUS_METERS", "200"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
