from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .web.controller import register as register_attendance

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_GEOFENCE_RADIUS_METERS"] = int(getattr(settings, "DEFAULT_GEOFENCE_RADIUS_METERS", 200))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    api_config = {
        "base_url": getattr(settings, "API_BASE_URL"),
        "timeout": getattr(settings, "API_TIMEOUT", 15),
    }
    logger.debug("settings=%s api=%s", settings_module, api_config["base_url"])

    container = container or build_container(api_config=api_config)
    register_attendance(app, container)

    return app
