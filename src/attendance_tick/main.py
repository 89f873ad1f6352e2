from __future__ import annotations

import atexit
import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .core.exceptions import StoreUnavailable
from .reports.controller import register as register_reports
from .ticks.controller import register as register_ticks

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PORT"] = int(getattr(settings, "PORT", 3000))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s backend=%s tz=%s",
        settings_module,
        getattr(settings, "STORE_BACKEND", "mysql"),
        getattr(settings, "APP_TZ", ""),
    )

    if container is None:
        container = build_container(settings)
        atexit.register(container.close)

        if getattr(settings, "AUTO_SEED_EMPLOYEES", False):
            try:
                container.tick_service.seed_default_employees(container.default_employees)
            except StoreUnavailable:
                container.close()
                raise

    app.extensions["attendance_tick"] = container

    register_ticks(app, container)
    register_reports(app, container)

    return app
