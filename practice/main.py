# File: /practice/main.py | Version: 2.0 | Title: FastAPI App (projects, views, dashboards, preferences, analytics)
from __future__ import annotations

import importlib
import importlib.util
import logging

from fastapi import FastAPI

from practice.core.config import settings
from practice.core.logging import configure_logging
from practice.observability.sentry import init_sentry_if_configured

# Initialize logging & observability
configure_logging()
# Silence very verbose multipart parser logs (form logins)
logging.getLogger("python_multipart.multipart").setLevel(logging.WARNING)
init_sentry_if_configured()

# App
app = FastAPI(title="Practice Projects API")


def include_if_exists(module_path: str, attr_name: str = "router") -> bool:
    spec = importlib.util.find_spec(module_path)
    if not spec:
        return False
    mod = importlib.import_module(module_path)
    router = getattr(mod, attr_name, None)
    if router is not None:
        app.include_router(router)
        return True
    return False


# Required routers
include_if_exists("practice.routers.auth")
include_if_exists("practice.routers.auth_extras")
include_if_exists("practice.routers.core_entities")
include_if_exists("practice.routers.views")
include_if_exists("practice.routers.dashboards")
include_if_exists("practice.routers.preferences")

# Optional routers
include_if_exists("practice.routers.analytics")
include_if_exists("practice.routers.health")

# Optional standardized error responses
if settings.ENABLE_STD_ERRORS:
    from practice.core.error_handlers import register_exception_handlers

    register_exception_handlers(app)
