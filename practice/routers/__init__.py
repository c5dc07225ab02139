# File: /practice/routers/__init__.py | Version: 2.0 | Path: /practice/routers/__init__.py
"""
Router package exports.

Keeping these explicit helps static analyzers and avoids surprises
when importing submodules like: `from practice.routers import views as views_router`.
"""
from . import analytics, auth, core_entities, dashboards, preferences, views

__all__ = ["analytics", "auth", "core_entities", "dashboards", "preferences", "views"]
