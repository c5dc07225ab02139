# File: /practice/schemas/__init__.py | Version: 2.0 | Path: /practice/schemas/__init__.py
from . import auth, core_entities, filters, user, view

__all__ = ["auth", "user", "core_entities", "filters", "view"]
