# File: /practice/models/__init__.py | Version: 2.0 | Title: Models Package Exports
from .core_entities import (
    Client,
    Project,
    ProjectType,
    Service,
    Stage,
    User,
)
from .view import (
    ColumnPreferences,
    Dashboard,
    ProjectListSnapshot,
    ProjectView,
    UserProjectPreferences,
)

__all__ = [
    "User",
    "Client",
    "Service",
    "ProjectType",
    "Stage",
    "Project",
    "ProjectView",
    "Dashboard",
    "UserProjectPreferences",
    "ColumnPreferences",
    "ProjectListSnapshot",
]
