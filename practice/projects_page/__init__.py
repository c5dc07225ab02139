# File: /practice/projects_page/__init__.py | Version: 1.0 | Path: /practice/projects_page/__init__.py
"""
Projects page engine: filter predicates, filtering/pagination, cached data
orchestration, URL sync and saved view / dashboard persistence.
"""
from .filtering import ProjectFiltering, filter_projects
from .page import ProjectsPage
from .query_cache import QueryCache
from .transport import ApiClient, ApiError

__all__ = ["ApiClient", "ApiError", "ProjectFiltering", "ProjectsPage", "QueryCache", "filter_projects"]
