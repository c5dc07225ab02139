# File: /practice/projects_page/data.py | Version: 1.0 | Title: Projects Page Data Orchestration
"""
Issues every read the projects page needs, each with its own gating and
staleness window, and derives the convenience projections (assignees and
service owners present in the loaded projects).

The primary listing is cache-assisted: while a live `/api/projects` read is
pending, the last server-side snapshot from `/api/projects/cached` is shown as a
placeholder when the current filters are covered by that snapshot.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import TypeAdapter

from practice.core.permissions import is_manager_or_admin
from practice.projects_page.predicates import build_stages_map
from practice.projects_page.query_cache import FOREVER, QueryCache, QueryResult
from practice.projects_page.transport import ApiClient
from practice.schemas.core_entities import (
    CachedProjectsOut,
    ClientOut,
    ProjectOut,
    ProjectTypeRef,
    ServiceOut,
    StageOut,
    UserRef,
)
from practice.schemas.filters import ALL, FilterBundle, ViewMode
from practice.schemas.view import (
    ColumnPreferencesOut,
    DashboardOut,
    ProjectViewOut,
    UserProjectPreferencesOut,
)

log = logging.getLogger(__name__)

MINUTE = 60.0

PROJECTS = "/api/projects"
PROJECTS_CACHED = "/api/projects/cached"
USERS = "/api/users"
SERVICES = "/api/services/active"
PROJECT_VIEWS = "/api/project-views"
DASHBOARDS = "/api/dashboards"
PREFERENCES = "/api/user-project-preferences"
CLIENTS = "/api/clients"
PROJECT_TYPES = "/api/project-types"
STAGES = "/api/config/stages"
COLUMN_PREFERENCES = "/api/column-preferences"
ANALYTICS = "/api/analytics"

PROJECTS_LIST_VIEW_TYPE = "projects-list"


def _by_name(items: List[Any]) -> Tuple[Any, ...]:
    return tuple(sorted(items, key=lambda i: i.name.lower()))


_PARSERS: Dict[str, Callable[[Any], Any]] = {
    PROJECTS: lambda raw: tuple(TypeAdapter(List[ProjectOut]).validate_python(raw)),
    PROJECTS_CACHED: TypeAdapter(CachedProjectsOut).validate_python,
    USERS: lambda raw: tuple(TypeAdapter(List[UserRef]).validate_python(raw)),
    SERVICES: lambda raw: _by_name(TypeAdapter(List[ServiceOut]).validate_python(raw)),
    PROJECT_VIEWS: lambda raw: tuple(TypeAdapter(List[ProjectViewOut]).validate_python(raw)),
    DASHBOARDS: lambda raw: tuple(TypeAdapter(List[DashboardOut]).validate_python(raw)),
    PREFERENCES: TypeAdapter(Optional[UserProjectPreferencesOut]).validate_python,
    CLIENTS: lambda raw: _by_name(TypeAdapter(List[ClientOut]).validate_python(raw)),
    PROJECT_TYPES: lambda raw: _by_name(TypeAdapter(List[ProjectTypeRef]).validate_python(raw)),
    STAGES: lambda raw: tuple(TypeAdapter(List[StageOut]).validate_python(raw)),
    COLUMN_PREFERENCES: TypeAdapter(Optional[ColumnPreferencesOut]).validate_python,
}


def parsing_fetcher(api: ApiClient):
    """Cache fetcher that turns API JSON into typed, immutable values."""

    async def fetch(resource: str, params: Mapping[str, Any]) -> Any:
        raw = await api.fetch(resource, params)
        parser = _PARSERS.get(resource)
        return parser(raw) if parser is not None else raw

    return fetch


def cache_eligible(filters: FilterBundle, selected_view_id: Optional[str]) -> bool:
    # The server snapshot is keyed coarsely; service due dates are not covered
    return filters.service_due_date_filter == ALL or selected_view_id is not None


def projects_params(filters: FilterBundle, selected_view_id: Optional[str]) -> Dict[str, Any]:
    return {
        "view_key": selected_view_id or "default",
        "show_archived": filters.show_archived,
        "show_completed_regardless": filters.show_completed_regardless,
        "due_date": filters.service_due_date_filter if filters.service_due_date_filter != ALL else None,
    }


@dataclass(frozen=True)
class ReadSpec:
    resource: str
    stale_time: float
    enabled: bool
    params: Optional[Mapping[str, Any]] = None
    retry: int = 0


@dataclass(frozen=True)
class ProjectsSnapshot:
    projects: Optional[Tuple[ProjectOut, ...]] = None
    projects_loading: bool = False
    projects_fetching: bool = False
    is_using_cached_data: bool = False
    is_refreshing_in_background: bool = False
    is_syncing: bool = False
    is_cache_stale: bool = False
    cached_at: Optional[datetime] = None
    cache_stale_at: Optional[datetime] = None
    error: Optional[BaseException] = None

    users: Tuple[UserRef, ...] = ()
    users_loading: bool = False
    services: Tuple[ServiceOut, ...] = ()
    saved_views: Tuple[ProjectViewOut, ...] = ()
    saved_views_loading: bool = False
    dashboards: Tuple[DashboardOut, ...] = ()
    dashboards_loading: bool = False
    preferences: Optional[UserProjectPreferencesOut] = None
    preferences_loading: bool = False
    clients: Tuple[ClientOut, ...] = ()
    project_types: Tuple[ProjectTypeRef, ...] = ()
    stages: Tuple[StageOut, ...] = ()
    stages_map: Mapping[str, int] = field(default_factory=dict)
    stages_loading: bool = False
    stages_error: bool = False

    task_assignees: Tuple[UserRef, ...] = ()
    service_owners: Tuple[UserRef, ...] = ()


def _distinct(people: List[Optional[UserRef]]) -> Tuple[UserRef, ...]:
    seen: Dict[str, UserRef] = {}
    for person in people:
        if person is not None:
            seen[person.id] = person
    return tuple(seen.values())


class ProjectsData:
    def __init__(self, cache: QueryCache):
        self.cache = cache

    def _specs(self, user: Any, view_mode: ViewMode) -> List[ReadSpec]:
        authed = user is not None
        return [
            ReadSpec(USERS, 5 * MINUTE, authed and is_manager_or_admin(user)),
            ReadSpec(SERVICES, 5 * MINUTE, authed),
            ReadSpec(PROJECT_VIEWS, 5 * MINUTE, authed),
            ReadSpec(DASHBOARDS, 5 * MINUTE, authed),
            ReadSpec(PREFERENCES, 10 * MINUTE, authed),
            ReadSpec(CLIENTS, 5 * MINUTE, authed and view_mode == ViewMode.dashboard),
            ReadSpec(PROJECT_TYPES, 5 * MINUTE, authed),
            ReadSpec(STAGES, 5 * MINUTE, authed, retry=2),
        ]

    async def _first_load(self, specs: List[ReadSpec]) -> None:
        """Await reads that have never produced a value (nor failed) yet."""
        pending = []
        for spec in specs:
            state = self.cache.peek(spec.resource, spec.params)
            if spec.enabled and state.is_loading:
                pending.append(self.cache.fetch(spec.resource, spec.params, stale_time=spec.stale_time, retry=spec.retry))
        if pending:
            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    log.warning("initial load failed: %s", result)

    def _read(self, spec: ReadSpec, placeholder: Any = None) -> QueryResult:
        return self.cache.read(
            spec.resource,
            spec.params,
            stale_time=spec.stale_time,
            placeholder=placeholder,
            retry=spec.retry,
            enabled=spec.enabled,
        )

    async def load(
        self,
        user: Any,
        *,
        view_mode: ViewMode,
        filters: FilterBundle,
        selected_view_id: Optional[str] = None,
        wait: bool = True,
    ) -> ProjectsSnapshot:
        """
        Snapshot of every read. With `wait`, first loads are awaited, except the
        live project listing when a cached snapshot can stand in for it.
        """
        authed = user is not None
        params = projects_params(filters, selected_view_id)
        use_cache = cache_eligible(filters, selected_view_id)

        cached_spec = ReadSpec(PROJECTS_CACHED, FOREVER, authed and use_cache, params)
        projects_spec = ReadSpec(PROJECTS, 2 * MINUTE, authed, params)
        specs = self._specs(user, view_mode)

        if wait:
            await self._first_load([cached_spec, *specs])

        cached = self._read(cached_spec)
        snapshot: Optional[CachedProjectsOut] = cached.data
        placeholder = None
        if use_cache and snapshot is not None and snapshot.from_cache and snapshot.projects is not None:
            placeholder = tuple(snapshot.projects)

        if wait and placeholder is None:
            await self._first_load([projects_spec])
        projects = self._read(projects_spec, placeholder=placeholder)

        reads = {spec.resource: self._read(spec) for spec in specs}
        stages = reads[STAGES]

        projects_loading = projects.is_loading and not projects.is_placeholder
        using_cached = projects.is_placeholder
        cache_stale = snapshot.is_stale if snapshot is not None else False
        refreshing = projects.is_fetching and not projects_loading
        loaded: Tuple[ProjectOut, ...] = projects.data or ()

        return ProjectsSnapshot(
            projects=projects.data,
            projects_loading=projects_loading,
            projects_fetching=projects.is_fetching,
            is_using_cached_data=using_cached,
            is_refreshing_in_background=refreshing,
            is_syncing=(using_cached and cache_stale) or refreshing,
            is_cache_stale=cache_stale,
            cached_at=snapshot.cached_at if snapshot is not None else None,
            cache_stale_at=snapshot.stale_at if snapshot is not None else None,
            error=projects.error,
            users=reads[USERS].data or (),
            users_loading=reads[USERS].enabled and reads[USERS].is_loading,
            services=reads[SERVICES].data or (),
            saved_views=reads[PROJECT_VIEWS].data or (),
            saved_views_loading=reads[PROJECT_VIEWS].is_loading,
            dashboards=reads[DASHBOARDS].data or (),
            dashboards_loading=reads[DASHBOARDS].is_loading,
            preferences=reads[PREFERENCES].data,
            preferences_loading=reads[PREFERENCES].is_loading,
            clients=reads[CLIENTS].data or (),
            project_types=reads[PROJECT_TYPES].data or (),
            stages=stages.data or (),
            stages_map=build_stages_map(stages.data or ()),
            stages_loading=stages.enabled and stages.is_loading,
            stages_error=stages.is_error,
            task_assignees=_distinct([p.current_assignee for p in loaded]),
            service_owners=_distinct([p.project_owner for p in loaded]),
        )

    def refresh(self) -> None:
        """Mark the main listings stale; the next load refetches them."""
        for resource in (PROJECTS, USERS, SERVICES, PROJECT_VIEWS, DASHBOARDS):
            self.cache.invalidate(resource)
