# File: /practice/projects_page/page.py | Version: 1.0 | Title: Projects Page Composition & Default-View Restore
"""
Wires the state container, data orchestration, filtering engine, URL sync and
the view/dashboard managers into one page object.

Typical driving loop::

    page = ProjectsPage(api, user, url=InMemoryUrlQuery("/"))
    await page.refresh()          # loads data, restores the default view once
    await page.update_filters(show_archived=True)   # new listing params refetch
    page.filtering.paginated_projects
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Set

from practice.core.permissions import is_manager_or_admin
from practice.projects_page.dashboard_management import DashboardManager
from practice.projects_page.data import ProjectsData, ProjectsSnapshot, parsing_fetcher, projects_params
from practice.projects_page.filtering import ProjectFiltering
from practice.projects_page.notifications import LogNotifier, Notifier
from practice.projects_page.query_cache import QueryCache
from practice.projects_page.state import ProjectsPageState
from practice.projects_page.transport import ApiClient
from practice.projects_page.url_sync import InMemoryUrlQuery, UrlQuery, export_schedule_status, import_url_filters
from practice.projects_page.view_management import ViewManager
from practice.schemas.filters import FilterBundle, ViewMode

log = logging.getLogger(__name__)

_MODE_ONLY = (ViewMode.list, ViewMode.kanban, ViewMode.calendar)


class ProjectsPage:
    def __init__(
        self,
        api: ApiClient,
        user: Any,
        *,
        url: Optional[UrlQuery] = None,
        notifier: Optional[Notifier] = None,
        cache: Optional[QueryCache] = None,
    ):
        self.api = api
        self.user = user
        self.url = url if url is not None else InMemoryUrlQuery()
        self.notifier = notifier if notifier is not None else LogNotifier()
        self.cache = cache if cache is not None else QueryCache(parsing_fetcher(api))

        self.state = ProjectsPageState()
        self.filtering = ProjectFiltering(self.state.list_settings.items_per_page)
        self.data = ProjectsData(self.cache)
        self.tasks: Set["asyncio.Task[Any]"] = set()
        self.views = ViewManager(self.state, self.filtering, self.cache, api, self.notifier, self.url, self.tasks)
        self.dashboards = DashboardManager(self.state, self.cache, api, self.notifier, self.views)

        self.snapshot = ProjectsSnapshot()
        self._loaded = False

    @property
    def is_manager_or_admin(self) -> bool:
        return self.user is not None and is_manager_or_admin(self.user)

    @property
    def ready(self) -> bool:
        """User, saved views, dashboards and preferences have all finished loading."""
        snap = self.snapshot
        return (
            self._loaded
            and self.user is not None
            and not snap.saved_views_loading
            and not snap.dashboards_loading
            and not snap.preferences_loading
        )

    # ---------- data ----------

    def _listing_key(self) -> Dict[str, Any]:
        return projects_params(self.state.filters, self.state.current_saved_view_id)

    async def _load(self, *, wait: bool) -> None:
        state = self.state
        self.snapshot = await self.data.load(
            self.user,
            view_mode=state.view_mode,
            filters=state.filters,
            selected_view_id=state.current_saved_view_id,
            wait=wait,
        )
        self._loaded = True

    async def refresh(self, *, wait: bool = True, now: Optional[datetime] = None) -> ProjectsSnapshot:
        state = self.state
        await self._load(wait=wait)

        if state.current_dashboard is not None and self.snapshot.services:
            self.dashboards.repair_service_filter(self.snapshot.services)

        if self.ready and not state.default_view_applied:
            before = self._listing_key()
            await self.apply_default_view()
            if self._listing_key() != before:
                await self._load(wait=wait)

        self.recompute(now=now)
        return self.snapshot

    async def _after_change(self, before: Dict[str, Any]) -> None:
        """Refetch when the server-side listing params moved, then re-filter."""
        if self._loaded and self._listing_key() != before:
            log.debug("listing params changed: %s", self._listing_key())
            await self._load(wait=True)
        self.recompute()

    def reload(self) -> None:
        """The refresh button: mark the main listings stale."""
        self.data.refresh()

    def recompute(self, *, now: Optional[datetime] = None):
        snap = self.snapshot
        return self.filtering.update(
            snap.projects,
            self.state.filters,
            stages_map=snap.stages_map,
            stages_loading=snap.stages_loading,
            stages_error=snap.stages_error,
            view_mode=self.state.view_mode,
            is_manager_or_admin=self.is_manager_or_admin,
            items_per_page=self.state.list_settings.items_per_page,
            now=now,
        )

    # ---------- filters & URL ----------

    async def update_filters(self, **changes: Any) -> FilterBundle:
        before = self._listing_key()
        previous = self.state.filters.schedule_status_filter
        bundle = self.state.update_filters(**changes)
        export_schedule_status(self.url, previous, bundle.schedule_status_filter)
        await self._after_change(before)
        return bundle

    async def reset_filters(self) -> FilterBundle:
        before = self._listing_key()
        previous = self.state.filters.schedule_status_filter
        self.state.reset_filters()
        export_schedule_status(self.url, previous, self.state.filters.schedule_status_filter)
        await self._after_change(before)
        return self.state.filters

    async def on_navigation(self, url: Optional[str] = None) -> FilterBundle:
        if url is not None:
            self.url.navigate(url)
        bundle = import_url_filters(self.url, self.state.filters)
        if bundle is not self.state.filters:
            before = self._listing_key()
            self.state.replace_filters(bundle)
            await self._after_change(before)
        return self.state.filters

    async def set_view_mode(self, mode: ViewMode) -> None:
        # kanban without a service drops the current saved view
        before = self._listing_key()
        self.views.manual_view_mode_change(mode)
        await self._after_change(before)

    def set_items_per_page(self, items_per_page: int) -> None:
        self.state.set_items_per_page(items_per_page)
        self.recompute()

    # ---------- artifacts ----------

    async def load_view(self, view_id: str) -> bool:
        view = next((v for v in self.snapshot.saved_views if v.id == view_id), None)
        if view is None:
            self.notifier.notify("Error", "The selected view could not be found", "destructive")
            return False
        before = self._listing_key()
        loaded = await self.views.load_saved_view(view)
        await self._after_change(before)
        return loaded

    async def load_dashboard(self, dashboard_id: str) -> bool:
        dashboard = next((d for d in self.snapshot.dashboards if d.id == dashboard_id), None)
        if dashboard is None:
            self.notifier.notify("Error", "The selected dashboard could not be found", "destructive")
            return False
        before = self._listing_key()
        loaded = self.dashboards.load_dashboard(dashboard, self.snapshot.services)
        await self._after_change(before)
        return loaded

    async def apply_default_view(self) -> None:
        """Restore the stored default view; runs at most once per page."""
        state = self.state
        if state.default_view_applied:
            return
        state.default_view_applied = True

        if self.url.has_params():
            log.debug("URL carries filters; stored default view skipped")
            return
        prefs = self.snapshot.preferences
        if prefs is None or prefs.default_view_type is None:
            return

        view_type = ViewMode(prefs.default_view_type)
        if not prefs.default_view_id:
            if view_type in _MODE_ONLY:
                state.set_view_mode(view_type)
            return

        if view_type == ViewMode.dashboard:
            dashboard = next((d for d in self.snapshot.dashboards if d.id == prefs.default_view_id), None)
            if dashboard is not None:
                self.dashboards.load_dashboard(dashboard, self.snapshot.services)
                return

        view = next((v for v in self.snapshot.saved_views if v.id == prefs.default_view_id), None)
        if view is not None:
            await self.views.load_saved_view(view)
        else:
            log.info("default view %s no longer exists", prefs.default_view_id)

    # ---------- lifecycle ----------

    async def settle(self) -> None:
        """Wait for background refreshes and detached preference writes."""
        await self.cache.settle()
        while self.tasks:
            await asyncio.gather(*list(self.tasks), return_exceptions=True)
