# File: /practice/projects_page/view_management.py | Version: 1.0 | Title: Saved View Save/Update/Load/Delete
from __future__ import annotations

import logging
from typing import Any, Dict, MutableSet, Optional, Sequence

from pydantic import ValidationError

from practice.projects_page.data import (
    COLUMN_PREFERENCES,
    MINUTE,
    PREFERENCES,
    PROJECT_VIEWS,
    PROJECTS_LIST_VIEW_TYPE,
    STAGES,
)
from practice.projects_page.filtering import ProjectFiltering
from practice.projects_page.notifications import Notifier, best_effort, notify_error
from practice.projects_page.query_cache import QueryCache
from practice.projects_page.serialization import (
    deserialize_pivot_config,
    deserialize_view_filters,
    serialize_pivot_config,
    serialize_view_filters,
)
from practice.projects_page.state import ProjectsPageState
from practice.projects_page.transport import ApiClient, ApiError
from practice.projects_page.url_sync import UrlQuery
from practice.schemas.filters import ColumnPreferencesSettings, ScheduleStatusFilter, ViewMode
from practice.schemas.view import ColumnPreferencesOut, ProjectViewOut

log = logging.getLogger(__name__)

COLUMN_PREFS_PARAMS = {"view_type": PROJECTS_LIST_VIEW_TYPE}


class ViewManager:
    def __init__(
        self,
        state: ProjectsPageState,
        filtering: ProjectFiltering,
        cache: QueryCache,
        api: ApiClient,
        notifier: Notifier,
        url: UrlQuery,
        tasks: Optional[MutableSet[Any]] = None,
    ):
        self.state = state
        self.filtering = filtering
        self.cache = cache
        self.api = api
        self.notifier = notifier
        self.url = url
        self.tasks = tasks if tasks is not None else set()

    # ---------- payload ----------

    def _cached_column_preferences(self) -> Optional[ColumnPreferencesSettings]:
        prefs: Optional[ColumnPreferencesOut] = self.cache.get_data(COLUMN_PREFERENCES, COLUMN_PREFS_PARAMS)
        if prefs is None:
            return None
        return ColumnPreferencesSettings(
            column_order=prefs.column_order,
            visible_columns=prefs.visible_columns,
            column_widths=prefs.column_widths,
        )

    def _view_payload(self) -> Dict[str, Any]:
        state = self.state
        mode = state.view_mode
        list_settings = None
        if mode == ViewMode.list:
            list_settings = state.list_view_settings(self._cached_column_preferences())
        calendar = state.calendar_settings if mode == ViewMode.calendar else None
        return {
            "filters": serialize_view_filters(state.filters, mode, calendar, list_settings),
            # Dashboards are not a saved-view mode
            "view_mode": ViewMode.list.value if mode == ViewMode.dashboard else mode.value,
            "calendar_settings": calendar.model_dump(mode="json", by_alias=True) if calendar else None,
            "pivot_config": (
                serialize_pivot_config(state.pivot_config)
                if mode == ViewMode.pivot and state.pivot_config is not None
                else None
            ),
        }

    # ---------- save / update ----------

    async def save_view(self, name: Optional[str] = None) -> Optional[ProjectViewOut]:
        name = (self.state.new_view_name if name is None else name).strip()
        if not name:
            self.notifier.notify("Error", "Please enter a view name", "destructive")
            return None

        try:
            raw = await self.api.mutate("POST", PROJECT_VIEWS, {"name": name, **self._view_payload()})
        except ApiError as exc:
            notify_error(self.notifier, exc)
            return None

        view = ProjectViewOut.model_validate(raw)
        self.cache.invalidate(PROJECT_VIEWS)
        self.state.select_saved_view(view.id)
        self.state.save_view_dialog_open = False
        self.state.new_view_name = ""
        self.notifier.notify("View Saved", f'Saved view "{view.name}"')
        return view

    async def update_current_view(self, saved_views: Sequence[ProjectViewOut]) -> Optional[ProjectViewOut]:
        view_id = self.state.current_saved_view_id
        if view_id is None:
            return None
        current = next((v for v in saved_views if v.id == view_id), None)
        if current is None:
            self.notifier.notify("Error", "The current view could not be found", "destructive")
            return None

        try:
            raw = await self.api.mutate("PATCH", f"{PROJECT_VIEWS}/{view_id}", self._view_payload())
        except ApiError as exc:
            notify_error(self.notifier, exc)
            return None

        self.cache.invalidate(PROJECT_VIEWS)
        self.notifier.notify("View Updated", f'Updated view "{current.name}"')
        return ProjectViewOut.model_validate(raw)

    # ---------- load ----------

    async def _stage_safe_schedule(self, schedule: ScheduleStatusFilter) -> ScheduleStatusFilter:
        if not schedule.needs_stage_data:
            return schedule
        try:
            await self.cache.ensure(STAGES, stale_time=5 * MINUTE, retry=2)
        except Exception as exc:
            log.warning("stage lookup unavailable, schedule filter reset to 'all': %s", exc)
            self.notifier.notify(
                "Filter Unavailable",
                "Could not load stage data for behind schedule filtering. Showing all projects instead.",
                "destructive",
            )
            return ScheduleStatusFilter.all
        return schedule

    async def _restore_column_preferences(self, prefs: ColumnPreferencesSettings) -> None:
        try:
            await self.api.mutate(
                "POST",
                COLUMN_PREFERENCES,
                {
                    "view_type": PROJECTS_LIST_VIEW_TYPE,
                    "column_order": prefs.column_order,
                    "visible_columns": prefs.visible_columns,
                    "column_widths": prefs.column_widths,
                },
            )
        except ApiError as exc:
            log.warning("Failed to restore column preferences from saved view: %s", exc)
            return
        self.cache.invalidate(COLUMN_PREFERENCES)

    def record_last_viewed(self, view_type: ViewMode, view_id: Optional[str]) -> None:
        payload = {"default_view_type": ViewMode(view_type).value, "default_view_id": view_id}
        best_effort(self.api.mutate("POST", PREFERENCES, payload), "saving last viewed", self.tasks)

    async def load_saved_view(self, view: ProjectViewOut) -> bool:
        """Copy a saved view into live state; the stored view is never touched."""
        try:
            stored = deserialize_view_filters(view.filters)
        except (ValueError, ValidationError) as exc:
            log.warning("unreadable filters on view %s: %s", view.id, exc)
            notify_error(self.notifier, exc)
            return False

        bundle = stored.bundle
        schedule = await self._stage_safe_schedule(bundle.schedule_status_filter)
        if schedule != bundle.schedule_status_filter:
            bundle = bundle.model_copy(update={"schedule_status_filter": schedule})

        state = self.state
        mode = ViewMode(view.view_mode)
        state.apply_saved_view(view.id, bundle, mode)

        if mode == ViewMode.list:
            state.calendar_settings = None
            # Never resume a stale page of a different result set
            self.filtering.set_current_page(1)
            settings = stored.list_view_settings
            if settings is not None:
                if settings.sort_by:
                    state.set_list_sort(settings.sort_by, settings.sort_order or state.list_settings.sort_order)
                elif settings.sort_order:
                    state.set_list_sort(state.list_settings.sort_by, settings.sort_order)
                if settings.items_per_page:
                    state.set_items_per_page(settings.items_per_page)
                prefs = settings.column_preferences
                if prefs is not None and prefs.visible_columns:
                    await self._restore_column_preferences(prefs)
        elif mode == ViewMode.calendar:
            state.calendar_settings = stored.calendar_settings
        elif mode == ViewMode.pivot:
            state.pivot_config = deserialize_pivot_config(view.pivot_config)
        else:
            state.calendar_settings = None

        self.record_last_viewed(mode, view.id)
        self.notifier.notify("View Loaded", f'Applied filters from "{view.name}"')
        return True

    # ---------- delete & navigation ----------

    async def delete_view(self, view_id: str) -> bool:
        try:
            await self.api.mutate("DELETE", f"{PROJECT_VIEWS}/{view_id}")
        except ApiError as exc:
            notify_error(self.notifier, exc)
            return False
        self.cache.invalidate(PROJECT_VIEWS)
        if self.state.current_saved_view_id == view_id:
            self.state.select_saved_view(None)
        self.notifier.notify("View Deleted", "The saved view was deleted")
        return True

    def view_all_projects(self) -> None:
        self.state.reset_filters(show_archived=True)
        self.state.select_saved_view(None)
        self.state.set_view_mode(ViewMode.list)
        self.url.navigate("/?view=all")
        self.notifier.notify("Filters Reset", "Showing all projects (including archived)")

    def manual_view_mode_change(self, mode: ViewMode) -> None:
        self.state.select_saved_view(None)
        self.state.set_view_mode(mode)
