# File: /practice/projects_page/state.py | Version: 1.0 | Title: Projects Page State Container
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from practice.core.config import settings
from practice.projects_page.filtering import TasksFilters
from practice.schemas.filters import (
    ALL,
    CalendarSettings,
    ColumnPreferencesSettings,
    CustomDateRange,
    DashboardFilters,
    DynamicDateFilter,
    FilterBundle,
    ListViewSettings,
    PivotConfig,
    ViewMode,
    Visibility,
    WidgetGroupBy,
    WidgetType,
)
from practice.schemas.view import DashboardOut, Widget

log = logging.getLogger(__name__)


@dataclass
class DashboardDraft:
    """Create/edit dashboard dialog contents."""

    is_creating: bool = True
    modal_open: bool = False
    name: str = ""
    description: str = ""
    is_homescreen: bool = False
    visibility: Visibility = Visibility.private
    widgets: Tuple[Widget, ...] = ()
    widget_dialog_open: bool = False
    widget_type: WidgetType = WidgetType.bar
    widget_title: str = ""
    widget_group_by: WidgetGroupBy = WidgetGroupBy.project_type


@dataclass
class ListSettings:
    sort_by: str = "timeInStage"
    sort_order: str = "desc"
    items_per_page: int = field(default_factory=lambda: settings.DEFAULT_ITEMS_PER_PAGE)


class ProjectsPageState:
    """
    Every slice of live page state in one place.

    Mutators keep the page's product rules:
    - choosing a dynamic date clears the service-due-date filter, and vice versa
      (which also clears the custom range);
    - clearing the service filter resets the service-due-date filter;
    - kanban needs a service: without one the page falls back to list and
      forgets the current saved view;
    - at most one of saved view / dashboard is current.
    """

    def __init__(self) -> None:
        self.view_mode: ViewMode = ViewMode.list
        self.filters = FilterBundle()
        self.list_settings = ListSettings()
        self.pivot_config: Optional[PivotConfig] = None
        self.calendar_settings: Optional[CalendarSettings] = None

        self.current_saved_view_id: Optional[str] = None
        self.current_dashboard: Optional[DashboardOut] = None
        self.dashboard_widgets: Tuple[Widget, ...] = ()
        self.dashboard_edit_mode = False
        self.dashboard_description = ""
        self.dashboard_is_homescreen = False
        self.dashboard_visibility = Visibility.private
        self.dashboard_filters = DashboardFilters()
        self.draft = DashboardDraft()

        self.save_view_dialog_open = False
        self.new_view_name = ""
        self.tasks_filters = TasksFilters()
        self.default_view_applied = False

    # ---------- reactive rules ----------

    def _reconcile(self) -> None:
        if self.filters.service_filter == ALL and self.filters.service_due_date_filter != ALL:
            self.filters = self.filters.model_copy(update={"service_due_date_filter": ALL})
        if self.view_mode == ViewMode.kanban and self.filters.service_filter == ALL:
            log.debug("kanban without a service; falling back to list")
            self.current_saved_view_id = None
            self.view_mode = ViewMode.list

    # ---------- filters ----------

    def replace_filters(self, bundle: FilterBundle) -> None:
        """Apply a whole bundle as-is (saved view load, URL import)."""
        self.filters = bundle
        self._reconcile()

    def update_filters(self, **changes: Any) -> FilterBundle:
        """Apply user edits with the date-filter exclusivity rules."""
        dynamic = changes.get("dynamic_date_filter")
        if dynamic is not None and dynamic != DynamicDateFilter.all:
            changes.setdefault("service_due_date_filter", ALL)
        due = changes.get("service_due_date_filter")
        if due is not None and due != ALL and "dynamic_date_filter" not in changes:
            changes["dynamic_date_filter"] = DynamicDateFilter.all
            changes["custom_date_range"] = CustomDateRange()
        if "client_has_project_type_ids" in changes:
            changes["client_has_project_type_ids"] = tuple(changes["client_has_project_type_ids"])

        self.filters = FilterBundle.model_validate({**self.filters.model_dump(), **changes})
        self._reconcile()
        return self.filters

    def reset_filters(self, *, show_archived: bool = False) -> None:
        self.filters = FilterBundle(show_archived=show_archived)
        self._reconcile()

    # ---------- presentation ----------

    def set_view_mode(self, mode: ViewMode) -> None:
        self.view_mode = ViewMode(mode)
        self._reconcile()

    def set_list_sort(self, sort_by: str, sort_order: str) -> None:
        self.list_settings = replace(self.list_settings, sort_by=sort_by, sort_order=sort_order)

    def set_items_per_page(self, items_per_page: int) -> None:
        self.list_settings = replace(self.list_settings, items_per_page=items_per_page)

    def list_view_settings(self, column_preferences: Optional[ColumnPreferencesSettings] = None) -> ListViewSettings:
        return ListViewSettings(
            sort_by=self.list_settings.sort_by,
            sort_order=self.list_settings.sort_order,
            items_per_page=self.list_settings.items_per_page,
            column_preferences=column_preferences,
        )

    # ---------- current artifact (mutually exclusive) ----------

    def select_saved_view(self, view_id: Optional[str]) -> None:
        self.current_saved_view_id = view_id
        if view_id is not None:
            self.clear_current_dashboard()

    def apply_saved_view(self, view_id: str, bundle: FilterBundle, view_mode: ViewMode) -> None:
        """Adopt a saved view's bundle and mode together, then apply the rules once."""
        self.select_saved_view(view_id)
        self.filters = bundle
        self.view_mode = ViewMode(view_mode)
        self._reconcile()

    def select_dashboard(self, dashboard: DashboardOut) -> None:
        self.current_saved_view_id = None
        self.current_dashboard = dashboard
        self.dashboard_widgets = tuple(dashboard.widgets)
        self.dashboard_edit_mode = False
        self.dashboard_description = dashboard.description or ""
        self.dashboard_is_homescreen = dashboard.is_homescreen_dashboard
        self.dashboard_visibility = dashboard.visibility
        self.view_mode = ViewMode.dashboard

    def clear_current_dashboard(self) -> None:
        self.current_dashboard = None
        self.dashboard_widgets = ()

    # ---------- tasks tab ----------

    def set_tasks_filters(self, **changes: Any) -> TasksFilters:
        ownership = changes.pop("ownership", None)
        filters = self.tasks_filters.model_copy(update=changes)
        if ownership is not None:
            filters = filters.with_ownership(ownership)
        self.tasks_filters = filters
        return filters
