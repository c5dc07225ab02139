# File: /practice/projects_page/dashboard_management.py | Version: 1.0 | Title: Dashboard Load/Draft/Save/Delete & Widget Series
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from pydantic import ValidationError

from practice.projects_page.data import ANALYTICS, DASHBOARDS
from practice.projects_page.notifications import Notifier, notify_error
from practice.projects_page.query_cache import QueryCache
from practice.projects_page.serialization import deserialize_dashboard_filters, serialize_dashboard_filters
from practice.projects_page.state import DashboardDraft, ProjectsPageState
from practice.projects_page.transport import ApiClient, ApiError
from practice.projects_page.view_management import ViewManager
from practice.schemas.core_entities import ServiceOut
from practice.schemas.filters import ALL, CustomDateRange, DashboardFilters, DynamicDateFilter, ViewMode
from practice.schemas.view import AnalyticsOut, AnalyticsPoint, DashboardOut, Widget

log = logging.getLogger(__name__)

_UUID = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def resolve_service_filter(value: str, services: Sequence[ServiceOut]) -> str:
    """
    Older dashboards stored the service *name*. Map it to the service id;
    an unknown name falls back to "all".
    """
    if value == ALL or not services or _UUID.match(value):
        return value
    if any(s.id == value for s in services):
        return value
    match = next((s for s in services if s.name == value), None)
    if match is not None:
        return match.id
    log.warning('Service "%s" not found in available services, resetting to "all"', value)
    return ALL


class DashboardManager:
    def __init__(
        self,
        state: ProjectsPageState,
        cache: QueryCache,
        api: ApiClient,
        notifier: Notifier,
        views: ViewManager,
    ):
        self.state = state
        self.cache = cache
        self.api = api
        self.notifier = notifier
        self.views = views

    # ---------- load ----------

    def load_dashboard(self, dashboard: DashboardOut, services: Sequence[ServiceOut]) -> bool:
        try:
            filters = deserialize_dashboard_filters(dashboard.filters) if dashboard.filters else None
        except (ValueError, ValidationError) as exc:
            log.warning("unreadable filters on dashboard %s: %s", dashboard.id, exc)
            notify_error(self.notifier, exc)
            return False

        self.state.select_dashboard(dashboard)
        if filters is not None:
            service = resolve_service_filter(filters.service_filter, services)
            if service != filters.service_filter:
                filters = filters.model_copy(update={"service_filter": service})
            self.state.dashboard_filters = filters

        self.views.record_last_viewed(ViewMode.dashboard, dashboard.id)
        self.notifier.notify("Dashboard Loaded", f'Loaded dashboard "{dashboard.name}"')
        return True

    def repair_service_filter(self, services: Sequence[ServiceOut]) -> None:
        """Re-resolve a legacy service name once services have loaded."""
        current = self.state.dashboard_filters.service_filter
        resolved = resolve_service_filter(current, services)
        if resolved != current:
            self.state.dashboard_filters = self.state.dashboard_filters.model_copy(update={"service_filter": resolved})

    def update_dashboard_filters(self, **changes: Any) -> DashboardFilters:
        dynamic = changes.get("dynamic_date_filter")
        if dynamic is not None and dynamic != DynamicDateFilter.all:
            changes.setdefault("service_due_date_filter", ALL)
        due = changes.get("service_due_date_filter")
        if due is not None and due != ALL and "dynamic_date_filter" not in changes:
            changes["dynamic_date_filter"] = DynamicDateFilter.all
            changes["custom_date_range"] = CustomDateRange()
        merged = {**self.state.dashboard_filters.model_dump(), **changes}
        self.state.dashboard_filters = DashboardFilters.model_validate(merged)
        return self.state.dashboard_filters

    # ---------- draft editing ----------

    def reset_draft(self) -> None:
        self.state.draft = DashboardDraft(is_creating=self.state.draft.is_creating)
        self.state.dashboard_filters = DashboardFilters()

    def open_create_dashboard(self, editing: Optional[DashboardOut] = None) -> DashboardDraft:
        if editing is not None:
            self.state.draft = DashboardDraft(
                is_creating=False,
                name=editing.name,
                description=editing.description or "",
                is_homescreen=editing.is_homescreen_dashboard,
                visibility=editing.visibility,
                widgets=tuple(editing.widgets),
            )
        else:
            self.state.draft = DashboardDraft(is_creating=True)
            self.reset_draft()
        self.state.draft.modal_open = True
        return self.state.draft

    def add_widget(self) -> Optional[Widget]:
        draft = self.state.draft
        title = draft.widget_title.strip()
        if not title:
            self.notifier.notify("Error", "Please enter a widget title", "destructive")
            return None

        widget = Widget(
            id=f"widget-{uuid4().hex[:12]}",
            type=draft.widget_type,
            title=title,
            group_by=draft.widget_group_by,
        )
        self.state.draft = DashboardDraft(
            is_creating=draft.is_creating,
            modal_open=draft.modal_open,
            name=draft.name,
            description=draft.description,
            is_homescreen=draft.is_homescreen,
            visibility=draft.visibility,
            widgets=draft.widgets + (widget,),
        )
        self.notifier.notify("Widget Added", "Widget added to dashboard")
        return widget

    def remove_widget(self, widget_id: str) -> None:
        draft = self.state.draft
        draft.widgets = tuple(w for w in draft.widgets if w.id != widget_id)

    # ---------- persistence ----------

    def _payload(self, *, name: str, description: str, widgets: Sequence[Widget], visibility, is_homescreen: bool) -> Dict[str, Any]:
        return {
            "name": name,
            "description": description.strip() or None,
            "filters": serialize_dashboard_filters(self.state.dashboard_filters),
            "widgets": [w.model_dump(mode="json") for w in widgets],
            "visibility": visibility.value,
            "is_homescreen_dashboard": is_homescreen,
        }

    async def _persist(self, payload: Dict[str, Any], dashboard_id: Optional[str]) -> Optional[DashboardOut]:
        try:
            if dashboard_id is None:
                raw = await self.api.mutate("POST", DASHBOARDS, payload)
            else:
                raw = await self.api.mutate("PATCH", f"{DASHBOARDS}/{dashboard_id}", payload)
        except ApiError as exc:
            notify_error(self.notifier, exc)
            return None

        saved = DashboardOut.model_validate(raw)
        self.cache.invalidate(DASHBOARDS)
        self.state.select_dashboard(saved)
        self.notifier.notify("Dashboard Saved", f'Saved dashboard "{saved.name}"')
        return saved

    async def save_new_dashboard(self) -> Optional[DashboardOut]:
        draft = self.state.draft
        if not draft.name.strip():
            self.notifier.notify("Error", "Please enter a dashboard name", "destructive")
            return None
        if not draft.widgets:
            self.notifier.notify("Error", "Please add at least one widget", "destructive")
            return None

        payload = self._payload(
            name=draft.name.strip(),
            description=draft.description,
            widgets=draft.widgets,
            visibility=draft.visibility,
            is_homescreen=draft.is_homescreen,
        )
        current = self.state.current_dashboard
        target = None if draft.is_creating or current is None else current.id
        saved = await self._persist(payload, target)
        if saved is not None:
            self.state.draft.modal_open = False
        return saved

    async def save_current_dashboard(self) -> Optional[DashboardOut]:
        """Write the live widgets/filters back onto the current dashboard."""
        state = self.state
        current = state.current_dashboard
        if current is None:
            return None
        payload = self._payload(
            name=current.name,
            description=state.dashboard_description,
            widgets=state.dashboard_widgets,
            visibility=state.dashboard_visibility,
            is_homescreen=state.dashboard_is_homescreen,
        )
        return await self._persist(payload, current.id)

    async def delete_dashboard(self, dashboard_id: str) -> bool:
        try:
            await self.api.mutate("DELETE", f"{DASHBOARDS}/{dashboard_id}")
        except ApiError as exc:
            notify_error(self.notifier, exc)
            return False

        self.cache.invalidate(DASHBOARDS)
        current = self.state.current_dashboard
        if current is not None and current.id == dashboard_id:
            self.state.clear_current_dashboard()
            self.state.set_view_mode(ViewMode.list)
        self.notifier.notify("Dashboard Deleted", "The dashboard was deleted")
        return True

    # ---------- analytics ----------

    async def widget_series(self, widget: Widget) -> List[AnalyticsPoint]:
        body = {
            "filters": self.state.dashboard_filters.model_dump(mode="json", by_alias=True),
            "group_by": widget.group_by.value,
        }
        raw = await self.api.mutate("POST", ANALYTICS, body)
        return AnalyticsOut.model_validate(raw).series
