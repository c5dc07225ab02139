# File: /tests/test_dashboard_management.py | Version: 1.0 | Title: Dashboard load, draft editing, persistence & widgets
from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace

import pytest

from practice.projects_page.dashboard_management import DashboardManager, resolve_service_filter
from practice.projects_page.data import ANALYTICS, DASHBOARDS, PREFERENCES, parsing_fetcher
from practice.projects_page.filtering import ProjectFiltering
from practice.projects_page.notifications import CollectingNotifier
from practice.projects_page.query_cache import QueryCache
from practice.projects_page.state import ProjectsPageState
from practice.projects_page.transport import ApiError
from practice.projects_page.url_sync import InMemoryUrlQuery
from practice.projects_page.view_management import ViewManager
from practice.schemas.core_entities import ServiceOut
from practice.schemas.filters import ALL, DynamicDateFilter, ViewMode, WidgetGroupBy, WidgetType
from practice.schemas.view import DashboardOut, Widget

PAYROLL_ID = "3f2b9c1e-7a4d-4e2b-9c1e-7a4d4e2b9c1e"
SERVICES = (ServiceOut(id=PAYROLL_ID, name="Payroll"), ServiceOut(id="svc-9", name="Audit"))


@pytest.fixture()
def page(fake_api):
    state = ProjectsPageState()
    cache = QueryCache(parsing_fetcher(fake_api), retry_delay=0)
    notifier = CollectingNotifier()
    views = ViewManager(state, ProjectFiltering(), cache, fake_api, notifier, InMemoryUrlQuery("/"))
    return SimpleNamespace(
        state=state,
        notifier=notifier,
        views=views,
        dashboards=DashboardManager(state, cache, fake_api, notifier, views),
    )


def _dashboard(dashboard_id="d1", name="Ops", filters=None, widgets=()) -> DashboardOut:
    return DashboardOut(
        id=dashboard_id,
        user_id="u-1",
        name=name,
        filters=json.dumps(filters) if filters is not None else None,
        widgets=list(widgets),
    )


def _saved(payload):
    return {"id": "d-new", "user_id": "u-1", **payload}


async def _drain(page) -> None:
    while page.views.tasks:
        await asyncio.gather(*list(page.views.tasks), return_exceptions=True)


WIDGET = Widget(id="widget-1", type=WidgetType.bar, title="By type", group_by=WidgetGroupBy.project_type)


# ---------- service filter repair ----------


@pytest.mark.parametrize(
    "stored,expected",
    [
        (ALL, ALL),
        (PAYROLL_ID, PAYROLL_ID),
        ("svc-9", "svc-9"),
        ("Payroll", PAYROLL_ID),
        ("Nonexistent", ALL),
    ],
)
def test_resolve_service_filter(stored, expected):
    assert resolve_service_filter(stored, SERVICES) == expected


def test_names_kept_until_services_load():
    assert resolve_service_filter("Payroll", ()) == "Payroll"


@pytest.mark.asyncio
async def test_load_resolves_legacy_service_name(page, fake_api):
    page.state.select_saved_view("v1")
    dashboard = _dashboard(filters={"serviceFilter": "Payroll", "clientFilter": "c-1"}, widgets=[WIDGET])

    assert page.dashboards.load_dashboard(dashboard, SERVICES)
    await _drain(page)

    assert page.state.dashboard_filters.service_filter == PAYROLL_ID
    assert page.state.dashboard_filters.client_filter == "c-1"
    assert page.state.current_dashboard.id == "d1"
    assert page.state.current_saved_view_id is None
    assert page.state.view_mode == ViewMode.dashboard
    assert page.state.dashboard_widgets == (WIDGET,)
    assert fake_api.mutations_to("POST", PREFERENCES)[0][2] == {"default_view_type": "dashboard", "default_view_id": "d1"}
    assert page.notifier.items[-1].description == 'Loaded dashboard "Ops"'


@pytest.mark.asyncio
async def test_repair_after_services_arrive(page):
    page.dashboards.load_dashboard(_dashboard(filters={"serviceFilter": "Payroll"}), ())
    await _drain(page)
    assert page.state.dashboard_filters.service_filter == "Payroll"

    page.dashboards.repair_service_filter(SERVICES)
    assert page.state.dashboard_filters.service_filter == PAYROLL_ID


@pytest.mark.asyncio
async def test_unreadable_dashboard_filters(page):
    dashboard = _dashboard().model_copy(update={"filters": "{nope"})
    assert not page.dashboards.load_dashboard(dashboard, SERVICES)
    assert page.state.current_dashboard is None
    assert page.notifier.errors


def test_dashboard_date_filters_are_exclusive(page):
    page.dashboards.update_dashboard_filters(dynamic_date_filter=DynamicDateFilter.overdue)
    filters = page.dashboards.update_dashboard_filters(service_due_date_filter="2024-05-01")
    assert filters.dynamic_date_filter == DynamicDateFilter.all
    assert filters.service_due_date_filter == "2024-05-01"

    filters = page.dashboards.update_dashboard_filters(dynamic_date_filter=DynamicDateFilter.today)
    assert filters.service_due_date_filter == ALL


# ---------- draft ----------


def test_widget_needs_a_title(page):
    page.dashboards.open_create_dashboard()
    assert page.dashboards.add_widget() is None
    assert page.notifier.items[-1].description == "Please enter a widget title"


def test_add_and_remove_widgets(page):
    page.dashboards.open_create_dashboard()
    draft = page.state.draft
    draft.widget_title = "  Per status "
    draft.widget_type = WidgetType.pie
    draft.widget_group_by = WidgetGroupBy.status
    draft.widget_dialog_open = True

    widget = page.dashboards.add_widget()

    assert widget.title == "Per status" and widget.id.startswith("widget-")
    draft = page.state.draft
    assert draft.widgets == (widget,)
    assert draft.widget_title == "" and not draft.widget_dialog_open
    assert draft.modal_open

    page.dashboards.remove_widget(widget.id)
    assert page.state.draft.widgets == ()


def test_opening_for_edit_copies_the_dashboard(page):
    draft = page.dashboards.open_create_dashboard(_dashboard(name="Ops", widgets=[WIDGET]))
    assert not draft.is_creating
    assert draft.name == "Ops" and draft.widgets == (WIDGET,)


@pytest.mark.asyncio
async def test_save_validation(page, fake_api):
    page.dashboards.open_create_dashboard()
    assert await page.dashboards.save_new_dashboard() is None
    assert page.notifier.items[-1].description == "Please enter a dashboard name"

    page.state.draft.name = "Ops"
    assert await page.dashboards.save_new_dashboard() is None
    assert page.notifier.items[-1].description == "Please add at least one widget"
    assert fake_api.mutations == []


@pytest.mark.asyncio
async def test_save_new_dashboard(page, fake_api):
    fake_api.writes[("POST", DASHBOARDS)] = _saved
    page.dashboards.open_create_dashboard()
    page.dashboards.update_dashboard_filters(client_filter="c-1")
    page.state.draft.name = " Ops "
    page.state.draft.widgets = (WIDGET,)

    saved = await page.dashboards.save_new_dashboard()

    _, _, payload = fake_api.mutations_to("POST", DASHBOARDS)[0]
    assert payload["name"] == "Ops"
    assert json.loads(payload["filters"])["clientFilter"] == "c-1"
    assert payload["widgets"][0]["group_by"] == "projectType"
    assert saved.id == "d-new"
    assert page.state.current_dashboard.id == "d-new"
    assert not page.state.draft.modal_open
    assert "Dashboard Saved" in page.notifier.titles


@pytest.mark.asyncio
async def test_editing_patches_the_current_dashboard(page, fake_api):
    fake_api.writes[("PATCH", DASHBOARDS)] = lambda payload: {"id": "d1", "user_id": "u-1", **payload}
    current = _dashboard(widgets=[WIDGET])
    page.state.select_dashboard(current)
    page.dashboards.open_create_dashboard(current)
    page.state.draft.name = "Ops v2"

    saved = await page.dashboards.save_new_dashboard()

    assert saved.name == "Ops v2"
    assert fake_api.mutations_to("PATCH", f"{DASHBOARDS}/d1")
    assert not fake_api.mutations_to("POST", DASHBOARDS)


@pytest.mark.asyncio
async def test_save_current_dashboard_writes_live_widgets(page, fake_api):
    fake_api.writes[("PATCH", DASHBOARDS)] = lambda payload: {"id": "d1", "user_id": "u-1", **payload}
    page.state.select_dashboard(_dashboard())
    page.state.dashboard_widgets = (WIDGET,)

    await page.dashboards.save_current_dashboard()

    _, _, payload = fake_api.mutations_to("PATCH", f"{DASHBOARDS}/d1")[0]
    assert payload["widgets"] == [WIDGET.model_dump(mode="json")]


@pytest.mark.asyncio
async def test_delete_current_dashboard_returns_to_list(page, fake_api):
    page.state.select_dashboard(_dashboard())
    assert await page.dashboards.delete_dashboard("d1")
    assert page.state.current_dashboard is None
    assert page.state.view_mode == ViewMode.list

    fake_api.writes[("DELETE", DASHBOARDS)] = ApiError(403, "Only the owner can change this dashboard")
    assert not await page.dashboards.delete_dashboard("d2")
    assert page.notifier.errors[-1].title == "Access Restricted"


@pytest.mark.asyncio
async def test_widget_series_uses_dashboard_filters(page, fake_api):
    fake_api.writes[("POST", ANALYTICS)] = {"series": [{"label": "Payroll Run", "value": 3}], "meta": {"total": 3}}
    page.dashboards.update_dashboard_filters(service_filter="svc-9")

    series = await page.dashboards.widget_series(WIDGET)

    assert [(p.label, p.value) for p in series] == [("Payroll Run", 3)]
    _, _, body = fake_api.mutations_to("POST", ANALYTICS)[0]
    assert body["filters"]["serviceFilter"] == "svc-9"
    assert body["group_by"] == "projectType"
