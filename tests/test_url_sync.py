# File: /tests/test_url_sync.py | Version: 1.0 | Title: URL filter import/export
from __future__ import annotations

from practice.projects_page.url_sync import InMemoryUrlQuery, export_schedule_status, import_url_filters
from practice.schemas.filters import DynamicDateFilter, FilterBundle, ScheduleStatusFilter


def test_whitelisted_params_override_the_bundle():
    url = InMemoryUrlQuery(
        "/projects?taskAssigneeFilter=u-1&serviceOwnerFilter=u-2&dynamicDateFilter=overdue"
        "&scheduleStatus=behind&serviceFilter=svc-9"
    )
    bundle = import_url_filters(url, FilterBundle())
    assert bundle.task_assignee_filter == "u-1"
    assert bundle.service_owner_filter == "u-2"
    assert bundle.dynamic_date_filter == DynamicDateFilter.overdue
    assert bundle.schedule_status_filter == ScheduleStatusFilter.behind
    # not whitelisted
    assert bundle.service_filter == "all"


def test_unchanged_import_returns_same_bundle():
    bundle = FilterBundle(task_assignee_filter="u-1")
    assert import_url_filters(InMemoryUrlQuery("/projects?taskAssigneeFilter=u-1"), bundle) is bundle
    assert import_url_filters(InMemoryUrlQuery("/projects"), bundle) is bundle


def test_invalid_enum_values_are_ignored():
    url = InMemoryUrlQuery("/projects?dynamicDateFilter=someday&scheduleStatus=late")
    assert import_url_filters(url, FilterBundle()) == FilterBundle()


def test_export_writes_and_removes_schedule_status():
    url = InMemoryUrlQuery("/projects?tab=list")
    assert export_schedule_status(url, ScheduleStatusFilter.all, ScheduleStatusFilter.overdue)
    assert url.params() == {"tab": "list", "scheduleStatus": "overdue"}

    assert export_schedule_status(url, ScheduleStatusFilter.overdue, ScheduleStatusFilter.all)
    assert url.params() == {"tab": "list"}


def test_export_is_a_no_op_without_a_change():
    url = InMemoryUrlQuery("/projects")
    assert not export_schedule_status(url, None, ScheduleStatusFilter.behind)
    assert not export_schedule_status(url, ScheduleStatusFilter.behind, ScheduleStatusFilter.behind)
    assert url.history == []


def test_only_schedule_status_is_exported():
    url = InMemoryUrlQuery("/projects?taskAssigneeFilter=u-1")
    export_schedule_status(url, ScheduleStatusFilter.all, ScheduleStatusFilter.both)
    assert url.url == "/projects?taskAssigneeFilter=u-1&scheduleStatus=both"
