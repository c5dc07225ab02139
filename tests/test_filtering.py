# File: /tests/test_filtering.py | Version: 1.0 | Title: Filtering engine, pagination & tasks filters
from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta

import pytest

from practice.projects_page import predicates as p
from practice.projects_page.filtering import (
    ProjectFiltering,
    TasksFilters,
    active_filter_count,
    filter_projects,
    paginate,
    tasks_active_filter_count,
    total_pages,
)
from practice.schemas.filters import DynamicDateFilter, FilterBundle, ScheduleStatusFilter, ViewMode

NOW = datetime(2024, 3, 15, 10, 30, tzinfo=UTC)


@pytest.fixture()
def projects(make_project):
    return [
        make_project(assignee="U1", service_id="svc-1"),
        make_project(assignee="U1", archived=True),
        make_project(assignee="U2", due=NOW - timedelta(days=3)),
        make_project(owner="U1", service_id="svc-2"),
        make_project(),
    ]


def test_assignee_scenario_excludes_archived(projects):
    bundle = FilterBundle(service_filter="all", task_assignee_filter="U1", show_archived=False)
    result = filter_projects(projects, bundle, now=NOW)
    assert [pr.id for pr in result] == [projects[0].id]


def test_filtering_is_idempotent_and_order_independent(projects):
    bundle = FilterBundle(task_assignee_filter="U1", show_archived=True, dynamic_date_filter=DynamicDateFilter.all)
    once = filter_projects(projects, bundle, now=NOW)
    assert filter_projects(once, bundle, now=NOW) == once

    checks = [
        lambda pr: p.matches_service(pr, bundle.service_filter),
        lambda pr: p.matches_assignee(pr, bundle.task_assignee_filter),
        lambda pr: p.matches_owner(pr, bundle.service_owner_filter),
        lambda pr: p.matches_archive(pr, bundle.show_archived, ViewMode.list),
    ]
    for order in itertools.permutations(checks):
        kept = [pr for pr in projects if all(check(pr) for check in order)]
        assert tuple(kept) == once


def test_archive_override_in_kanban(make_project):
    archived = make_project(archived=True, service_id="svc-1")
    bundle = FilterBundle(show_archived=False)
    assert filter_projects([archived], bundle, view_mode=ViewMode.kanban, now=NOW) == ()
    assert filter_projects([archived], bundle.model_copy(update={"show_archived": True}), view_mode=ViewMode.list, now=NOW)


def test_behind_filter_excludes_everything_when_stages_failed(make_project):
    slow = make_project(status="Intake", stage_entered_at=NOW - timedelta(days=9))
    bundle = FilterBundle(schedule_status_filter=ScheduleStatusFilter.behind)
    assert filter_projects([slow], bundle, stages_error=True, now=NOW) == ()
    assert filter_projects([slow], bundle, stages_map={"pt-1:Intake": 24}, now=NOW) == (slow,)


def test_pages():
    assert total_pages(0, 10) == 0
    assert total_pages(23, 10) == 3
    assert paginate(list(range(23)), 3, 10) == (20, 21, 22)


def test_paging_scenario_with_clamp(make_project):
    items = [make_project(assignee="A" if i < 5 else "B") for i in range(23)]
    engine = ProjectFiltering(items_per_page=10)
    engine.update(items, FilterBundle(), now=NOW)
    engine.set_current_page(3)
    assert [pr.id for pr in engine.paginated_projects] == [pr.id for pr in items[20:]]

    engine.update(items, FilterBundle(task_assignee_filter="A"), now=NOW)
    assert len(engine.filtered_projects) == 5
    assert engine.current_page == 1


def test_changed_bundle_resets_page(make_project):
    items = [make_project() for _ in range(30)]
    engine = ProjectFiltering(items_per_page=10)
    engine.update(items, FilterBundle(), now=NOW)
    engine.set_current_page(2)

    engine.update(items, FilterBundle(), now=NOW)
    assert engine.current_page == 2
    engine.update(items, FilterBundle(show_archived=True), now=NOW)
    assert engine.current_page == 1


def test_shrinking_data_clamps_page(make_project):
    items = [make_project() for _ in range(30)]
    engine = ProjectFiltering(items_per_page=10)
    engine.update(items, FilterBundle(), now=NOW)
    engine.set_current_page(3)
    engine.update(items[:15], FilterBundle(), now=NOW)
    assert engine.current_page == 2


def test_requested_page_is_clamped_to_last_page(make_project):
    items = [make_project() for _ in range(23)]
    engine = ProjectFiltering(items_per_page=10)
    engine.update(items, FilterBundle(), now=NOW)

    engine.set_current_page(7)
    assert engine.current_page == engine.total_pages == 3
    assert len(engine.paginated_projects) == 3

    engine.set_current_page(0)
    assert engine.current_page == 1

    engine.update([], FilterBundle(), now=NOW)
    engine.set_current_page(4)
    assert engine.current_page == 1


def test_non_list_modes_are_not_paginated(make_project):
    items = [make_project() for _ in range(12)]
    engine = ProjectFiltering(items_per_page=5)
    engine.update(items, FilterBundle(), view_mode=ViewMode.calendar, now=NOW)
    assert len(engine.paginated_projects) == 12


def test_active_filter_count():
    assert active_filter_count(FilterBundle(), True) == 0
    bundle = FilterBundle(
        service_filter="svc-1",
        user_filter="u-1",
        show_archived=True,
        dynamic_date_filter=DynamicDateFilter.overdue,
        service_due_date_filter="2024-03-01",
        client_has_project_type_ids=("pt-1", "pt-2"),
    )
    # dynamic and service-due-date share a slot
    assert active_filter_count(bundle, True) == 5
    assert active_filter_count(bundle, False) == 4


def test_tasks_filters_assignee_follows_ownership():
    filters = TasksFilters(ownership="all", assignee="u-1")
    assert tasks_active_filter_count(filters) == 2

    assigned = filters.with_ownership("assigned")
    assert assigned.assignee == "all"
    assert tasks_active_filter_count(assigned) == 0
    assert assigned.cleared() == TasksFilters()
