# File: /tests/test_predicates.py | Version: 1.0 | Title: Filter predicates
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from practice.projects_page import predicates as p
from practice.schemas.core_entities import StageOut
from practice.schemas.filters import CustomDateRange, DynamicDateFilter, ScheduleStatusFilter, ViewMode

NOW = datetime(2024, 3, 15, 10, 30, tzinfo=UTC)
TODAY = datetime(2024, 3, 15, tzinfo=UTC)


def test_all_sentinel_passes_every_dimension(make_project):
    project = make_project(service_id=None)
    assert p.matches_service(project, "all")
    assert p.matches_assignee(project, "all")
    assert p.matches_owner(project, "all")
    assert p.matches_user(project, "all", True)
    assert p.matches_date_range(project, DynamicDateFilter.all, CustomDateRange(), NOW)
    assert p.matches_client_project_types(project, ())


def test_identity_dimensions(make_project):
    project = make_project(service_id="svc-1", assignee="u-1", owner="u-2")
    assert p.matches_service(project, "svc-1") and not p.matches_service(project, "svc-2")
    assert p.matches_assignee(project, "u-1") and not p.matches_assignee(project, "u-2")
    assert p.matches_owner(project, "u-2") and not p.matches_owner(project, "u-1")


def test_user_dimension_only_applies_to_managers(make_project):
    project = make_project(assignee="u-1", owner="u-2")
    assert p.matches_user(project, "u-2", True)
    assert not p.matches_user(project, "u-9", True)
    assert p.matches_user(project, "u-9", False)


def test_date_windows_are_half_open_from_start_of_today(make_project):
    windows = DynamicDateFilter
    empty = CustomDateRange()
    yesterday = make_project(due=TODAY - timedelta(seconds=1))
    today = make_project(due=TODAY)
    in_six = make_project(due=TODAY + timedelta(days=6, hours=23))
    in_seven = make_project(due=TODAY + timedelta(days=7))

    assert p.matches_date_range(yesterday, windows.overdue, empty, NOW)
    assert not p.matches_date_range(today, windows.overdue, empty, NOW)
    assert p.matches_date_range(today, windows.today, empty, NOW)
    assert not p.matches_date_range(in_six, windows.today, empty, NOW)
    assert p.matches_date_range(in_six, windows.next7days, empty, NOW)
    assert not p.matches_date_range(in_seven, windows.next7days, empty, NOW)
    assert p.matches_date_range(in_seven, windows.next14days, empty, NOW)


def test_undated_projects_pass_date_filters(make_project):
    assert p.matches_date_range(make_project(due=None), DynamicDateFilter.overdue, CustomDateRange(), NOW)


def test_custom_range_is_inclusive_by_day(make_project):
    window = CustomDateRange(**{"from": "2024-01-01", "to": "2024-01-31"})
    first = make_project(due=datetime(2024, 1, 1, 0, 0, tzinfo=UTC))
    last = make_project(due=datetime(2024, 1, 31, 23, 59, tzinfo=UTC))
    after = make_project(due=datetime(2024, 2, 1, tzinfo=UTC))
    for project, expected in ((first, True), (last, True), (after, False)):
        assert p.matches_date_range(project, DynamicDateFilter.custom, window, NOW) is expected


def test_client_project_types(make_project):
    project = make_project(client_type_ids=("pt-1", "pt-2"))
    assert p.matches_client_project_types(project, ["pt-2", "pt-9"])
    assert not p.matches_client_project_types(project, ["pt-9"])


def test_stages_map_only_keeps_limited_stages():
    stages = [
        StageOut(id="s1", project_type_id="pt-1", name="Intake", max_instance_time=24),
        StageOut(id="s2", project_type_id="pt-1", name="Review", max_instance_time=0),
        StageOut(id="s3", project_type_id="pt-1", name="Done"),
    ]
    assert p.build_stages_map(stages) == {"pt-1:Intake": 24}


def test_behind_schedule_uses_time_in_stage(make_project):
    stages = {"pt-1:Intake": 24}
    slow = make_project(status="Intake", stage_entered_at=NOW - timedelta(hours=25))
    fresh = make_project(status="Intake", stage_entered_at=NOW - timedelta(hours=2))
    unlimited = make_project(status="Review", stage_entered_at=NOW - timedelta(days=30))
    assert p.is_behind_schedule(slow, stages, NOW)
    assert not p.is_behind_schedule(fresh, stages, NOW)
    assert not p.is_behind_schedule(unlimited, stages, NOW)


def test_schedule_status_skips_while_stage_lookup_is_unavailable(make_project):
    project = make_project(status="Intake", stage_entered_at=NOW - timedelta(days=3))
    assert p.schedule_status(project, ScheduleStatusFilter.behind, {}, False, True, NOW) == p.SKIP
    assert p.schedule_status(project, ScheduleStatusFilter.both, {}, True, False, NOW) == p.SKIP
    # "overdue" needs no stage data
    overdue = make_project(due=TODAY - timedelta(days=2))
    assert p.schedule_status(overdue, ScheduleStatusFilter.overdue, {}, False, True, NOW) is True


def test_schedule_both_needs_behind_and_overdue(make_project):
    stages = {"pt-1:Intake": 24}
    both = make_project(status="Intake", stage_entered_at=NOW - timedelta(days=2), due=TODAY - timedelta(days=1))
    behind_only = make_project(status="Intake", stage_entered_at=NOW - timedelta(days=2), due=TODAY + timedelta(days=1))
    assert p.schedule_status(both, ScheduleStatusFilter.both, stages, False, False, NOW) is True
    assert p.schedule_status(behind_only, ScheduleStatusFilter.both, stages, False, False, NOW) is False


def test_kanban_always_hides_archived(make_project):
    archived = make_project(archived=True)
    assert not p.matches_archive(archived, True, ViewMode.kanban)
    assert not p.matches_archive(archived, False, ViewMode.list)
    assert p.matches_archive(archived, True, ViewMode.list)
