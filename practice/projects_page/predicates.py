# File: /practice/projects_page/predicates.py | Version: 1.0 | Title: Project Filter Predicates (pure, one per dimension)
"""
Each predicate tests one project against one filter value.

All predicates treat the "all"/empty sentinel as a pass, never mutate their
inputs and do not depend on call order, so any subset may be composed with AND.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, UTC
from typing import Dict, Iterable, Literal, Mapping, Optional, Sequence, Union

from practice.schemas.core_entities import ProjectOut, StageOut
from practice.schemas.filters import ALL, CustomDateRange, DynamicDateFilter, ScheduleStatusFilter, ViewMode

SKIP: Literal["skip"] = "skip"
ScheduleResult = Union[bool, Literal["skip"]]

_WINDOW_DAYS = {
    DynamicDateFilter.next7days: 7,
    DynamicDateFilter.next14days: 14,
    DynamicDateFilter.next30days: 30,
}


def _is_all(value: Optional[str]) -> bool:
    return value is None or value == "" or value == ALL


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.astimezone(UTC).date(), time(), tzinfo=UTC)


def as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def matches_service(project: ProjectOut, service_filter: str) -> bool:
    return _is_all(service_filter) or project.service_id == service_filter


def matches_assignee(project: ProjectOut, assignee_filter: str) -> bool:
    return _is_all(assignee_filter) or project.current_assignee_id == assignee_filter


def matches_owner(project: ProjectOut, owner_filter: str) -> bool:
    return _is_all(owner_filter) or project.project_owner_id == owner_filter


def matches_user(project: ProjectOut, user_filter: str, is_manager_or_admin: bool) -> bool:
    # Only managers/admins get the user dimension
    if not is_manager_or_admin or _is_all(user_filter):
        return True
    return user_filter in (project.current_assignee_id, project.project_owner_id)


def matches_date_range(
    project: ProjectOut,
    dynamic_filter: DynamicDateFilter,
    custom_range: CustomDateRange,
    now: datetime,
) -> bool:
    """Due-date buckets relative to the start of today; undated projects pass."""
    if _is_all(dynamic_filter) or project.due_date is None:
        return True

    dynamic_filter = DynamicDateFilter(dynamic_filter)
    due = as_utc(project.due_date)
    today = start_of_day(now)

    if dynamic_filter == DynamicDateFilter.overdue:
        return due < today
    if dynamic_filter == DynamicDateFilter.today:
        return today <= due < today + timedelta(days=1)
    if dynamic_filter in _WINDOW_DAYS:
        return today <= due < today + timedelta(days=_WINDOW_DAYS[dynamic_filter])
    if dynamic_filter == DynamicDateFilter.custom:
        due_day: date = due.astimezone(UTC).date()
        if custom_range.from_ is not None and due_day < custom_range.from_.date():
            return False
        if custom_range.to is not None and due_day > custom_range.to.date():
            return False
        return True
    return True


def matches_client_project_types(project: ProjectOut, type_ids: Sequence[str]) -> bool:
    if not type_ids:
        return True
    if project.client is None:
        return False
    owned = set(project.client.project_type_ids)
    return any(t in owned for t in type_ids)


def build_stages_map(stages: Iterable[StageOut]) -> Dict[str, int]:
    """`"{projectTypeId}:{stageName}" -> max hours`, limited stages only."""
    return {
        f"{s.project_type_id}:{s.name}": s.max_instance_time
        for s in stages
        if s.max_instance_time and s.max_instance_time > 0
    }


def is_behind_schedule(project: ProjectOut, stages_map: Mapping[str, int], now: datetime) -> bool:
    max_hours = stages_map.get(f"{project.project_type_id}:{project.current_status}")
    if not max_hours or project.stage_entered_at is None:
        return False
    elapsed = now - as_utc(project.stage_entered_at)
    return elapsed.total_seconds() / 3600 >= max_hours


def is_overdue(project: ProjectOut, now: datetime) -> bool:
    return project.due_date is not None and as_utc(project.due_date) < start_of_day(now)


def schedule_status(
    project: ProjectOut,
    schedule_filter: ScheduleStatusFilter,
    stages_map: Mapping[str, int],
    stages_loading: bool,
    stages_error: bool,
    now: datetime,
) -> ScheduleResult:
    """True/False, or SKIP while a required stage lookup is unavailable."""
    if _is_all(schedule_filter):
        return True
    schedule_filter = ScheduleStatusFilter(schedule_filter)
    if schedule_filter.needs_stage_data and (stages_loading or stages_error):
        return SKIP
    if schedule_filter == ScheduleStatusFilter.behind:
        return is_behind_schedule(project, stages_map, now)
    if schedule_filter == ScheduleStatusFilter.overdue:
        return is_overdue(project, now)
    return is_behind_schedule(project, stages_map, now) and is_overdue(project, now)


def matches_archive(project: ProjectOut, show_archived: bool, view_mode: ViewMode) -> bool:
    # Kanban boards never show archived projects, whatever the toggle says
    if view_mode == ViewMode.kanban:
        return not project.archived
    return show_archived or not project.archived
