# File: /practice/crud/analytics.py | Version: 1.0 | Title: Dashboard Widget Aggregations
from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, UTC
from typing import Callable, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from practice.crud import core_entities as crud_core
from practice.projects_page import predicates as p
from practice.schemas.core_entities import ProjectOut
from practice.schemas.filters import ALL, DashboardFilters, WidgetGroupBy
from practice.schemas.view import AnalyticsOut, AnalyticsPoint

log = logging.getLogger(__name__)

OVERDUE_BUCKETS = ("Not overdue", "1-30 days", "31-60 days", "61-90 days", "90+ days")


def _matches(project: ProjectOut, filters: DashboardFilters, is_manager_or_admin: bool, now: datetime) -> bool:
    if filters.client_filter != ALL and project.client_id != filters.client_filter:
        return False
    if filters.project_type_filter != ALL and project.project_type_id != filters.project_type_filter:
        return False
    if filters.service_due_date_filter != ALL:
        if project.due_date is None or p.as_utc(project.due_date).date().isoformat() != filters.service_due_date_filter:
            return False
    return (
        p.matches_service(project, filters.service_filter)
        and p.matches_assignee(project, filters.task_assignee_filter)
        and p.matches_owner(project, filters.service_owner_filter)
        and p.matches_user(project, filters.user_filter, is_manager_or_admin)
        and p.matches_date_range(project, filters.dynamic_date_filter, filters.custom_date_range, now)
    )


def _person(user) -> Optional[str]:
    return user.display_name if user is not None else None


def overdue_bucket(project: ProjectOut, now: datetime) -> str:
    if not p.is_overdue(project, now):
        return OVERDUE_BUCKETS[0]
    days = (p.start_of_day(now).date() - p.as_utc(project.due_date).date()).days
    if days <= 30:
        return OVERDUE_BUCKETS[1]
    if days <= 60:
        return OVERDUE_BUCKETS[2]
    if days <= 90:
        return OVERDUE_BUCKETS[3]
    return OVERDUE_BUCKETS[4]


def _stage_order(db: Session) -> Dict[str, int]:
    order: Dict[str, int] = {}
    for stage in crud_core.get_stages(db):
        order[stage.name] = min(order.get(stage.name, stage.sort_order), stage.sort_order)
    return order


def project_analytics(
    db: Session,
    filters: DashboardFilters,
    group_by: WidgetGroupBy,
    *,
    is_manager_or_admin: bool = False,
    now: Optional[datetime] = None,
) -> AnalyticsOut:
    """Count of matching projects per group label."""
    now = now or datetime.now(UTC)
    rows = crud_core.list_projects(
        db,
        show_archived=filters.show_archived,
        show_completed_regardless=filters.show_completed_regardless,
    )
    projects = [ProjectOut.model_validate(r) for r in rows]
    matching = [pr for pr in projects if _matches(pr, filters, is_manager_or_admin, now)]

    label_of: Dict[WidgetGroupBy, Callable[[ProjectOut], str]] = {
        WidgetGroupBy.project_type: lambda pr: pr.project_type.name if pr.project_type else "Unknown",
        WidgetGroupBy.status: lambda pr: pr.current_status,
        WidgetGroupBy.assignee: lambda pr: _person(pr.current_assignee) or "Unassigned",
        WidgetGroupBy.service_owner: lambda pr: _person(pr.project_owner) or "Unassigned",
        WidgetGroupBy.days_overdue: lambda pr: overdue_bucket(pr, now),
    }
    counts = Counter(label_of[group_by](pr) for pr in matching)

    labels: Sequence[str]
    if group_by == WidgetGroupBy.days_overdue:
        labels = [b for b in OVERDUE_BUCKETS if counts[b]]
    elif group_by == WidgetGroupBy.status:
        order = _stage_order(db)
        labels = sorted(counts, key=lambda name: (order.get(name, len(order)), name))
    else:
        labels = sorted(counts, key=lambda name: (-counts[name], name))

    series: List[AnalyticsPoint] = [AnalyticsPoint(label=label, value=counts[label]) for label in labels]
    log.debug("analytics %s: %d projects in %d groups", group_by.value, len(matching), len(series))
    return AnalyticsOut(series=series, meta={"total": len(matching), "group_by": group_by.value})
