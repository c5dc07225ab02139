# File: /practice/projects_page/filtering.py | Version: 1.0 | Title: Filtering Engine (filter, paginate, page reset/clamp)
from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from math import ceil
from typing import Literal, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from practice.core.config import settings
from practice.projects_page import predicates as p
from practice.schemas.core_entities import ProjectOut
from practice.schemas.filters import ALL, FilterBundle, ScheduleStatusFilter, ViewMode

log = logging.getLogger(__name__)


def _passes(
    project: ProjectOut,
    bundle: FilterBundle,
    stages_map: Mapping[str, int],
    stages_loading: bool,
    stages_error: bool,
    view_mode: ViewMode,
    is_manager_or_admin: bool,
    now: datetime,
) -> bool:
    # Cheap id comparisons first; the first failing predicate wins
    return (
        p.matches_service(project, bundle.service_filter)
        and p.matches_assignee(project, bundle.task_assignee_filter)
        and p.matches_owner(project, bundle.service_owner_filter)
        and p.matches_user(project, bundle.user_filter, is_manager_or_admin)
        and p.matches_date_range(project, bundle.dynamic_date_filter, bundle.custom_date_range, now)
        and p.matches_client_project_types(project, bundle.client_has_project_type_ids)
        and p.schedule_status(
            project, bundle.schedule_status_filter, stages_map, stages_loading, stages_error, now
        ) is True
        and p.matches_archive(project, bundle.show_archived, view_mode)
    )


def filter_projects(
    projects: Sequence[ProjectOut],
    bundle: FilterBundle,
    *,
    stages_map: Optional[Mapping[str, int]] = None,
    stages_loading: bool = False,
    stages_error: bool = False,
    view_mode: ViewMode = ViewMode.list,
    is_manager_or_admin: bool = False,
    now: Optional[datetime] = None,
) -> Tuple[ProjectOut, ...]:
    """Single pass over `projects`; a project is kept iff every predicate passes."""
    now = now or datetime.now(UTC)
    stages_map = stages_map or {}
    return tuple(
        project
        for project in projects
        if _passes(
            project, bundle, stages_map, stages_loading, stages_error, view_mode, is_manager_or_admin, now
        )
    )


def total_pages(count: int, items_per_page: int) -> int:
    if count <= 0 or items_per_page <= 0:
        return 0
    return ceil(count / items_per_page)


def paginate(items: Sequence[ProjectOut], page: int, items_per_page: int) -> Tuple[ProjectOut, ...]:
    start = (max(page, 1) - 1) * items_per_page
    return tuple(items[start:start + items_per_page])


def active_filter_count(bundle: FilterBundle, is_manager_or_admin: bool) -> int:
    """Number of non-default filter dimensions, for the filter badge."""
    count = 0
    count += bundle.service_filter != ALL
    count += bundle.task_assignee_filter != ALL
    count += bundle.service_owner_filter != ALL
    count += bundle.user_filter != ALL and is_manager_or_admin
    count += bundle.show_archived
    count += bundle.schedule_status_filter != ScheduleStatusFilter.all
    # Dynamic and service-due-date filters are mutually exclusive: one slot
    count += bundle.dynamic_date_filter != ALL or bundle.service_due_date_filter != ALL
    count += bool(bundle.client_has_project_type_ids)
    return int(count)


class ProjectFiltering:
    """
    Stateful wrapper recomputed on every input change.

    - A changed bundle resets the page to 1.
    - A shrink that strands the current page clamps it to the last page.
    """

    def __init__(self, items_per_page: int = settings.DEFAULT_ITEMS_PER_PAGE):
        self.items_per_page = items_per_page
        self.current_page = 1
        self.view_mode = ViewMode.list
        self.filtered_projects: Tuple[ProjectOut, ...] = ()
        self.active_filter_count = 0
        self._bundle: Optional[FilterBundle] = None

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered_projects), self.items_per_page)

    @property
    def paginated_projects(self) -> Tuple[ProjectOut, ...]:
        if self.view_mode != ViewMode.list:
            return self.filtered_projects
        return paginate(self.filtered_projects, self.current_page, self.items_per_page)

    def set_current_page(self, page: int) -> None:
        self.current_page = max(1, min(page, self.total_pages or 1))

    def update(
        self,
        projects: Optional[Sequence[ProjectOut]],
        bundle: FilterBundle,
        *,
        stages_map: Optional[Mapping[str, int]] = None,
        stages_loading: bool = False,
        stages_error: bool = False,
        view_mode: ViewMode = ViewMode.list,
        is_manager_or_admin: bool = False,
        items_per_page: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[ProjectOut, ...]:
        if self._bundle is not None and bundle != self._bundle:
            self.current_page = 1
        self._bundle = bundle
        self.view_mode = ViewMode(view_mode)
        if items_per_page is not None:
            self.items_per_page = items_per_page

        self.filtered_projects = filter_projects(
            projects or (),
            bundle,
            stages_map=stages_map,
            stages_loading=stages_loading,
            stages_error=stages_error,
            view_mode=self.view_mode,
            is_manager_or_admin=is_manager_or_admin,
            now=now,
        )

        pages = self.total_pages
        if pages > 0 and self.current_page > pages:
            log.debug("clamping page %s -> %s", self.current_page, pages)
            self.current_page = pages

        self.active_filter_count = active_filter_count(bundle, is_manager_or_admin)
        return self.filtered_projects


# -------------------- Tasks workspace tab --------------------

Ownership = Literal["assigned", "created", "all"]


class TasksFilters(BaseModel):
    """Filters of the tasks tab that sits beside the projects list."""

    model_config = ConfigDict(frozen=True)

    ownership: Ownership = "assigned"
    status: str = "open"
    priority: str = "all"
    assignee: str = "all"
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: str = ""

    def with_ownership(self, ownership: Ownership) -> "TasksFilters":
        # The assignee picker is hidden for "assigned", so its value cannot linger
        changes = {"ownership": ownership}
        if ownership == "assigned":
            changes["assignee"] = "all"
        return self.model_copy(update=changes)

    def cleared(self) -> "TasksFilters":
        return TasksFilters()


def tasks_active_filter_count(filters: TasksFilters) -> int:
    count = 0
    count += filters.ownership != "assigned"
    count += filters.status != "open"
    count += filters.priority != "all"
    count += filters.ownership != "assigned" and filters.assignee != "all"
    count += filters.date_from is not None
    count += filters.date_to is not None
    return int(count)
