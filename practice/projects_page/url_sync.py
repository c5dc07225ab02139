# File: /practice/projects_page/url_sync.py | Version: 1.0 | Title: URL Query-String Filter Import/Export
"""
URL sync is one-way in each direction and asymmetric:

- import: four whitelisted keys are read from the URL on every navigation;
- export: only `scheduleStatus` is written back (the one deep-linkable filter).
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from practice.schemas.filters import DynamicDateFilter, FilterBundle, ScheduleStatusFilter

log = logging.getLogger(__name__)

SCHEDULE_STATUS_PARAM = "scheduleStatus"
IMPORT_KEYS = ("taskAssigneeFilter", "serviceOwnerFilter", "dynamicDateFilter", SCHEDULE_STATUS_PARAM)


class UrlQuery(Protocol):
    def params(self) -> Dict[str, str]: ...

    def set_param(self, key: str, value: str) -> None: ...

    def delete_param(self, key: str) -> None: ...

    def navigate(self, url: str) -> None: ...

    def has_params(self) -> bool: ...


class InMemoryUrlQuery:
    """Address-bar stand-in backed by `urllib.parse`."""

    def __init__(self, url: str = "/"):
        self.history: List[str] = []
        self._set(url)

    def _set(self, url: str) -> None:
        parts = urlsplit(url)
        self._path = parts.path or "/"
        self._query: List[Tuple[str, str]] = parse_qsl(parts.query, keep_blank_values=True)

    @property
    def url(self) -> str:
        return urlunsplit(("", "", self._path, urlencode(self._query), ""))

    def params(self) -> Dict[str, str]:
        return dict(self._query)

    def set_param(self, key: str, value: str) -> None:
        if key in self.params():
            self._query = [(k, value if k == key else v) for k, v in self._query]
        else:
            self._query.append((key, value))
        self.history.append(self.url)

    def delete_param(self, key: str) -> None:
        self._query = [(k, v) for k, v in self._query if k != key]
        self.history.append(self.url)

    def navigate(self, url: str) -> None:
        self._set(url)
        self.history.append(self.url)

    def has_params(self) -> bool:
        return bool(self._query)


def _enum_value(enum_cls, raw: Optional[str]):
    if not raw:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        log.debug("ignoring invalid %s in URL: %r", enum_cls.__name__, raw)
        return None


def import_url_filters(url: UrlQuery, bundle: FilterBundle) -> FilterBundle:
    """
    Overwrite whitelisted filters from the URL. Only values that differ are
    replaced; when nothing differs the same bundle object is returned.
    """
    params = url.params()
    changes = {}

    assignee = params.get("taskAssigneeFilter")
    if assignee and assignee != bundle.task_assignee_filter:
        changes["task_assignee_filter"] = assignee

    owner = params.get("serviceOwnerFilter")
    if owner and owner != bundle.service_owner_filter:
        changes["service_owner_filter"] = owner

    dynamic = _enum_value(DynamicDateFilter, params.get("dynamicDateFilter"))
    if dynamic is not None and dynamic != bundle.dynamic_date_filter:
        changes["dynamic_date_filter"] = dynamic

    schedule = _enum_value(ScheduleStatusFilter, params.get(SCHEDULE_STATUS_PARAM))
    if schedule is not None and schedule != bundle.schedule_status_filter:
        changes["schedule_status_filter"] = schedule

    if not changes:
        return bundle
    log.debug("URL filters applied: %s", sorted(changes))
    return bundle.model_copy(update=changes)


def export_schedule_status(
    url: UrlQuery,
    previous: Optional[ScheduleStatusFilter],
    current: ScheduleStatusFilter,
) -> bool:
    """Mirror a schedule-status change to the URL. Returns True if the URL changed."""
    if previous is None or previous == current:
        return False
    if current == ScheduleStatusFilter.all:
        if SCHEDULE_STATUS_PARAM not in url.params():
            return False
        url.delete_param(SCHEDULE_STATUS_PARAM)
    else:
        url.set_param(SCHEDULE_STATUS_PARAM, ScheduleStatusFilter(current).value)
    return True
