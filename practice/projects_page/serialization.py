# File: /practice/projects_page/serialization.py | Version: 1.0 | Title: Saved View / Dashboard Filter Payload Codec
"""
Filter payloads are JSON objects with camelCase keys. Dates use the fixed
interchange form `YYYY-MM-DDTHH:MM:SS.mmmZ`. Missing or null keys decode to
their "no filter" sentinels, so payloads written before a field existed still load.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Union

from practice.schemas.filters import (
    CalendarSettings,
    DashboardFilters,
    FilterBundle,
    ListViewSettings,
    PivotConfig,
    ScheduleStatusFilter,
    StoredViewFilters,
    ViewMode,
)

Payload = Union[str, Mapping[str, Any], None]


def _load(raw: Payload) -> Dict[str, Any]:
    if raw is None or raw == "":
        return {}
    data = json.loads(raw) if isinstance(raw, str) else dict(raw)
    if not isinstance(data, dict):
        raise ValueError("filter payload must be a JSON object")
    return data


def _without_nulls(data: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(data, dict):
        return None
    return {k: v for k, v in data.items() if v is not None}


def serialize_view_filters(
    bundle: FilterBundle,
    view_mode: ViewMode,
    calendar_settings: Optional[CalendarSettings] = None,
    list_view_settings: Optional[ListViewSettings] = None,
) -> str:
    payload = bundle.model_dump(mode="json", by_alias=True)
    if view_mode == ViewMode.calendar and calendar_settings is not None:
        payload["calendarSettings"] = calendar_settings.model_dump(mode="json", by_alias=True)
    if view_mode == ViewMode.list and list_view_settings is not None:
        payload["listViewSettings"] = list_view_settings.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(payload)


def deserialize_view_filters(raw: Payload) -> StoredViewFilters:
    data = _load(raw)
    # Older payloads only had a boolean "behind schedule" toggle
    if not data.get("scheduleStatusFilter") and data.get("behindScheduleOnly"):
        data["scheduleStatusFilter"] = ScheduleStatusFilter.behind.value

    calendar = _without_nulls(data.get("calendarSettings"))
    list_settings = _without_nulls(data.get("listViewSettings"))
    return StoredViewFilters(
        bundle=FilterBundle.model_validate(data),
        calendar_settings=CalendarSettings.model_validate(calendar) if calendar is not None else None,
        list_view_settings=ListViewSettings.model_validate(list_settings) if list_settings is not None else None,
    )


def serialize_dashboard_filters(filters: DashboardFilters) -> str:
    return json.dumps(filters.model_dump(mode="json", by_alias=True))


def deserialize_dashboard_filters(raw: Payload) -> DashboardFilters:
    return DashboardFilters.model_validate(_load(raw))


def serialize_pivot_config(config: PivotConfig) -> str:
    return json.dumps(config.model_dump(mode="json", by_alias=True))


def deserialize_pivot_config(raw: Payload) -> Optional[PivotConfig]:
    data = _load(raw)
    return PivotConfig.model_validate(data) if data else None
