# File: /practice/schemas/filters.py | Version: 2.0 | Title: Filter Bundle, Saved-View Payload & Enum Schemas
from __future__ import annotations

from datetime import UTC, date, datetime, time
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

ALL = "all"


class ViewMode(str, Enum):
    list = "list"
    kanban = "kanban"
    calendar = "calendar"
    dashboard = "dashboard"
    pivot = "pivot"


class DynamicDateFilter(str, Enum):
    all = "all"
    overdue = "overdue"
    today = "today"
    next7days = "next7days"
    next14days = "next14days"
    next30days = "next30days"
    custom = "custom"


class ScheduleStatusFilter(str, Enum):
    all = "all"
    behind = "behind"
    overdue = "overdue"
    both = "both"

    @property
    def needs_stage_data(self) -> bool:
        return self in (ScheduleStatusFilter.behind, ScheduleStatusFilter.both)


class WidgetType(str, Enum):
    bar = "bar"
    pie = "pie"
    number = "number"
    line = "line"


class WidgetGroupBy(str, Enum):
    project_type = "projectType"
    status = "status"
    assignee = "assignee"
    service_owner = "serviceOwner"
    days_overdue = "daysOverdue"


class Visibility(str, Enum):
    private = "private"
    shared = "shared"


# -------------------- Interchange dates --------------------


def _to_utc_millis(value: Any) -> Any:
    """Coerce str/date/datetime to an aware UTC datetime at millisecond precision."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time(), tzinfo=UTC)
    if isinstance(value, datetime):
        value = value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
        return value.replace(microsecond=value.microsecond // 1000 * 1000)
    return value


def format_interchange(value: datetime) -> str:
    """`YYYY-MM-DDTHH:MM:SS.mmmZ`, the stored form of bundle dates."""
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


UtcDateTime = Annotated[
    Optional[datetime],
    BeforeValidator(_to_utc_millis),
    PlainSerializer(format_interchange, return_type=str, when_used="json-unless-none"),
]


def _sentinel(value: Any) -> Any:
    # Missing, null and empty-string values all mean "no filter"
    return ALL if value is None or value == "" else value


Sentinel = Annotated[str, BeforeValidator(_sentinel)]


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase keys; accepts either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# -------------------- Filter bundles --------------------


class CustomDateRange(CamelModel):
    from_: UtcDateTime = Field(default=None, alias="from")
    to: UtcDateTime = None

    @property
    def is_set(self) -> bool:
        return self.from_ is not None or self.to is not None


class CalendarSettings(CamelModel):
    calendar_view_type: Literal["month", "week"] = "month"
    show_project_due_dates: bool = True
    show_project_target_dates: bool = True
    show_stage_deadlines: bool = False
    show_task_due_dates: bool = True


class ColumnPreferencesSettings(CamelModel):
    column_order: List[str] = Field(default_factory=list)
    visible_columns: List[str] = Field(default_factory=list)
    column_widths: Dict[str, int] = Field(default_factory=dict)


class ListViewSettings(CamelModel):
    # Unset entries leave the live list settings untouched on load
    sort_by: Optional[str] = None
    sort_order: Optional[Literal["asc", "desc"]] = None
    items_per_page: Optional[int] = Field(default=None, ge=1)
    column_preferences: Optional[ColumnPreferencesSettings] = None


class PivotConfig(CamelModel):
    model_config = ConfigDict(extra="allow")

    rows: List[str] = Field(default_factory=list)
    cols: List[str] = Field(default_factory=list)
    vals: List[str] = Field(default_factory=list)
    aggregator_name: str = "Count"


class _CommonFilters(CamelModel):
    service_filter: Sentinel = ALL
    task_assignee_filter: Sentinel = ALL
    service_owner_filter: Sentinel = ALL
    user_filter: Sentinel = ALL
    show_archived: bool = False
    show_completed_regardless: bool = True
    dynamic_date_filter: DynamicDateFilter = DynamicDateFilter.all
    custom_date_range: CustomDateRange = Field(default_factory=CustomDateRange)
    service_due_date_filter: Sentinel = ALL

    @field_validator("show_archived", mode="before")
    @classmethod
    def _archived_default(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("show_completed_regardless", mode="before")
    @classmethod
    def _completed_default(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("dynamic_date_filter", mode="before")
    @classmethod
    def _date_default(cls, v: Any) -> Any:
        return _sentinel(v)

    @field_validator("custom_date_range", mode="before")
    @classmethod
    def _range_default(cls, v: Any) -> Any:
        return {} if v is None else v


class FilterBundle(_CommonFilters):
    """Every filter dimension of the projects page at one point in time."""

    schedule_status_filter: ScheduleStatusFilter = ScheduleStatusFilter.all
    client_has_project_type_ids: Tuple[str, ...] = ()

    @field_validator("schedule_status_filter", mode="before")
    @classmethod
    def _schedule_default(cls, v: Any) -> Any:
        return _sentinel(v)

    @field_validator("client_has_project_type_ids", mode="before")
    @classmethod
    def _types_default(cls, v: Any) -> Any:
        return () if v is None else tuple(v)


class DashboardFilters(_CommonFilters):
    """A dashboard's own filter bundle; it never shares state with the page bundle."""

    client_filter: Sentinel = ALL
    project_type_filter: Sentinel = ALL


class StoredViewFilters(CamelModel):
    """Decoded saved-view payload: the bundle plus mode-specific sub-settings."""

    bundle: FilterBundle = Field(default_factory=FilterBundle)
    calendar_settings: Optional[CalendarSettings] = None
    list_view_settings: Optional[ListViewSettings] = None
