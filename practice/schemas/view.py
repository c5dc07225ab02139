# File: /practice/schemas/view.py | Version: 2.0 | Title: Pydantic v2 schemas for Saved Views, Dashboards, Preferences & Analytics
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from practice.schemas.filters import DashboardFilters, ViewMode, Visibility, WidgetGroupBy, WidgetType

SavedViewMode = Literal["list", "kanban", "calendar", "pivot"]


# -------------------- Saved views --------------------

class ProjectViewBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    # Serialized filter payload, opaque to the server
    filters: str
    view_mode: SavedViewMode = "list"
    calendar_settings: Optional[Dict[str, Any]] = None
    pivot_config: Optional[str] = None


class ProjectViewCreate(ProjectViewBase):
    pass


class ProjectViewUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    filters: Optional[str] = None
    view_mode: Optional[SavedViewMode] = None
    calendar_settings: Optional[Dict[str, Any]] = None
    pivot_config: Optional[str] = None


class ProjectViewOut(ProjectViewBase):
    id: str
    user_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------------------- Dashboards --------------------

class Widget(BaseModel):
    id: str
    type: WidgetType
    title: str = Field(min_length=1)
    group_by: WidgetGroupBy

    model_config = ConfigDict(frozen=True)


class DashboardBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    filters: Optional[str] = None
    widgets: List[Widget] = Field(default_factory=list)
    visibility: Visibility = Visibility.private
    is_homescreen_dashboard: bool = False


class DashboardCreate(DashboardBase):
    pass


class DashboardUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    filters: Optional[str] = None
    widgets: Optional[List[Widget]] = None
    visibility: Optional[Visibility] = None
    is_homescreen_dashboard: Optional[bool] = None


class DashboardOut(DashboardBase):
    id: str
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------------------- Preferences --------------------

class UserProjectPreferencesIn(BaseModel):
    default_view_type: Optional[ViewMode] = None
    default_view_id: Optional[str] = None


class UserProjectPreferencesOut(UserProjectPreferencesIn):
    user_id: str
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ColumnPreferencesIn(BaseModel):
    view_type: str = "projects-list"
    column_order: List[str] = Field(default_factory=list)
    visible_columns: List[str] = Field(default_factory=list)
    column_widths: Dict[str, int] = Field(default_factory=dict)


class ColumnPreferencesOut(ColumnPreferencesIn):
    id: str
    user_id: str

    model_config = ConfigDict(from_attributes=True)


# -------------------- Analytics --------------------

class AnalyticsRequest(BaseModel):
    filters: DashboardFilters = Field(default_factory=DashboardFilters)
    group_by: WidgetGroupBy


class AnalyticsPoint(BaseModel):
    label: str
    value: int


class AnalyticsOut(BaseModel):
    series: List[AnalyticsPoint]
    meta: Dict[str, Any] = Field(default_factory=dict)
