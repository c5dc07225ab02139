# File: /practice/models/view.py | Version: 2.0 | Title: SQLAlchemy models for Saved Views, Dashboards & Preferences
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, JSON, String, Text, UniqueConstraint, func

from practice.db.base_class import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class ProjectView(Base):
    __tablename__ = "project_views"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("user.id"), nullable=False)
    name = Column(String, nullable=False)

    # Opaque serialized filter bundle produced by the projects page
    filters = Column(Text, nullable=False)
    # "list" | "kanban" | "calendar" | "pivot"
    view_mode = Column(String, nullable=False, server_default="list")
    calendar_settings = Column(JSON, nullable=True)
    pivot_config = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (Index("ix_project_views_user", "user_id"),)


class Dashboard(Base):
    __tablename__ = "dashboards"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("user.id"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)

    filters = Column(Text, nullable=True)
    widgets = Column(JSON, nullable=False, default=list)
    # "private" | "shared"
    visibility = Column(String, nullable=False, server_default="private")
    is_homescreen_dashboard = Column(Boolean, nullable=False, server_default="0")

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_dashboards_user", "user_id"),
        Index("ix_dashboards_visibility", "visibility"),
    )


class UserProjectPreferences(Base):
    __tablename__ = "user_project_preferences"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("user.id"), nullable=False, unique=True)
    # "list" | "kanban" | "calendar" | "dashboard" | "pivot"
    default_view_type = Column(String, nullable=True)
    default_view_id = Column(String, nullable=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class ColumnPreferences(Base):
    __tablename__ = "column_preferences"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("user.id"), nullable=False)
    view_type = Column(String, nullable=False)
    column_order = Column(JSON, nullable=True)
    visible_columns = Column(JSON, nullable=True)
    column_widths = Column(JSON, nullable=True)

    __table_args__ = (UniqueConstraint("user_id", "view_type", name="uq_column_prefs_user_view"),)


class ProjectListSnapshot(Base):
    """Last known-good projects listing per (user, listing parameters)."""

    __tablename__ = "project_list_snapshots"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("user.id"), nullable=False)
    cache_key = Column(String, nullable=False)
    projects = Column(JSON, nullable=False)
    stage_stats = Column(JSON, nullable=True)
    cached_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "cache_key", name="uq_snapshot_user_key"),)
