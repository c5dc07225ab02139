# File: /practice/models/core_entities.py | Version: 2.0 | Path: /practice/models/core_entities.py
from __future__ import annotations

from datetime import datetime, UTC
from typing import List as TList, Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from practice.db.base_class import Base


def gen_uuid() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    __tablename__ = "user"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(120))
    last_name: Mapped[Optional[str]] = mapped_column(String(120))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    # Managers see the admin menu without being full admins
    can_see_admin_menu: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Client(Base):
    __tablename__ = "client"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    projects: Mapped[TList["Project"]] = relationship(back_populates="client")

    @property
    def project_type_ids(self) -> TList[str]:
        return sorted({p.project_type_id for p in self.projects})


class Service(Base):
    __tablename__ = "service"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    project_types: Mapped[TList["ProjectType"]] = relationship(back_populates="service")


class ProjectType(Base):
    __tablename__ = "project_type"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    service_id: Mapped[Optional[str]] = mapped_column(ForeignKey("service.id"), index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    service: Mapped[Optional["Service"]] = relationship(back_populates="project_types")
    stages: Mapped[TList["Stage"]] = relationship(back_populates="project_type", cascade="all, delete-orphan")


class Stage(Base):
    """A kanban stage of a project type's workflow."""

    __tablename__ = "stage"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    project_type_id: Mapped[str] = mapped_column(ForeignKey("project_type.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    # Max hours a project may sit in this stage per visit; null/0 = unlimited
    max_instance_time: Mapped[Optional[int]] = mapped_column(Integer)

    project_type: Mapped["ProjectType"] = relationship(back_populates="stages")


class Project(Base):
    __tablename__ = "project"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    client_id: Mapped[str] = mapped_column(ForeignKey("client.id"), index=True, nullable=False)
    project_type_id: Mapped[str] = mapped_column(ForeignKey("project_type.id"), index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500))

    # Name of the current workflow stage (exactly one at a time)
    current_status: Mapped[str] = mapped_column(String(255), nullable=False)
    stage_entered_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=utcnow)
    current_assignee_id: Mapped[Optional[str]] = mapped_column(ForeignKey("user.id"), index=True)
    project_owner_id: Mapped[Optional[str]] = mapped_column(ForeignKey("user.id"), index=True)

    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    target_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    archived: Mapped[bool] = mapped_column(Boolean, default=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    client: Mapped["Client"] = relationship(back_populates="projects")
    project_type: Mapped["ProjectType"] = relationship()
    current_assignee: Mapped[Optional["User"]] = relationship(foreign_keys=[current_assignee_id])
    project_owner: Mapped[Optional["User"]] = relationship(foreign_keys=[project_owner_id])


# Listing is dominated by "not archived" scans
Index("ix_project_archived_due_date", Project.archived, Project.due_date)
