# File: /practice/crud/view.py | Version: 2.0 | Title: CRUD helpers for Saved Project Views
from __future__ import annotations

from typing import List, Optional
from sqlalchemy.orm import Session

from practice.models.view import ProjectView
from practice.schemas.view import ProjectViewCreate, ProjectViewUpdate

# Non-nullable columns: an explicit null in a PATCH leaves them unchanged
_REQUIRED = ("name", "filters", "view_mode")


def create_view(db: Session, user_id: str, data: ProjectViewCreate) -> ProjectView:
    v = ProjectView(
        user_id=user_id,
        name=data.name,
        filters=data.filters,
        view_mode=data.view_mode,
        calendar_settings=data.calendar_settings,
        pivot_config=data.pivot_config,
    )
    db.add(v)
    db.commit()
    db.refresh(v)
    return v


def get_view(db: Session, view_id: str) -> Optional[ProjectView]:
    return db.query(ProjectView).filter(ProjectView.id == view_id).first()


def list_views(db: Session, user_id: str) -> List[ProjectView]:
    return (
        db.query(ProjectView)
        .filter(ProjectView.user_id == user_id)
        .order_by(ProjectView.created_at.desc(), ProjectView.name)
        .all()
    )


def update_view(db: Session, v: ProjectView, data: ProjectViewUpdate) -> ProjectView:
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED:
            continue
        setattr(v, field, value)
    db.commit()
    db.refresh(v)
    return v


def delete_view(db: Session, v: ProjectView) -> bool:
    db.delete(v)
    db.commit()
    return True
