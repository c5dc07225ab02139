# File: /practice/crud/core_entities.py | Version: 2.0 | Path: /practice/crud/core_entities.py
from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timedelta, UTC
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from practice.models import core_entities as models

# ----- PROJECTS -----


def _day_bounds(day: str):
    start = datetime.combine(date.fromisoformat(day), time(), tzinfo=UTC)
    return start, start + timedelta(days=1)


def list_projects(
    db: Session,
    *,
    show_archived: bool = False,
    show_completed_regardless: bool = True,
    due_date: Optional[str] = None,
) -> List[models.Project]:
    """
    Projects with every relation the list/kanban/dashboard views render.
    `due_date` (YYYY-MM-DD) keeps projects due on that day.
    """
    q = db.query(models.Project).options(
        selectinload(models.Project.client).selectinload(models.Client.projects),
        selectinload(models.Project.project_type),
        selectinload(models.Project.current_assignee),
        selectinload(models.Project.project_owner),
    )
    if not show_archived:
        q = q.filter(models.Project.archived == False)  # noqa: E712
    if not show_completed_regardless:
        q = q.filter(models.Project.is_completed == False)  # noqa: E712
    if due_date:
        start, end = _day_bounds(due_date)
        q = q.filter(models.Project.due_date >= start, models.Project.due_date < end)
    return q.order_by(models.Project.due_date.is_(None), models.Project.due_date, models.Project.id).all()


def stage_stats(projects: List[models.Project]) -> Dict[str, int]:
    """Project count per current stage name."""
    return dict(Counter(p.current_status for p in projects))


# ----- REFERENCE DATA -----


def get_active_services(db: Session) -> List[models.Service]:
    return (
        db.query(models.Service)
        .filter(models.Service.is_active == True)  # noqa: E712
        .order_by(models.Service.name)
        .all()
    )


def get_service(db: Session, service_id: str) -> Optional[models.Service]:
    return db.query(models.Service).filter_by(id=service_id).first()


def get_service_due_dates(db: Session, service_id: str) -> List[str]:
    """Distinct due days of the service's live projects, ascending."""
    rows = (
        db.query(models.Project.due_date)
        .join(models.ProjectType, models.Project.project_type_id == models.ProjectType.id)
        .filter(
            models.ProjectType.service_id == service_id,
            models.Project.archived == False,  # noqa: E712
            models.Project.due_date.is_not(None),
        )
        .all()
    )
    return sorted({due.date().isoformat() for (due,) in rows})


def get_clients(db: Session) -> List[models.Client]:
    return db.query(models.Client).order_by(models.Client.name).all()


def get_project_types(db: Session) -> List[models.ProjectType]:
    return (
        db.query(models.ProjectType)
        .filter(models.ProjectType.is_active == True)  # noqa: E712
        .order_by(models.ProjectType.name)
        .all()
    )


def get_stages(db: Session) -> List[models.Stage]:
    return db.query(models.Stage).order_by(models.Stage.project_type_id, models.Stage.sort_order).all()


def get_users(db: Session) -> List[models.User]:
    return (
        db.query(models.User)
        .filter(models.User.is_active == True)  # noqa: E712
        .order_by(models.User.first_name, models.User.last_name, models.User.email)
        .all()
    )
