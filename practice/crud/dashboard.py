# File: /practice/crud/dashboard.py | Version: 1.0 | Title: CRUD helpers for Dashboards
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from practice.models.view import Dashboard
from practice.schemas.view import DashboardCreate, DashboardUpdate

_REQUIRED = ("name", "widgets", "visibility", "is_homescreen_dashboard")


def _columns(data: Dict[str, Any]) -> Dict[str, Any]:
    if data.get("widgets") is not None:
        data["widgets"] = [dict(w) for w in data["widgets"]]
    return data


def create_dashboard(db: Session, user_id: str, data: DashboardCreate) -> Dashboard:
    d = Dashboard(user_id=user_id, **_columns(data.model_dump(mode="json")))
    db.add(d)
    db.commit()
    db.refresh(d)
    return d


def get_dashboard(db: Session, dashboard_id: str) -> Optional[Dashboard]:
    return db.query(Dashboard).filter(Dashboard.id == dashboard_id).first()


def list_dashboards(db: Session, user_id: str) -> List[Dashboard]:
    """The user's own dashboards plus dashboards shared by others."""
    return (
        db.query(Dashboard)
        .filter(or_(Dashboard.user_id == user_id, Dashboard.visibility == "shared"))
        .order_by(Dashboard.is_homescreen_dashboard.desc(), Dashboard.name)
        .all()
    )


def update_dashboard(db: Session, d: Dashboard, data: DashboardUpdate) -> Dashboard:
    changes = _columns(data.model_dump(mode="json", exclude_unset=True))
    for field, value in changes.items():
        if value is None and field in _REQUIRED:
            continue
        setattr(d, field, value)
    db.commit()
    db.refresh(d)
    return d


def delete_dashboard(db: Session, d: Dashboard) -> bool:
    db.delete(d)
    db.commit()
    return True
