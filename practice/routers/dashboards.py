from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from practice.crud import dashboard as crud_dashboard
from practice.db.session import get_db
from practice.models.core_entities import User
from practice.models.view import Dashboard
from practice.routers.auth_dependencies import get_me
from practice.schemas.view import DashboardCreate, DashboardOut, DashboardUpdate

router = APIRouter(prefix="/api/dashboards", tags=["Dashboards"])


def _visible(db: Session, dashboard_id: str, user: User) -> Dashboard:
    d = crud_dashboard.get_dashboard(db, dashboard_id)
    if not d or (str(d.user_id) != str(user.id) and d.visibility != "shared"):
        raise HTTPException(status_code=404, detail="Dashboard not found")
    return d


def _owned(db: Session, dashboard_id: str, user: User) -> Dashboard:
    d = _visible(db, dashboard_id, user)
    if str(d.user_id) != str(user.id):
        raise HTTPException(status_code=403, detail="Only the owner can change this dashboard")
    return d


@router.get("", response_model=List[DashboardOut], summary="My dashboards and dashboards shared with me")
def list_dashboards(db: Session = Depends(get_db), current_user: User = Depends(get_me)):
    return crud_dashboard.list_dashboards(db, user_id=str(current_user.id))


@router.post("", response_model=DashboardOut, status_code=status.HTTP_201_CREATED, summary="Create a dashboard")
def create_dashboard(
    data: DashboardCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_me),
):
    return crud_dashboard.create_dashboard(db, user_id=str(current_user.id), data=data)


@router.get("/{dashboard_id}", response_model=DashboardOut, summary="Get a dashboard")
def get_dashboard(dashboard_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_me)):
    return _visible(db, dashboard_id, current_user)


@router.patch("/{dashboard_id}", response_model=DashboardOut, summary="Update a dashboard (owner-only)")
def update_dashboard(
    dashboard_id: str,
    data: DashboardUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_me),
):
    return crud_dashboard.update_dashboard(db, _owned(db, dashboard_id, current_user), data)


@router.delete("/{dashboard_id}", summary="Delete a dashboard (owner-only)")
def delete_dashboard(dashboard_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_me)):
    crud_dashboard.delete_dashboard(db, _owned(db, dashboard_id, current_user))
    return {"detail": "Dashboard deleted"}
