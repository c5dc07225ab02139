from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from practice.crud.view import (
    create_view,
    delete_view as crud_delete_view,
    get_view,
    list_views as crud_list_views,
    update_view as crud_update_view,
)
from practice.db.session import get_db
from practice.models.core_entities import User
from practice.models.view import ProjectView
from practice.routers.auth_dependencies import get_me
from practice.schemas.view import ProjectViewCreate, ProjectViewOut, ProjectViewUpdate

router = APIRouter(prefix="/api/project-views", tags=["Views"])


def _owned_view(db: Session, view_id: str, user: User) -> ProjectView:
    v = get_view(db, view_id)
    if not v or str(v.user_id) != str(user.id):
        raise HTTPException(status_code=404, detail="View not found")
    return v


@router.get("", response_model=List[ProjectViewOut], summary="List my saved project views")
def list_views(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_me),
):
    return crud_list_views(db, user_id=str(current_user.id))


@router.post(
    "",
    response_model=ProjectViewOut,
    status_code=status.HTTP_201_CREATED,
    summary="Save the current filters as a named view",
)
def create_view_endpoint(
    data: ProjectViewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_me),
):
    return create_view(db, user_id=str(current_user.id), data=data)


@router.get("/{view_id}", response_model=ProjectViewOut, summary="Get a saved view (owner-only)")
def get_view_endpoint(
    view_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_me),
):
    return _owned_view(db, view_id, current_user)


@router.patch("/{view_id}", response_model=ProjectViewOut, summary="Update a saved view (owner-only)")
def update_view_endpoint(
    view_id: str,
    data: ProjectViewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_me),
):
    return crud_update_view(db, _owned_view(db, view_id, current_user), data)


@router.delete("/{view_id}", summary="Delete a saved view (owner-only)")
def delete_view_endpoint(
    view_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_me),
):
    crud_delete_view(db, _owned_view(db, view_id, current_user))
    return {"detail": "View deleted"}
